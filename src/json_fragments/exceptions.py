"""Exception classes for json-fragments."""

from collections.abc import Sequence


class FragmentsError(Exception):
    """Base exception for all json-fragments errors."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(f"{message} at {path}" if path else message)
        self.message = message
        self.path = path


class FragmentNotFoundError(FragmentsError):
    """A referenced or start fragment has no entry in the fragment map."""

    def __init__(self, fragment_name: str, path: str | None = None):
        super().__init__(f"Fragment not found: {fragment_name}", path)
        self.fragment_name = fragment_name


class CircularDependencyError(FragmentsError):
    """A fragment transitively references itself."""

    def __init__(self, cycle: Sequence[str]):
        super().__init__(f"Circular dependency detected: {' -> '.join(cycle)}")
        self.cycle = list(cycle)


class InvalidKeyError(FragmentsError):
    """A value used as an object key or spliced into a template is not a string."""


class LoaderError(FragmentsError):
    """An error reading fragments from JSON files."""
