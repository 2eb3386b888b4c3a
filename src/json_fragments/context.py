from collections.abc import Iterator
from contextlib import contextmanager


class EvaluationContext:
    """Tracks the location inside the document being evaluated, for error messages."""

    def __init__(self, components: list[str] | None = None):
        self._path: list[str] = list(components or [])

    @property
    def path(self) -> tuple[str, ...]:
        return tuple(self._path)

    def push(self, component: str) -> None:
        self._path.append(component)

    def pop(self) -> None:
        if self._path:
            self._path.pop()

    @contextmanager
    def scoped(self, component: str) -> Iterator["EvaluationContext"]:
        """Push a path component for the duration of the block."""
        self.push(component)
        try:
            yield self
        finally:
            self.pop()

    def path_string(self) -> str:
        """Render the path as '/a/b/2', or '/' at the top level."""
        return "".join(f"/{component}" for component in self._path) or "/"
