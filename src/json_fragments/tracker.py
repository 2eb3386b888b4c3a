"""Cycle detection among fragment-to-fragment references."""

from collections.abc import Iterator
from contextlib import contextmanager

from json_fragments.exceptions import CircularDependencyError


class DependencyTracker:
    """Records which fragments reference which, and rejects cycles.

    Two detectors are kept. The evaluation stack catches a cycle as soon as a
    fragment is re-entered while its own AST is still being built; the parser
    always enters a fragment before recording the edge that led to it, so this
    is the one that fires during resolution and its report starts at the entry
    point. The graph search in add_dependency checks the accumulated edge set
    and serves callers that feed edges directly.
    """

    def __init__(self):
        self.dependencies: dict[str, set[str]] = {}
        self._evaluating: list[str] = []

    @property
    def currently_evaluating(self) -> frozenset[str]:
        return frozenset(self._evaluating)

    def add_dependency(self, dependent: str, dependency: str) -> None:
        """Record that `dependent` references `dependency`.

        Raises:
            CircularDependencyError: If the new edge closes a cycle
        """
        if not dependent:
            return

        self.dependencies.setdefault(dependent, set()).add(dependency)

        cycle = self._find_cycle(dependent, visited=set(), path=[])
        if cycle:
            raise CircularDependencyError(cycle)

    def begin_evaluation(self, fragment_name: str) -> None:
        if fragment_name in self._evaluating:
            cycle = self._evaluating[self._evaluating.index(fragment_name) :]
            raise CircularDependencyError([*cycle, fragment_name])
        self._evaluating.append(fragment_name)

    def end_evaluation(self, fragment_name: str) -> None:
        if fragment_name in self._evaluating:
            self._evaluating.remove(fragment_name)

    @contextmanager
    def evaluating(self, fragment_name: str) -> Iterator[None]:
        """Bracket the processing of one fragment, releasing it on every exit path."""
        self.begin_evaluation(fragment_name)
        try:
            yield
        finally:
            self.end_evaluation(fragment_name)

    def _find_cycle(self, node: str, visited: set[str], path: list[str]) -> list[str] | None:
        if node in path:
            return [*path[path.index(node) :], node]

        # fully explored from another branch without a cycle (diamond)
        if node in visited:
            return None

        visited.add(node)
        path.append(node)

        for dependency in sorted(self.dependencies.get(node, ())):
            cycle = self._find_cycle(dependency, visited, path)
            if cycle:
                return cycle

        path.pop()
        return None
