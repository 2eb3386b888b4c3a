import logging
from collections.abc import Mapping

from pydantic import JsonValue

from json_fragments.config import ResolverConfig
from json_fragments.context import EvaluationContext
from json_fragments.evaluator import evaluate
from json_fragments.exceptions import FragmentNotFoundError
from json_fragments.parser import FragmentParser
from json_fragments.tracker import DependencyTracker

logger = logging.getLogger(__name__)


class Resolver:
    """Resolves named JSON fragments into fully substituted values.

    Only the configuration lives on the instance; the dependency tracker,
    evaluation context and node tree are created per call, so one resolver can
    serve any number of independent or concurrent calls.
    """

    def __init__(self, config: ResolverConfig | None = None):
        self.config = config or ResolverConfig()

    def resolve(self, fragments: Mapping[str, JsonValue], start_fragment: str) -> JsonValue:
        """Resolve one fragment and everything it references.

        Args:
            fragments: Fragment map, read only
            start_fragment: Name of the fragment to resolve

        Returns:
            The fragment's value with every reference substituted

        Raises:
            FragmentNotFoundError: If start_fragment is not in the map, whatever
                the missing-reference policy, or a reference is missing under 'throw'
            CircularDependencyError: If the fragment takes part in a reference cycle
            InvalidKeyError: If a key or template substitution is not a string
        """
        if start_fragment not in fragments:
            raise FragmentNotFoundError(start_fragment)

        logger.debug(f"Resolving fragment '{start_fragment}'")
        context = EvaluationContext()
        parser = FragmentParser(fragments, self.config, DependencyTracker())

        with context.scoped(start_fragment):
            root = parser.parse_fragment(start_fragment)
            return evaluate(root, fragments, self.config, context)

    def resolve_all(self, fragments: Mapping[str, JsonValue]) -> dict[str, JsonValue]:
        """Resolve every fragment of the map, in map order."""
        return {name: self.resolve(fragments, name) for name in fragments}

    def dependencies(self, fragments: Mapping[str, JsonValue], start_fragment: str) -> dict[str, set[str]]:
        """Dependency edges discovered while parsing start_fragment, without evaluating it."""
        if start_fragment not in fragments:
            raise FragmentNotFoundError(start_fragment)

        parser = FragmentParser(fragments, self.config, DependencyTracker())
        parser.parse_fragment(start_fragment)
        return {name: set(deps) for name, deps in parser.dependencies.items()}
