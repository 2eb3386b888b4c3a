import logging
from collections.abc import Mapping

from pydantic import JsonValue

from json_fragments.config import ResolverConfig
from json_fragments.nodes import ArrayNode, LiteralNode, Node, ObjectNode, ReferenceNode, StringTemplateNode
from json_fragments.syntax import extract_fragment_name, is_template, is_whole_reference, iter_embedded_names
from json_fragments.tracker import DependencyTracker

logger = logging.getLogger(__name__)


class FragmentParser:
    """Builds node trees from raw fragment values, following references to surface cycles early."""

    def __init__(
        self,
        fragments: Mapping[str, JsonValue],
        config: ResolverConfig,
        tracker: DependencyTracker | None = None,
    ):
        self.fragments = fragments
        self.config = config
        self.tracker = tracker or DependencyTracker()

    @property
    def dependencies(self) -> dict[str, set[str]]:
        return self.tracker.dependencies

    def parse_fragment(self, fragment_name: str) -> Node:
        """Parse the body of a named fragment while it is marked as being evaluated.

        Raises:
            KeyError: If the fragment is not in the map
            CircularDependencyError: If the fragment is already being parsed
        """
        with self.tracker.evaluating(fragment_name):
            return self.parse(self.fragments[fragment_name], fragment_name)

    def parse(self, value: JsonValue, current_fragment: str = "") -> Node:
        """Convert one JSON value into a node.

        Args:
            value: Raw JSON value
            current_fragment: Name of the fragment the value belongs to; empty
                disables dependency recording and descent into referenced fragments

        Returns:
            Node tree for the value
        """
        match value:
            case str():
                return self._parse_string(value, current_fragment)
            case dict():
                entries = tuple((self._parse_key(key, current_fragment), self.parse(item, current_fragment)) for key, item in value.items())
                return ObjectNode(entries)
            case list():
                return ArrayNode(tuple(self.parse(item, current_fragment) for item in value))
            case _:
                return LiteralNode(value)

    def _parse_string(self, value: str, current_fragment: str) -> Node:
        if is_whole_reference(value, self.config):
            fragment_name = extract_fragment_name(value, self.config)
            return ReferenceNode(fragment_name, self._follow(current_fragment, fragment_name))

        if is_template(value, self.config):
            for fragment_name in iter_embedded_names(value, self.config):
                self._follow(current_fragment, fragment_name)
            return StringTemplateNode(value)

        return LiteralNode(value)

    def _parse_key(self, key: str, current_fragment: str) -> LiteralNode | ReferenceNode:
        if is_whole_reference(key, self.config):
            fragment_name = extract_fragment_name(key, self.config)
            return ReferenceNode(fragment_name, self._follow(current_fragment, fragment_name))
        return LiteralNode(key)

    def _follow(self, current_fragment: str, fragment_name: str) -> Node | None:
        """Record a reference edge and parse the referenced fragment's body."""
        if not current_fragment:
            return None

        if fragment_name not in self.fragments:
            logger.debug(f"Fragment '{current_fragment}' references missing fragment '{fragment_name}'")
            self.tracker.add_dependency(current_fragment, fragment_name)
            return None

        # entering first makes a re-entry fail with the path rooted at the entry point
        with self.tracker.evaluating(fragment_name):
            self.tracker.add_dependency(current_fragment, fragment_name)
            logger.debug(f"Descending from '{current_fragment}' into '{fragment_name}'")
            return self.parse(self.fragments[fragment_name], fragment_name)
