"""Node types of a parsed fragment."""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from pydantic import JsonValue

from json_fragments.config import ResolverConfig
from json_fragments.syntax import iter_embedded_names


@dataclass(frozen=True)
class LiteralNode:
    value: JsonValue


@dataclass(frozen=True)
class ReferenceNode:
    fragment_name: str
    # parsed body of the referenced fragment, None when the parser did not descend
    target: Union["Node", None] = None


@dataclass(frozen=True)
class StringTemplateNode:
    text: str


@dataclass(frozen=True)
class ObjectNode:
    entries: tuple[tuple[Union[LiteralNode, ReferenceNode], "Node"], ...] = ()


@dataclass(frozen=True)
class ArrayNode:
    elements: tuple["Node", ...] = ()


Node = LiteralNode | ReferenceNode | StringTemplateNode | ObjectNode | ArrayNode


def iter_references(node: Node, config: ResolverConfig) -> Iterator[str]:
    """Yield every fragment name the tree refers to, in document order.

    Public helper for tools inspecting parsed trees. Only the tree itself is
    walked; targets of reference nodes are not entered.
    """
    match node:
        case ReferenceNode(fragment_name=name):
            yield name
        case StringTemplateNode(text=text):
            yield from iter_embedded_names(text, config)
        case ObjectNode(entries=entries):
            for key_node, value_node in entries:
                yield from iter_references(key_node, config)
                yield from iter_references(value_node, config)
        case ArrayNode(elements=elements):
            for element in elements:
                yield from iter_references(element, config)
        case LiteralNode():
            return
