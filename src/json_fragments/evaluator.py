"""Evaluation of parsed fragment trees into plain JSON values."""

import copy
import logging
from collections.abc import Mapping

from pydantic import JsonValue

from json_fragments.config import MissingFragmentBehavior, ResolverConfig
from json_fragments.context import EvaluationContext
from json_fragments.exceptions import CircularDependencyError, FragmentNotFoundError, InvalidKeyError
from json_fragments.nodes import ArrayNode, LiteralNode, Node, ObjectNode, ReferenceNode, StringTemplateNode
from json_fragments.syntax import find_reference

logger = logging.getLogger(__name__)


def evaluate(
    node: Node,
    fragments: Mapping[str, JsonValue],
    config: ResolverConfig,
    context: EvaluationContext | None = None,
) -> JsonValue:
    """Produce the JSON value of a node tree.

    Args:
        node: Root of the tree to evaluate
        fragments: Fragment map references are looked up in, never modified
        config: Delimiters and missing-reference policy
        context: Location tracker for error messages, a fresh one if omitted

    Returns:
        The value with every reference substituted

    Raises:
        FragmentNotFoundError: If a reference is missing and the policy is 'throw'
        InvalidKeyError: If an object key or template substitution is not a string
    """
    if context is None:
        context = EvaluationContext()

    match node:
        case LiteralNode(value=value):
            return value
        case ReferenceNode():
            return _evaluate_reference(node, fragments, config, context)
        case StringTemplateNode(text=text):
            return substitute_template(text, fragments, config, context)
        case ObjectNode(entries=entries):
            result: dict[str, JsonValue] = {}
            for key_node, value_node in entries:
                key = evaluate(key_node, fragments, config, context)
                if not isinstance(key, str):
                    raise InvalidKeyError(f"Object key must evaluate to string, got {type(key).__name__}", context.path_string())
                with context.scoped(key):
                    result[key] = evaluate(value_node, fragments, config, context)
            return result
        case ArrayNode(elements=elements):
            items: list[JsonValue] = []
            for index, element in enumerate(elements):
                with context.scoped(str(index)):
                    items.append(evaluate(element, fragments, config, context))
            return items
        case _:
            raise TypeError(f"Unsupported node type: {type(node).__name__}")


def _evaluate_reference(
    node: ReferenceNode,
    fragments: Mapping[str, JsonValue],
    config: ResolverConfig,
    context: EvaluationContext,
) -> JsonValue:
    if node.fragment_name not in fragments:
        logger.debug(f"Missing fragment '{node.fragment_name}' at {context.path_string()}, policy '{config.missing_fragment_behavior}'")
        match config.missing_fragment_behavior:
            case MissingFragmentBehavior.THROW:
                raise FragmentNotFoundError(node.fragment_name, context.path_string())
            case MissingFragmentBehavior.LEAVE_UNRESOLVED:
                return config.wrap(node.fragment_name)
            case MissingFragmentBehavior.USE_DEFAULT:
                return copy.deepcopy(config.default_value)
            case MissingFragmentBehavior.REMOVE:
                return ""

    with context.scoped(node.fragment_name):
        if node.target is not None:
            return evaluate(node.target, fragments, config, context)
        return copy.deepcopy(fragments[node.fragment_name])


def _template_value(fragment_name: str, fragments: Mapping[str, JsonValue], config: ResolverConfig, context: EvaluationContext) -> str | None:
    """Text to splice in place of one embedded reference, None to leave it untouched."""
    if fragment_name not in fragments:
        match config.missing_fragment_behavior:
            case MissingFragmentBehavior.THROW:
                raise FragmentNotFoundError(fragment_name, context.path_string())
            case MissingFragmentBehavior.LEAVE_UNRESOLVED:
                return None
            case MissingFragmentBehavior.USE_DEFAULT:
                if not isinstance(config.default_value, str):
                    raise InvalidKeyError("Default value for string template must be string", context.path_string())
                return config.default_value
            case MissingFragmentBehavior.REMOVE:
                return ""

    value = fragments[fragment_name]
    if not isinstance(value, str):
        raise InvalidKeyError(f"Fragment in string template must resolve to string: {fragment_name}", context.path_string())
    return value


def substitute_template(
    text: str,
    fragments: Mapping[str, JsonValue],
    config: ResolverConfig,
    context: EvaluationContext,
) -> str:
    """Replace embedded references in a string, innermost first, until nothing changes.

    Every character remembers the chain of fragments it was spliced from. A
    reference whose own text came out of the fragment it names can only expand
    forever, so it is reported as a cycle.

    Raises:
        CircularDependencyError: If a reference is rebuilt from its own fragment's text
    """
    result = text
    origins: list[tuple[str, ...]] = [()] * len(text)
    passes = 0
    made_changes = True

    while made_changes:
        made_changes = False
        passes += 1
        pos = 0

        while True:
            span = find_reference(result, pos, config)
            if span is None:
                break

            chain = tuple(dict.fromkeys(name for origin in origins[span.start : span.end] for name in origin))
            if span.name in chain:
                raise CircularDependencyError([*chain[chain.index(span.name) :], span.name])

            with context.scoped(f"template:{span.name}"):
                replacement = _template_value(span.name, fragments, config, context)

            if replacement is None:
                pos = span.end
                continue

            result = result[: span.start] + replacement + result[span.end :]
            origins[span.start : span.end] = [(*chain, span.name)] * len(replacement)
            made_changes = True

    logger.debug(f"Template at {context.path_string()} settled after {passes} pass(es)")
    return result
