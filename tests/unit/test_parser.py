import pytest

from json_fragments import CircularDependencyError, FragmentParser, ResolverConfig
from json_fragments.nodes import ArrayNode, LiteralNode, ObjectNode, ReferenceNode, StringTemplateNode, iter_references


@pytest.fixture
def config():
    return ResolverConfig()


class TestClassification:
    @pytest.mark.parametrize("value", [42, 3.14, True, False, None, "plain text", "closing only]"])
    def test_literals(self, config, value):
        assert FragmentParser({}, config).parse(value) == LiteralNode(value)

    @pytest.mark.parametrize("value", ["Hello, [name]!", "x [a] and [b]", "[", "[unterminated"])
    def test_templates(self, config, value):
        assert FragmentParser({}, config).parse(value) == StringTemplateNode(value)

    def test_whole_reference_without_current_fragment(self, config):
        parser = FragmentParser({"name": "Bob"}, config)
        assert parser.parse("[name]") == ReferenceNode("name")
        assert parser.dependencies == {}

    def test_empty_reference(self, config):
        assert FragmentParser({}, config).parse("[]") == ReferenceNode("")

    def test_object_keys(self, config):
        node = FragmentParser({}, config).parse({"plain": 1, "[dynamic]": "[value]"})
        assert node == ObjectNode(
            (
                (LiteralNode("plain"), LiteralNode(1)),
                (ReferenceNode("dynamic"), ReferenceNode("value")),
            )
        )

    def test_template_key_stays_literal(self, config):
        node = FragmentParser({}, config).parse({"prefix_[name]": 1})
        assert node == ObjectNode(((LiteralNode("prefix_[name]"), LiteralNode(1)),))

    def test_array_order(self, config):
        node = FragmentParser({}, config).parse([1, "[a]", "x [b]"])
        assert node == ArrayNode((LiteralNode(1), ReferenceNode("a"), StringTemplateNode("x [b]")))


class TestDescent:
    def test_reference_target_is_parsed(self, config):
        parser = FragmentParser({"n": 42, "c": {"v": "[n]"}}, config)
        node = parser.parse_fragment("c")

        assert node == ObjectNode(((LiteralNode("v"), ReferenceNode("n", LiteralNode(42))),))
        assert parser.dependencies == {"c": {"n"}}

    def test_missing_target_records_edge_only(self, config):
        parser = FragmentParser({"c": ["[gone]"]}, config)
        assert parser.parse_fragment("c") == ArrayNode((ReferenceNode("gone"),))
        assert parser.dependencies == {"c": {"gone"}}

    def test_nested_targets(self, config):
        fragments = {"name": "Bob", "user": {"name": "[name]"}, "doc": "[user]"}
        node = FragmentParser(fragments, config).parse_fragment("doc")
        assert node == ReferenceNode("user", ObjectNode(((LiteralNode("name"), ReferenceNode("name", LiteralNode("Bob"))),)))

    def test_evaluation_stack_is_empty_afterwards(self, config):
        parser = FragmentParser({"a": "[b]", "b": "x [c]", "c": "y"}, config)
        parser.parse_fragment("a")
        assert parser.tracker.currently_evaluating == frozenset()

    def test_cycle_is_detected_while_parsing(self, config):
        parser = FragmentParser({"a": {"x": "[b]"}, "b": ["[a]"]}, config)
        with pytest.raises(CircularDependencyError, match="a -> b -> a"):
            parser.parse_fragment("a")
        assert parser.tracker.currently_evaluating == frozenset()

    def test_custom_delimiters(self):
        config = ResolverConfig(delimiter_start="${", delimiter_end="}")
        parser = FragmentParser({"n": 1}, config)
        assert parser.parse("${n}", "doc") == ReferenceNode("n", LiteralNode(1))
        assert parser.parse("[n]", "doc") == LiteralNode("[n]")


def test_iter_references(config):
    node = FragmentParser({}, config).parse({"k": "[a]", "[b]": ["x [c] [d]", 1]})
    assert list(iter_references(node, config)) == ["a", "b", "c", "d"]
