"""Tests for call discovery and argument decomposition."""

import pytest

from tempest_views.call_analyzer import find_function_calls, parse_single_argument
from tempest_views.errors import ParseError

PARAMETER_FIXTURE = """<?php
namespace My\\Namespace\\Controllers;

use function Tempest\\view;

final readonly class HomeController
{
    public function simple(): View
    {
        return view('template.view.php');
    }

    public function withData(): View
    {
        return view('template.view.php', ['key' => 'value']);
    }

    public function complex(): View
    {
        return view(
            __DIR__ . '/../Views/home.view.php',
            $this->getData(),
            $options
        );
    }
}"""


def _view_calls(parse_php, code):
    tree, source = parse_php(code)
    return [c for c in find_function_calls(tree, source) if c.function_name == "view"]


class TestPositionalArguments:
    def test_single_string_argument(self, parse_php):
        calls = _view_calls(parse_php, PARAMETER_FIXTURE)

        param = calls[0].parameters[0]
        assert param.value == "'template.view.php'"
        assert param.raw_text == "'template.view.php'"
        assert param.name is None

    def test_array_argument_kept_verbatim(self, parse_php):
        calls = _view_calls(parse_php, PARAMETER_FIXTURE)

        assert [p.value for p in calls[1].parameters] == [
            "'template.view.php'",
            "['key' => 'value']",
        ]

    def test_multiline_call_keeps_source_order(self, parse_php):
        calls = _view_calls(parse_php, PARAMETER_FIXTURE)

        assert len(calls) == 3
        assert [p.value for p in calls[2].parameters] == [
            "__DIR__ . '/../Views/home.view.php'",
            "$this->getData()",
            "$options",
        ]
        assert calls[2].line == 20

    def test_no_arguments(self, parse_php):
        calls = _view_calls(parse_php, "<?php view();")

        assert calls[0].parameters == []
        assert calls[0].text == "view()"


class TestNamedArguments:
    def test_named_argument(self, parse_php):
        calls = _view_calls(
            parse_php, "<?php\nreturn view(path: __DIR__ . '/../Views/home.view.php');\n"
        )

        param = calls[0].parameters[0]
        assert param.name == "path"
        assert param.value == "__DIR__ . '/../Views/home.view.php'"
        assert param.raw_text == "path: __DIR__ . '/../Views/home.view.php'"

    def test_named_argument_whitespace_collapsed_in_value_only(self, parse_php):
        calls = _view_calls(parse_php, "<?php view(path:\n    'home.view.php');")

        param = calls[0].parameters[0]
        assert param.value == "'home.view.php'"
        assert param.raw_text == "path:\n    'home.view.php'"

    def test_mixed_positional_and_named(self, parse_php):
        calls = _view_calls(parse_php, "<?php view('a.view.php', title: $title);")

        assert [(p.name, p.value) for p in calls[0].parameters] == [
            (None, "'a.view.php'"),
            ("title", "$title"),
        ]

    def test_punctuation_and_colon_tokens_excluded(self, make_node):
        source = "path : 'x'"
        name = make_node("name", 0, 4)
        colon = make_node(":", 5, 6)
        value = make_node("string", 7, 10)
        argument = make_node("argument", 0, 10, children=[name, colon, value], fields={"name": name})

        param = parse_single_argument(argument, source.encode())

        assert param.name == "path"
        assert param.value == "'x'"
        assert param.raw_text == source


class TestCalls:
    def test_every_call_is_reported(self, parse_php):
        tree, code = parse_php("<?php\nfoo(1);\nview('a');\nstrlen('b');\n")

        calls = find_function_calls(tree, code)

        assert [(c.function_name, c.line) for c in calls] == [
            ("foo", 2),
            ("view", 3),
            ("strlen", 4),
        ]

    def test_callee_name_is_not_normalized(self, parse_php):
        tree, code = parse_php("<?php Tempest\\view('a'); \\Tempest\\view('b');")

        names = [c.function_name for c in find_function_calls(tree, code)]

        assert names == ["Tempest\\view", "\\Tempest\\view"]

    def test_nested_call_inside_argument(self, parse_php):
        tree, code = parse_php("<?php view(path('home'));")

        calls = find_function_calls(tree, code)

        assert [c.function_name for c in calls] == ["view", "path"]
        assert calls[0].parameters[0].value == "path('home')"

    def test_multibyte_text_before_call(self, parse_php):
        tree, code = parse_php("<?php\n// résumé ünïcode\nview('é.view.php');\n")

        call = find_function_calls(tree, code)[0]

        assert call.line == 3
        assert call.text == "view('é.view.php')"

    def test_call_without_function_field_is_dropped(self, make_node):
        source = "view(1)"
        callee = make_node("name", 0, 4)
        broken = make_node("function_call_expression", 0, 7)
        good = make_node("function_call_expression", 0, 7, children=[callee], fields={"function": callee})
        root = make_node("program", 0, 7, children=[broken, good])

        calls = find_function_calls(root, source)

        assert len(calls) == 1
        assert calls[0].function_name == "view"

    def test_unreadable_argument_is_dropped(self, make_node):
        source = "view(1, 2)"
        callee = make_node("name", 0, 4)
        bad_arg = make_node("argument", 5, 99)
        good_arg = make_node("argument", 8, 9)
        arguments = make_node("arguments", 4, 10, children=[bad_arg, good_arg])
        call = make_node(
            "function_call_expression", 0, 10,
            children=[callee, arguments],
            fields={"function": callee, "arguments": arguments},
        )

        calls = find_function_calls(make_node("program", 0, 10, children=[call]), source)

        assert [p.value for p in calls[0].parameters] == ["2"]

    def test_unwalkable_tree_raises(self):
        with pytest.raises(ParseError):
            find_function_calls(None, "")
