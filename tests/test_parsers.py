"""
Tests for output parsers — json, ini, config values, line lists.
"""

import textwrap

import pytest

from npm_facade.core.services.parsers import (
    PARSERS,
    get_parser,
    parse_config_value,
    parse_ini,
    parse_json,
    parse_lines,
    parse_raw,
)


class TestSimpleParsers:
    def test_raw_is_identity(self):
        assert parse_raw("  a\nb ") == "  a\nb "

    def test_json(self):
        assert parse_json('{"name": "lodash", "versions": ["4.17.21"]}') == {
            "name": "lodash",
            "versions": ["4.17.21"],
        }

    def test_json_invalid_raises_value_error(self):
        with pytest.raises(ValueError):
            parse_json("npm ERR! not json")

    def test_lines_drops_empty(self):
        assert parse_lines("latest: 1.0.0\n\nnext: 2.0.0-rc.1\n") == [
            "latest: 1.0.0",
            "next: 2.0.0-rc.1",
        ]

    def test_lines_empty_output(self):
        assert parse_lines("") == []


class TestConfigValue:
    def test_empty(self):
        assert parse_config_value("") == ""

    def test_booleans(self):
        assert parse_config_value("true") is True
        assert parse_config_value("false") is False

    def test_null_and_undefined(self):
        assert parse_config_value("null") is None
        assert parse_config_value("undefined") is None

    def test_numbers(self):
        assert parse_config_value("3") == 3
        assert parse_config_value("0.5") == 0.5

    def test_quoted_string(self):
        assert parse_config_value('"^"') == "^"
        assert parse_config_value("'~'") == "~"

    def test_non_literal_falls_back_to_text(self):
        assert parse_config_value("https://registry.npmjs.org/") == "https://registry.npmjs.org/"
        assert parse_config_value("/usr/local") == "/usr/local"

    def test_never_executes_code(self):
        expr = "__import__('os').getcwd()"
        assert parse_config_value(expr) == expr


class TestIni:
    def test_npm_config_list(self):
        output = textwrap.dedent("""\
            ; "user" config from /home/dev/.npmrc

            registry = "https://registry.npmjs.org/"
            save-exact = true
            init-author-name = "Dev Person"
            @acme:registry = "https://npm.acme.dev/"

            ; node bin location = /usr/bin/node
            ; cwd = /srv/app
            ; Run `npm config ls -l` to show all defaults.
        """)
        assert parse_ini(output) == {
            "registry": "https://registry.npmjs.org/",
            "save-exact": True,
            "init-author-name": "Dev Person",
            "@acme:registry": "https://npm.acme.dev/",
        }

    def test_keys_keep_case(self):
        assert parse_ini("Prefix = /opt") == {"Prefix": "/opt"}

    def test_unquoted_and_null(self):
        assert parse_ini("a = plain value\nb = null\nc = false") == {
            "a": "plain value",
            "b": None,
            "c": False,
        }

    def test_quoted_keywords(self):
        assert parse_ini("a = \"true\"\nb = 'null'\nc = \"false\"\nd = \"truthy\"") == {
            "a": True,
            "b": None,
            "c": False,
            "d": "truthy",
        }

    def test_sections_nest(self):
        output = textwrap.dedent("""\
            top = 1
            [a.b]
            inner = "x"
            [plain]
            k = v
        """)
        assert parse_ini(output) == {
            "top": "1",
            "a": {"b": {"inner": "x"}},
            "plain": {"k": "v"},
        }

    def test_arrays(self):
        output = "ca[] = first\nca[] = second\nother = 1"
        assert parse_ini(output) == {"ca": ["first", "second"], "other": "1"}

    def test_indented_lines_are_not_continuations(self):
        assert parse_ini("a = 1\n   b = 2") == {"a": "1", "b": "2"}

    def test_bare_key_is_true(self):
        assert parse_ini("long") == {"long": True}

    def test_empty(self):
        assert parse_ini("") == {}

    def test_comment_only(self):
        assert parse_ini("; nothing here\n# or here") == {}


class TestRegistry:
    def test_all_parsers_registered(self):
        assert set(PARSERS) == {"raw", "json", "ini", "config_value", "lines"}

    def test_get_parser(self):
        assert get_parser("lines") is parse_lines

    def test_unknown_parser(self):
        with pytest.raises(KeyError, match="Unknown output parser"):
            get_parser("yaml")
