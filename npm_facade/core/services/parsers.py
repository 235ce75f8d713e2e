"""
Output parsers — turn npm's stdout into Python values.

Each parser takes the raw stdout string (final newline already removed)
and returns a value. Parsers are looked up by name from CommandSpec.
"""

from __future__ import annotations

import ast
import configparser
import json
from collections.abc import Callable
from typing import Any

Parser = Callable[[str], Any]

# Top-level keys of ``npm config list`` sit outside any section
_ROOT_SECTION = "__root__"

_KEYWORDS = {"true": True, "false": False, "null": None}


def parse_raw(output: str) -> str:
    """Identity — hand the text back unchanged."""
    return output


def parse_json(output: str) -> Any:
    return json.loads(output)


def parse_lines(output: str) -> list[str]:
    """Split on newlines and drop empty lines."""
    return [line for line in output.split("\n") if line]


def parse_config_value(output: str) -> Any:
    """Evaluate a ``npm config get`` answer as a literal.

    ``true`` → True, ``5`` → 5, ``"x"`` → "x". Anything that is not a
    literal (a URL, a path) comes back as the raw string. Empty output
    gives an empty string. No code is executed.
    """
    if not output:
        return ""
    text = output.strip()
    if text == "undefined":
        return None
    try:
        return json.loads(text)
    except ValueError:
        pass
    try:
        return ast.literal_eval(text)
    except (ValueError, SyntaxError, MemoryError, RecursionError):
        return output


def parse_ini(output: str) -> dict[str, Any]:
    """Parse npm's INI-style config dump into a nested dict.

    - ``;`` and ``#`` lines are comments.
    - ``[a.b]`` sections nest as ``{"a": {"b": {...}}}``.
    - ``key[] = v`` entries accumulate into a list.
    - Double-quoted values are JSON-unquoted, single quotes stripped.
    - ``true`` / ``false`` / ``null`` become Python values.
    """
    parser = configparser.RawConfigParser(
        delimiters=("=",),
        comment_prefixes=(";", "#"),
        inline_comment_prefixes=None,
        strict=False,
        allow_no_value=True,
        empty_lines_in_values=False,
        interpolation=None,
        default_section="\x00",
    )
    parser.optionxform = str  # type: ignore[assignment,method-assign]

    # Array entries repeat the same key; configparser keeps only the last,
    # so give each occurrence a unique key and fold them back afterwards.
    lines: list[str] = []
    counter = 0
    for line in output.splitlines():
        # configparser reads indented lines as value continuations
        line = line.strip()
        key, sep, rest = line.partition("=")
        if sep and key.rstrip().endswith("[]"):
            counter += 1
            line = f"{key.rstrip()}{counter} ={rest}"
        lines.append(line)

    try:
        parser.read_string(f"[{_ROOT_SECTION}]\n" + "\n".join(lines))
    except configparser.Error as e:
        raise ValueError(str(e)) from e

    result: dict[str, Any] = {}
    for section in parser.sections():
        target = result
        if section != _ROOT_SECTION:
            for part in _split_section(section):
                node = target.get(part)
                if not isinstance(node, dict):
                    node = {}
                    target[part] = node
                target = node

        for raw_key, raw_value in parser.items(section):
            value = _unquote(raw_value if raw_value is not None else "true")
            if "[]" in raw_key:
                key = raw_key.split("[]", 1)[0]
                bucket = target.get(key)
                if not isinstance(bucket, list):
                    bucket = []
                    target[key] = bucket
                bucket.append(value)
            else:
                target[_unquote_key(raw_key)] = value

    return result


def _split_section(section: str) -> list[str]:
    # "a\.b" keeps a literal dot
    parts: list[str] = []
    current = ""
    escaped = False
    for ch in section:
        if escaped:
            current += ch
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == ".":
            parts.append(current)
            current = ""
        else:
            current += ch
    parts.append(current)
    return [p for p in parts if p]


def _unquote_key(key: str) -> str:
    key = key.strip()
    value = _unquote(key)
    return value if isinstance(value, str) else key


def _unquote(value: str) -> Any:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        if value[0] == "'":
            value = value[1:-1]
        else:
            try:
                value = json.loads(value)
            except ValueError:
                value = value[1:-1]
    # Keywords are matched after unquoting, so "true" is a boolean too
    return _KEYWORDS.get(value, value)


PARSERS: dict[str, Parser] = {
    "raw": parse_raw,
    "json": parse_json,
    "ini": parse_ini,
    "config_value": parse_config_value,
    "lines": parse_lines,
}


def get_parser(name: str) -> Parser:
    """Look up a parser by name."""
    try:
        return PARSERS[name]
    except KeyError:
        raise KeyError(f"Unknown output parser '{name}'. Valid: {', '.join(sorted(PARSERS))}") from None
