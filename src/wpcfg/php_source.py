# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse PHP source with the Tree-sitter PHP grammar and decode literal nodes."""

from __future__ import annotations

import importlib
import re
from collections.abc import Iterator
from dataclasses import dataclass
from functools import cache
from types import ModuleType
from typing import Final, TypeAlias

from tree_sitter import Language as TSLanguage
from tree_sitter import Node as TSNode
from tree_sitter import Parser as TSParser
from tree_sitter import Tree as TSTree

PhpScalar: TypeAlias = str | int | float | bool | None

PHP_GRAMMAR_MODULE: Final[str] = "tree_sitter_php"
_LANGUAGE_FACTORY: Final[str] = "language_php"

_PLAIN_STRING_PARTS: Final[frozenset[str]] = frozenset({"string_content", "string_value", "escape_sequence"})
_DOUBLE_QUOTE_ESCAPES: Final[dict[str, str]] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "v": "\v",
    "e": "\x1b",
    "f": "\f",
    "\\": "\\",
    "$": "$",
    '"': '"',
}
_OCTAL_ESCAPE_RE: Final[re.Pattern[str]] = re.compile(r"[0-7]{1,3}")
_HEX_ESCAPE_RE: Final[re.Pattern[str]] = re.compile(r"x([0-9A-Fa-f]{1,2})")
_UNICODE_ESCAPE_RE: Final[re.Pattern[str]] = re.compile(r"u\{([0-9A-Fa-f]+)\}")


class PhpGrammarUnavailableError(RuntimeError):
    """Raised when the Tree-sitter PHP grammar cannot be loaded."""


@dataclass(frozen=True, slots=True)
class PhpSource:
    """Parsed PHP document: the syntax tree plus the UTF-8 bytes it indexes."""

    tree: TSTree
    source: bytes

    @property
    def root(self) -> TSNode:
        return self.tree.root_node

    def text(self, node: TSNode) -> str:
        """Return the source text covered by ``node``."""

        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _import_grammar_module() -> ModuleType:
    try:
        return importlib.import_module(PHP_GRAMMAR_MODULE)
    except ModuleNotFoundError as exc:
        raise PhpGrammarUnavailableError("The tree-sitter-php grammar is not installed") from exc


@cache
def php_language() -> TSLanguage:
    """Return the Tree-sitter ``Language`` for PHP files with inline HTML."""

    module = _import_grammar_module()
    factory = getattr(module, _LANGUAGE_FACTORY, None)
    if not callable(factory):
        raise PhpGrammarUnavailableError(f"{PHP_GRAMMAR_MODULE}.{_LANGUAGE_FACTORY} is unavailable")
    return TSLanguage(factory())


def parse_php(source: str) -> PhpSource:
    """Parse ``source`` into a :class:`PhpSource`."""

    encoded = source.encode("utf-8")
    parser = TSParser(php_language())
    return PhpSource(tree=parser.parse(encoded), source=encoded)


def walk(node: TSNode, *, skip: frozenset[str] = frozenset()) -> Iterator[TSNode]:
    """Yield ``node`` and its descendants in source order.

    Subtrees rooted at a node whose type is in ``skip`` are not entered.
    """

    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        if current.type in skip:
            continue
        stack.extend(reversed(current.children))


def first_syntax_error(node: TSNode) -> TSNode | None:
    """Return the first ``ERROR`` or missing node below ``node``."""

    if not node.has_error:
        return None
    for candidate in walk(node):
        if candidate.type == "ERROR" or candidate.is_missing:
            return candidate
    return None


def significant_children(node: TSNode) -> list[TSNode]:
    return [child for child in node.named_children if child.type != "comment"]


def literal_value(document: PhpSource, node: TSNode) -> tuple[bool, PhpScalar]:
    """Return ``(True, value)`` when ``node`` is a scalar literal, else ``(False, None)``.

    Strings with interpolation, heredoc/nowdoc bodies and any computed
    expression are not literals.
    """

    kind = node.type
    if kind == "string":
        return True, decode_single_quoted(_unquote(document.text(node)))
    if kind == "encapsed_string":
        if any(child.type not in _PLAIN_STRING_PARTS for child in significant_children(node)):
            return False, None
        return True, decode_double_quoted(_unquote(document.text(node)))
    if kind in {"integer", "float"}:
        return _number(document.text(node))
    if kind == "boolean":
        return True, document.text(node).lower() == "true"
    if kind == "null":
        return True, None
    if kind == "unary_op_expression" and len(node.children) == 2:
        operator, operand = node.children
        if operator.type in {"-", "+"} and operand.type in {"integer", "float"}:
            found, value = _number(document.text(operand))
            if found and isinstance(value, (int, float)):
                return True, -value if operator.type == "-" else value
    return False, None


def _unquote(text: str) -> str:
    if text[:1] in {"b", "B"}:
        text = text[1:]
    return text[1:-1]


def _number(text: str) -> tuple[bool, PhpScalar]:
    try:
        return True, parse_number(text)
    except ValueError:
        return False, None


def parse_number(text: str) -> int | float:
    """Convert a PHP integer or float literal to a Python number."""

    cleaned = text.replace("_", "")
    lowered = cleaned.lower()
    if lowered.startswith(("0x", "0b", "0o")):
        return int(cleaned, 0)
    if any(marker in lowered for marker in (".", "e")):
        return float(cleaned)
    if len(cleaned) > 1 and cleaned.startswith("0"):
        return int(cleaned, 8)
    return int(cleaned)


def decode_single_quoted(body: str) -> str:
    """Resolve the ``\\\\`` and ``\\'`` escapes of a single-quoted string body."""

    out: list[str] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char == "\\" and index + 1 < len(body) and body[index + 1] in "\\'":
            out.append(body[index + 1])
            index += 2
            continue
        out.append(char)
        index += 1
    return "".join(out)


def decode_double_quoted(body: str) -> str:
    """Resolve backslash escapes the way PHP does for double-quoted strings."""

    out: list[str] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char != "\\" or index + 1 >= len(body):
            out.append(char)
            index += 1
            continue
        nxt = body[index + 1]
        if nxt in _DOUBLE_QUOTE_ESCAPES:
            out.append(_DOUBLE_QUOTE_ESCAPES[nxt])
            index += 2
        elif octal := _OCTAL_ESCAPE_RE.match(body, index + 1):
            out.append(chr(int(octal.group(0), 8) & 0xFF))
            index = octal.end()
        elif hexa := _HEX_ESCAPE_RE.match(body, index + 1):
            out.append(chr(int(hexa.group(1), 16)))
            index = hexa.end()
        elif uni := _UNICODE_ESCAPE_RE.match(body, index + 1):
            out.append(chr(int(uni.group(1), 16)))
            index = uni.end()
        else:
            out.append(char)
            index += 1
    return "".join(out)


__all__ = [
    "PHP_GRAMMAR_MODULE",
    "PhpGrammarUnavailableError",
    "PhpScalar",
    "PhpSource",
    "decode_double_quoted",
    "decode_single_quoted",
    "first_syntax_error",
    "literal_value",
    "parse_number",
    "parse_php",
    "php_language",
    "significant_children",
    "walk",
]
