# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Read the values currently defined by a ``wp-config.php`` document.

Two backends produce the same result shape. :class:`StaticValueExtractor`
walks the Tree-sitter syntax tree for literal ``define()`` calls, ``const`` declarations
and ``$variable`` assignments. :class:`PhpValueExtractor` evaluates the file
with a real PHP interpreter and reports every binding it introduced. Both
compare a "before" and an "after" :class:`BindingSnapshot` and drop falsy
values, so a key defined as ``false`` or ``''`` reads as undefined.
"""

from __future__ import annotations

import json
import logging
import re
import tempfile
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Protocol, TypeAlias

from tree_sitter import Node as TSNode

from .errors import ExtractionError
from .php_source import (
    PhpGrammarUnavailableError,
    PhpSource,
    first_syntax_error,
    literal_value,
    parse_php,
    significant_children,
    walk,
)
from .process_utils import SubprocessExecutionError, run_command

LOGGER = logging.getLogger(__name__)

CurrentValue: TypeAlias = str | bool | int | float
CurrentValues: TypeAlias = dict[str, CurrentValue]
CommandRunner = Callable[..., Any]

_NESTED_SCOPES: Final[frozenset[str]] = frozenset(
    {
        "anonymous_function",
        "anonymous_function_creation_expression",
        "arrow_function",
        "class_declaration",
        "enum_declaration",
        "function_definition",
        "interface_declaration",
        "method_declaration",
        "trait_declaration",
    }
)
_WP_SETTINGS_REQUIRE_RE: Final[re.Pattern[str]] = re.compile(r"^\s*require.+wp-settings\.php")
_OPEN_TAG_RE: Final[re.Pattern[str]] = re.compile(r"^\s*<\?php\s*", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class BindingSnapshot:
    """Constants and global variables visible at one point in time."""

    constants: Mapping[str, Any] = field(default_factory=dict)
    variables: Mapping[str, Any] = field(default_factory=dict)


def snapshot_difference(before: BindingSnapshot, after: BindingSnapshot) -> CurrentValues:
    """Return bindings introduced between ``before`` and ``after``.

    Variables are merged first and constants second, so a constant wins when
    both share a name. Non-scalar and falsy values are dropped.
    """

    merged: CurrentValues = {}
    for previous, current in ((before.variables, after.variables), (before.constants, after.constants)):
        for name, value in current.items():
            if name in previous and previous[name] == value:
                continue
            if not isinstance(value, (str, bool, int, float)):
                continue
            if not value:
                continue
            merged[name] = value
    return merged


class ValueExtractor(Protocol):
    """Produce the current values defined by a configuration document."""

    def extract(self, source: str, *, path: Path | None = None) -> CurrentValues:
        """Return current values for ``source``.

        Args:
            source: Full text of the configuration file.
            path: Location of the file, used by backends resolving ``__FILE__``.

        Returns:
            CurrentValues: Newly defined names mapped to their truthy values.

        Raises:
            ExtractionError: If the document cannot be evaluated.
        """
        ...


class StaticValueExtractor:
    """Recognise literal definitions in the PHP syntax tree without executing the document."""

    def extract(self, source: str, *, path: Path | None = None) -> CurrentValues:
        del path
        try:
            document = parse_php(source)
        except PhpGrammarUnavailableError as exc:
            raise ExtractionError(f"Could not parse configuration file: {exc}") from exc
        error = first_syntax_error(document.root)
        if error is not None:
            line = error.start_point[0] + 1
            raise ExtractionError(f"Could not parse configuration file: syntax error on line {line}")
        if not any(node.type == "php_tag" for node in walk(document.root)):
            raise ExtractionError("Could not parse configuration file: no PHP open tag found")
        after = scan_bindings(document)
        LOGGER.debug(
            "static extraction found constants=%s variables=%s",
            sorted(after.constants),
            sorted(after.variables),
        )
        return snapshot_difference(BindingSnapshot(), after)


def scan_bindings(document: PhpSource) -> BindingSnapshot:
    """Collect literal constants and variables from the file-level scope.

    The first ``define()`` of a constant wins, matching PHP, which ignores
    redefinitions. The last assignment of a variable wins. Function, class
    and closure bodies are not entered.
    """

    constants: dict[str, Any] = {}
    variables: dict[str, Any] = {}
    for node in walk(document.root, skip=_NESTED_SCOPES):
        if node.type == "function_call_expression":
            found = _match_define(document, node)
            if found is not None:
                constants.setdefault(*found)
        elif node.type == "const_declaration":
            for element in node.named_children:
                if element.type != "const_element":
                    continue
                found = _match_const(document, element)
                if found is not None:
                    constants.setdefault(*found)
        elif node.type == "assignment_expression":
            found = _match_assignment(document, node)
            if found is not None:
                variables[found[0]] = found[1]
    return BindingSnapshot(constants=constants, variables=variables)


def _match_define(document: PhpSource, node: TSNode) -> tuple[str, Any] | None:
    function = node.child_by_field_name("function")
    arguments = node.child_by_field_name("arguments")
    if function is None or arguments is None:
        return None
    if document.text(function).lstrip("\\").lower() != "define":
        return None
    values = [
        significant_children(argument)[-1]
        for argument in arguments.named_children
        if argument.type == "argument" and significant_children(argument)
    ]
    if len(values) not in {2, 3} or len(values) != _argument_count(arguments):
        return None
    found, name = literal_value(document, values[0])
    if not found or not isinstance(name, str):
        return None
    found, value = literal_value(document, values[1])
    if not found:
        return None
    if len(values) == 3:
        found, flag = literal_value(document, values[2])
        if not found or not isinstance(flag, bool):
            return None
    return name, value


def _argument_count(arguments: TSNode) -> int:
    return sum(1 for child in arguments.named_children if child.type != "comment")


def _match_const(document: PhpSource, element: TSNode) -> tuple[str, Any] | None:
    parts = significant_children(element)
    if len(parts) != 2 or parts[0].type != "name":
        return None
    found, value = literal_value(document, parts[1])
    if not found:
        return None
    return document.text(parts[0]), value


def _match_assignment(document: PhpSource, node: TSNode) -> tuple[str, Any] | None:
    parent = node.parent
    if parent is None or parent.type != "expression_statement":
        return None
    left = node.child_by_field_name("left")
    right = node.child_by_field_name("right")
    if left is None or right is None or left.type != "variable_name":
        return None
    found, value = literal_value(document, right)
    if not found:
        return None
    return document.text(left).lstrip("$"), value


_PHP_RUNNER_SCRIPT: Final[str] = r"""<?php
function __wpcfg_bindings( $__wpcfg_vars ) {
    $__wpcfg_constants = get_defined_constants( true );
    return array(
        'constants' => (object) ( isset( $__wpcfg_constants['user'] ) ? $__wpcfg_constants['user'] : array() ),
        'variables' => (object) array_filter(
            $__wpcfg_vars,
            function ( $name ) { return 0 !== strpos( $name, '__wpcfg_' ); },
            ARRAY_FILTER_USE_KEY
        ),
    );
}
$__wpcfg_before = __wpcfg_bindings( get_defined_vars() );
eval( file_get_contents( $argv[1] ) );
$__wpcfg_after = __wpcfg_bindings( get_defined_vars() );
echo json_encode(
    array( 'before' => $__wpcfg_before, 'after' => $__wpcfg_after ),
    JSON_PARTIAL_OUTPUT_ON_ERROR | JSON_INVALID_UTF8_SUBSTITUTE
);
"""


def prepare_config_code(source: str, path: Path) -> str:
    """Return ``source`` ready for ``eval()``.

    Drops the ``require`` of ``wp-settings.php`` so WordPress is not booted,
    pins ``__FILE__`` and ``__DIR__`` to the real file location and strips the
    leading open tag that ``eval()`` does not accept.
    """

    lines = [line for line in source.split("\n") if not _WP_SETTINGS_REQUIRE_RE.match(line)]
    code = "\n".join(lines)
    resolved = path.resolve()
    code = code.replace("__FILE__", _php_quote(str(resolved))).replace("__DIR__", _php_quote(str(resolved.parent)))
    return _OPEN_TAG_RE.sub("", code, count=1)


def _php_quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


@dataclass(slots=True)
class PhpValueExtractor:
    """Evaluate the document with a PHP interpreter and diff its bindings."""

    php_command: Sequence[str] = ("php",)
    timeout: float | None = None
    runner: CommandRunner = run_command

    def extract(self, source: str, *, path: Path | None = None) -> CurrentValues:
        config_path = path if path is not None else Path("wp-config.php")
        code = prepare_config_code(source, config_path)
        with tempfile.TemporaryDirectory(prefix="wpcfg-") as workdir:
            script = Path(workdir) / "extract.php"
            payload = Path(workdir) / "config-code.php"
            script.write_text(_PHP_RUNNER_SCRIPT, encoding="utf-8")
            payload.write_text(code, encoding="utf-8")
            args = [*self.php_command, str(script), str(payload)]
            LOGGER.debug("evaluating %s with %s", config_path, " ".join(self.php_command))
            try:
                completed = self.runner(args, check=True, capture_output=True, timeout=self.timeout)
            except FileNotFoundError as exc:
                raise ExtractionError(f"PHP interpreter unavailable: {exc}") from exc
            except SubprocessExecutionError as exc:
                detail = (exc.stderr or exc.stdout or "").strip() or f"exit status {exc.returncode}"
                raise ExtractionError(f"Evaluating '{config_path.name}' failed: {detail}") from exc
        before, after = _decode_snapshots(completed.stdout)
        return snapshot_difference(before, after)


def _decode_snapshots(output: str | None) -> tuple[BindingSnapshot, BindingSnapshot]:
    try:
        payload = json.loads(output or "")
    except json.JSONDecodeError as exc:
        raise ExtractionError(f"Unexpected output while evaluating configuration: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ExtractionError("Unexpected output while evaluating configuration: expected an object")
    return _snapshot_from(payload.get("before")), _snapshot_from(payload.get("after"))


def _snapshot_from(raw: Any) -> BindingSnapshot:
    if not isinstance(raw, Mapping):
        return BindingSnapshot()
    constants = raw.get("constants")
    variables = raw.get("variables")
    # json_encode renders empty PHP arrays as lists.
    return BindingSnapshot(
        constants=dict(constants) if isinstance(constants, Mapping) else {},
        variables=dict(variables) if isinstance(variables, Mapping) else {},
    )


def build_extractor(
    backend: str,
    *,
    php_command: Sequence[str] = ("php",),
    timeout: float | None = None,
) -> ValueExtractor:
    """Return the extractor implementation named by ``backend``."""

    if backend == "static":
        return StaticValueExtractor()
    if backend == "php":
        return PhpValueExtractor(php_command=tuple(php_command), timeout=timeout)
    raise ValueError(f"Unknown extractor backend: {backend}")


__all__ = [
    "BindingSnapshot",
    "CurrentValue",
    "CurrentValues",
    "PhpValueExtractor",
    "StaticValueExtractor",
    "ValueExtractor",
    "build_extractor",
    "prepare_config_code",
    "scan_bindings",
    "snapshot_difference",
]
