# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for reading current values out of wp-config.php."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any

import pytest

from wpcfg.errors import ExtractionError
from wpcfg.extractor import (
    BindingSnapshot,
    PhpValueExtractor,
    StaticValueExtractor,
    build_extractor,
    prepare_config_code,
    snapshot_difference,
)
from wpcfg.process_utils import SubprocessExecutionError


def _extract(source: str) -> dict[str, Any]:
    return StaticValueExtractor().extract(source)


def test_sample_config_values(sample_config: str) -> None:
    assert _extract(sample_config) == {
        "DB_NAME": "old_db",
        "DB_USER": "wp",
        "DB_PASSWORD": "secret",
        "DB_HOST": "localhost",
        "DB_CHARSET": "utf8",
        "table_prefix": "wp_",
    }


def test_falsy_values_are_dropped() -> None:
    source = "<?php\ndefine('A', '');\ndefine('B', false);\ndefine('C', 0);\n$d = null;\ndefine('E', true);\n"
    assert _extract(source) == {"E": True}


def test_commented_definitions_are_ignored() -> None:
    source = "<?php\n// define('DB_NAME', 'commented');\n/* define('DB_USER', 'block'); */\ndefine('DB_HOST', 'db');\n"
    assert _extract(source) == {"DB_HOST": "db"}


def test_first_define_wins_last_assignment_wins() -> None:
    source = "<?php\ndefine('DB_NAME', 'first');\ndefine('DB_NAME', 'second');\n$prefix = 'a_';\n$prefix = 'b_';\n"
    assert _extract(source) == {"DB_NAME": "first", "prefix": "b_"}


def test_conditional_define_is_captured() -> None:
    source = "<?php\nif ( ! defined( 'WP_DEBUG' ) ) {\n\tdefine( 'WP_DEBUG', true );\n}\n"
    assert _extract(source) == {"WP_DEBUG": True}


def test_non_literal_values_are_skipped() -> None:
    source = (
        "<?php\n"
        "define( 'ABSPATH', __DIR__ . '/' );\n"
        "define( 'DB_HOST', getenv('DB_HOST') );\n"
        "$table_prefix = $other . '_';\n"
        "define( 'DB_NAME', \"db_$suffix\" );\n"
        "define( 'DB_USER', 'plain' );\n"
    )
    assert _extract(source) == {"DB_USER": "plain"}


def test_const_numbers_and_case_insensitive_define() -> None:
    source = "<?php\nconst WP_MEMORY = -64;\nDEFINE('WP_POST_REVISIONS', 5, true);\n$ratio = 1.5;\n"
    assert _extract(source) == {"WP_MEMORY": -64, "WP_POST_REVISIONS": 5, "ratio": 1.5}


def test_method_named_define_is_not_a_constant() -> None:
    source = "<?php\n$loader->define('NOPE', 'x');\nConfig::define('ALSO_NOPE', 'y');\n"
    assert _extract(source) == {}


def test_compound_assignment_is_not_a_binding() -> None:
    source = "<?php\n$a = 'one';\n$a .= 'two';\n$b == 'three';\n"
    assert _extract(source) == {"a": "one"}


def test_constant_wins_over_same_named_variable() -> None:
    source = "<?php\n$DB_NAME = 'variable';\ndefine('DB_NAME', 'constant');\n"
    assert _extract(source) == {"DB_NAME": "constant"}


def test_fully_qualified_define_and_double_quoted_escapes() -> None:
    source = "<?php\n\\define( \"DB_PASSWORD\", \"p\\x41ss\\\\\\$\" );\nconst A = 'one', B = 2;\n"
    assert _extract(source) == {"DB_PASSWORD": "pAss\\$", "A": "one", "B": 2}


def test_function_and_class_scopes_are_ignored() -> None:
    source = (
        "<?php\n"
        "function configure() {\n"
        "\tdefine( 'IN_FUNCTION', 'x' );\n"
        "\t$local = 'y';\n"
        "}\n"
        "class Settings {\n"
        "\tconst CLASS_CONST = 'z';\n"
        "}\n"
        "$loader = function () { define( 'IN_CLOSURE', 1 ); };\n"
        "define( 'DB_NAME', 'top' );\n"
    )
    assert _extract(source) == {"DB_NAME": "top"}


def test_block_comment_containing_close_tag_does_not_end_php() -> None:
    source = "<?php\n/* ?> */\ndefine( 'DB_HOST', 'db' );\n"
    assert _extract(source) == {"DB_HOST": "db"}


def test_define_with_non_boolean_third_argument_is_skipped() -> None:
    source = "<?php\ndefine( 'A', 'x', 'nope' );\ndefine( 'B' );\ndefine( 'C', 'c' );\n"
    assert _extract(source) == {"C": "c"}


def test_missing_open_tag_raises() -> None:
    with pytest.raises(ExtractionError, match="no PHP open tag"):
        _extract("define('DB_NAME', 'x');")


def test_syntax_error_raises_extraction_error() -> None:
    with pytest.raises(ExtractionError, match="Could not parse configuration file: syntax error on line"):
        _extract("<?php\ndefine('DB_NAME', 'x);\n")


def test_snapshot_difference_skips_unchanged_and_non_scalars() -> None:
    before = BindingSnapshot(constants={"PHP_VERSION": "8.2"}, variables={"argv": ["a"], "kept": "same"})
    after = BindingSnapshot(
        constants={"PHP_VERSION": "8.2", "DB_NAME": "db", "EMPTY": ""},
        variables={"argv": ["a"], "kept": "same", "table_prefix": "wp_", "list": [1, 2], "changed": 0},
    )
    assert snapshot_difference(before, after) == {"DB_NAME": "db", "table_prefix": "wp_"}


def test_snapshot_difference_reports_reassigned_variable() -> None:
    before = BindingSnapshot(variables={"table_prefix": "old_"})
    after = BindingSnapshot(variables={"table_prefix": "new_"})
    assert snapshot_difference(before, after) == {"table_prefix": "new_"}


def test_prepare_config_code(tmp_path: Path, sample_config: str) -> None:
    config = tmp_path / "wp-config.php"
    code = prepare_config_code(sample_config, config)
    assert not code.startswith("<?php")
    assert "wp-settings.php';" not in code
    assert "__DIR__" not in code
    assert f"'{tmp_path.resolve()}'" in code


class _FakeRunner:
    def __init__(self, *, stdout: str = "", error: Exception | None = None) -> None:
        self.stdout = stdout
        self.error = error
        self.calls: list[list[str]] = []
        self.payloads: list[str] = []

    def __call__(self, args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append(list(args))
        self.payloads.append(Path(args[-1]).read_text(encoding="utf-8"))
        assert kwargs["check"] is True
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(args, 0, self.stdout, "")


def test_php_extractor_decodes_snapshots(tmp_path: Path) -> None:
    output = json.dumps(
        {
            "before": {"constants": {"E_ALL": 32767}, "variables": []},
            "after": {
                "constants": {"E_ALL": 32767, "DB_NAME": "db", "WP_DEBUG": False},
                "variables": {"table_prefix": "wp_"},
            },
        }
    )
    runner = _FakeRunner(stdout=output)
    extractor = PhpValueExtractor(php_command=("php8.2", "-n"), timeout=5, runner=runner)

    values = extractor.extract("<?php\ndefine('DB_NAME', 'db');\n", path=tmp_path / "wp-config.php")

    assert values == {"table_prefix": "wp_", "DB_NAME": "db"}
    assert runner.calls[0][:2] == ["php8.2", "-n"]
    assert runner.payloads[0] == "define('DB_NAME', 'db');\n"


@pytest.mark.parametrize(
    ("error", "message"),
    [
        (FileNotFoundError("Executable not found: php"), "PHP interpreter unavailable"),
        (SubprocessExecutionError(["php"], 255, "", "PHP Parse error: nope"), "PHP Parse error: nope"),
    ],
)
def test_php_extractor_wraps_runner_errors(tmp_path: Path, error: Exception, message: str) -> None:
    extractor = PhpValueExtractor(runner=_FakeRunner(error=error))
    with pytest.raises(ExtractionError, match=message):
        extractor.extract("<?php\n", path=tmp_path / "wp-config.php")


@pytest.mark.parametrize("stdout", ["not json", "[1, 2]"])
def test_php_extractor_rejects_unexpected_output(tmp_path: Path, stdout: str) -> None:
    extractor = PhpValueExtractor(runner=_FakeRunner(stdout=stdout))
    with pytest.raises(ExtractionError, match="Unexpected output"):
        extractor.extract("<?php\n", path=tmp_path / "wp-config.php")


def test_build_extractor() -> None:
    assert isinstance(build_extractor("static"), StaticValueExtractor)
    php = build_extractor("php", php_command=["php", "-d", "display_errors=0"], timeout=3.0)
    assert isinstance(php, PhpValueExtractor)
    assert php.php_command == ("php", "-d", "display_errors=0")
    with pytest.raises(ValueError, match="Unknown extractor backend"):
        build_extractor("ruby")
