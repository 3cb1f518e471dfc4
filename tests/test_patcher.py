# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for in-place patching of wp-config.php text."""

from __future__ import annotations

import pytest

from wpcfg.diff import UpdatePlan
from wpcfg.errors import SentinelNotFoundError
from wpcfg.keys import ConfigKey
from wpcfg.patcher import DEFAULT_SENTINEL, ConfigPatcher, render_literal


def _patcher(separator: str = "\n") -> ConfigPatcher:
    return ConfigPatcher(line_separator=separator)


def test_replaces_old_value_on_matching_line() -> None:
    plan = UpdatePlan(changes={ConfigKey.DB_NAME: "new_db"}, current={"DB_NAME": "old_db"})
    content = "<?php\ndefine( 'DB_NAME', 'old_db' );\ndefine( 'DB_USER', 'old_db' );\n"

    assert _patcher().patch(content, plan) == (
        "<?php\ndefine( 'DB_NAME', 'new_db' );\ndefine( 'DB_USER', 'old_db' );\n"
    )


def test_only_first_occurrence_on_a_line_changes() -> None:
    plan = UpdatePlan(changes={ConfigKey.DB_USER: "b"}, current={"DB_USER": "a"})
    assert _patcher().patch("define('DB_USER', 'a'); // a", plan) == "define('DB_USER', 'b'); // a"


def test_line_without_token_is_untouched() -> None:
    plan = UpdatePlan(changes={ConfigKey.TABLE_PREFIX: "new_"}, current={"table_prefix": "wp_"})
    content = "$table_prefix = 'wp_';\n$other = 'wp_';"
    assert _patcher().patch(content, plan) == "$table_prefix = 'new_';\n$other = 'wp_';"


def test_key_without_old_value_is_skipped() -> None:
    plan = UpdatePlan(changes={ConfigKey.WP_DEBUG: True}, current={})
    content = "define( 'WP_DEBUG', false );"
    assert _patcher().patch(content, plan) == content


def test_booleans_render_as_php_keywords() -> None:
    plan = UpdatePlan(changes={ConfigKey.WP_DEBUG: False}, current={"WP_DEBUG": True})
    assert _patcher().patch("define( 'WP_DEBUG', true );", plan) == "define( 'WP_DEBUG', false );"
    assert render_literal(True) == "true"
    assert render_literal(3) == "3"


def test_extra_php_is_spliced_before_sentinel() -> None:
    content = "<?php\ndefine('A', 1);\n/* That's all, stop editing! Happy publishing. */\nrequire 'x';\n"
    plan = UpdatePlan(changes={ConfigKey.EXTRA_PHP: "\n  define('B', 2);  \n"})

    patched = _patcher().patch(content, plan)

    assert patched == (
        "<?php\ndefine('A', 1);\n"
        "\n\ndefine('B', 2);\n\n"
        "/* That's all, stop editing! Happy publishing. */\nrequire 'x';\n"
    )
    assert patched.count(DEFAULT_SENTINEL) == 1


def test_extra_php_uses_first_sentinel() -> None:
    content = f"a\n{DEFAULT_SENTINEL} one */\n{DEFAULT_SENTINEL} two */\n"
    patched = _patcher().splice_extra(content, "x")
    assert patched == f"a\n\n\nx\n\n{DEFAULT_SENTINEL} one */\n{DEFAULT_SENTINEL} two */\n"


def test_missing_sentinel_raises() -> None:
    plan = UpdatePlan(changes={ConfigKey.EXTRA_PHP: "define('B', 2);"})
    with pytest.raises(SentinelNotFoundError, match="stop editing"):
        _patcher().patch("<?php\n", plan)


def test_custom_sentinel() -> None:
    patcher = ConfigPatcher(sentinel="// END CONFIG", line_separator="\n")
    assert patcher.splice_extra("a\n// END CONFIG\n", "x") == "a\n\n\nx\n\n// END CONFIG\n"


def test_crlf_documents_keep_their_terminators() -> None:
    plan = UpdatePlan(
        changes={ConfigKey.DB_HOST: "db", ConfigKey.EXTRA_PHP: "define('B', 2);"},
        current={"DB_HOST": "localhost"},
    )
    content = f"<?php\r\ndefine('DB_HOST', 'localhost');\r\n{DEFAULT_SENTINEL} */\r\n"

    patched = _patcher("\r\n").patch(content, plan)

    assert patched == (
        "<?php\r\ndefine('DB_HOST', 'db');\r\n\r\n\r\ndefine('B', 2);\r\n\r\n" f"{DEFAULT_SENTINEL} */\r\n"
    )
    assert "\n" not in patched.replace("\r\n", "")
