# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

SAMPLE_CONFIG = """<?php
/**
 * The base configuration for WordPress
 *
 * @package WordPress
 */

// ** Database settings - You can get this info from your web host ** //
/** The name of the database for WordPress */
define( 'DB_NAME', 'old_db' );

/** Database username */
define( 'DB_USER', 'wp' );

/** Database password */
define( 'DB_PASSWORD', 'secret' );

/** Database hostname */
define( 'DB_HOST', 'localhost' );

/** Database charset to use in creating database tables. */
define( 'DB_CHARSET', 'utf8' );

/** The database collate type. Don't change this if in doubt. */
define( 'DB_COLLATE', '' );

$table_prefix = 'wp_';

define( 'WP_DEBUG', false );

/* Add any custom values between this line and the "stop editing" line. */



/* That's all, stop editing! Happy publishing. */

/** Absolute path to the WordPress directory. */
if ( ! defined( 'ABSPATH' ) ) {
	define( 'ABSPATH', __DIR__ . '/' );
}

/** Sets up WordPress vars and included files. */
require_once ABSPATH . 'wp-settings.php';
"""


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own settings files and env out of every test."""

    monkeypatch.setenv("HOME", str(tmp_path_factory.mktemp("home")))
    monkeypatch.delenv("WPCFG_CONFIG", raising=False)


@pytest.fixture
def sample_config() -> str:
    """Return a wp-config.php modelled on the WordPress sample file."""

    return SAMPLE_CONFIG


@pytest.fixture
def wp_install(tmp_path: Path, sample_config: str) -> Path:
    """Create a minimal WordPress install and return its ``wp-config.php``."""

    root = tmp_path / "site"
    root.mkdir()
    (root / "wp-load.php").write_text("<?php\n", encoding="utf-8")
    (root / "wp-settings.php").write_text("<?php\n", encoding="utf-8")
    config = root / "wp-config.php"
    config.write_text(sample_config, encoding="utf-8")
    return config
