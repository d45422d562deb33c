"""Path resolver for handling differences between development and frozen executable environments.

This module provides utility functions to locate the application's base
directory and the per-user settings directory in both development (running
from source) and production (PyInstaller frozen executable) environments.
"""

import sys
import os
from pathlib import Path


def get_base_dir() -> Path:
    """Get the base directory for the application.

    In frozen mode (PyInstaller executable), returns the directory containing the .exe file.
    In development mode, returns the project root directory (parent of editor/).

    Returns:
        Path: Base directory path
    """
    if getattr(sys, 'frozen', False):
        return Path(os.path.dirname(sys.executable))
    else:
        # This file is in editor/src/utils/
        return Path(__file__).resolve().parent.parent.parent.parent


def get_config_dir() -> Path:
    """Get the per-user settings directory.

    ``CALENDAR_EDITOR_CONFIG_DIR`` overrides the default ``~/.calendar_editor``.

    Returns:
        Path: Settings directory (not created here)
    """
    override = os.environ.get('CALENDAR_EDITOR_CONFIG_DIR')
    if override:
        return Path(override)
    return Path(os.path.expanduser("~")) / ".calendar_editor"


def get_config_file() -> Path:
    """Get path to the settings JSON file.

    Returns:
        Path: Full path to config.json in the settings directory
    """
    return get_config_dir() / "config.json"
