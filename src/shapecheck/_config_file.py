# This file is part of shapecheck.
#
# Copyright the shapecheck Authors.
# Individual contributors are listed in the git log.
#
# This Source Code Form is subject to the terms of the Mozilla Public License,
# v. 2.0. If a copy of the MPL was not distributed with this file, You can
# obtain one at https://mozilla.org/MPL/2.0/.

"""Configuration file loader for shapecheck profiles."""

import configparser
import warnings
from pathlib import Path

from shapecheck.errors import ShapecheckWarning

__all__ = ["load_profiles_from_config_file"]

CONFIG_FILE_NAME = "shapecheck.ini"
SECTION = "shapecheck"
LOAD_PROFILE = "_load_profile"

BOOLEAN_SETTINGS = frozenset({"shrink_enabled"})


def _find_project_root():
    """
    Find the project root by looking for common project markers.

    Searches upward from the current working directory for markers like
    .git/, setup.py, pyproject.toml, etc. Falls back to the current working
    directory if none is found.
    """
    cwd = Path.cwd()

    root_markers = [
        ".git",
        "setup.py",
        "setup.cfg",
        "pyproject.toml",
        "tox.ini",
        "pytest.ini",
        CONFIG_FILE_NAME,
    ]

    for directory in [cwd, *cwd.parents]:
        for marker in root_markers:
            if (directory / marker).exists():
                return directory

    return cwd


def _parse_value(key, value):
    """
    Convert a string value from an INI file to the appropriate Python type.

    Args:
        key: The setting name (used to decide whether booleans apply)
        value: The string value from the INI file

    Returns:
        The converted value
    """
    value = value.strip()

    if value.lower() in ("none", "null"):
        return None

    if key in BOOLEAN_SETTINGS:
        if value.lower() in ("true", "yes", "on", "1"):
            return True
        if value.lower() in ("false", "no", "off", "0"):
            return False

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


def _parse_config_file(config_path):
    """
    Parse a shapecheck.ini configuration file.

    Returns a dictionary mapping profile names to their settings
    dictionaries. The special key ``_load_profile`` may contain the name of
    the profile to load.
    """
    parser = configparser.ConfigParser()

    try:
        parser.read(config_path, encoding="utf-8")
    except configparser.Error as e:
        warnings.warn(
            "Failed to parse %s at %s: %s" % (CONFIG_FILE_NAME, config_path, e),
            ShapecheckWarning,
            stacklevel=3,
        )
        return {}

    profiles = {}

    for section in parser.sections():
        # Section names are either [shapecheck] or [shapecheck:profile_name]
        if section == SECTION:
            profile_name = "default"
        elif section.startswith(SECTION + ":"):
            profile_name = section[len(SECTION) + 1 :]
        else:
            continue

        settings_dict = {}

        for key, value in parser.items(section):
            if key == "load_profile":
                profiles[LOAD_PROFILE] = value.strip()
                continue
            settings_dict[key] = _parse_value(key, value)

        profiles[profile_name] = settings_dict

    return profiles


def load_profiles_from_config_file(path=None):
    """
    Load shapecheck profiles from a shapecheck.ini file.

    If ``path`` is None, shapecheck.ini is looked up at the project root
    (determined by looking for .git/, setup.py, pyproject.toml, etc.).

    Returns an empty dict if no config file is found or if parsing fails.
    """
    if path is None:
        config_path = _find_project_root() / CONFIG_FILE_NAME
    else:
        config_path = Path(path)
    if not config_path.exists():
        return {}

    return _parse_config_file(config_path)
