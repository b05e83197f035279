from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of explorer settings and of the last values
entered at interactive prompts, using a JSON file in the user data
directory. Missing or corrupted files fall back to defaults.
"""

import json
import logging
import os
from typing import Any, Dict, List, Tuple

from mvnexplorer.domain.constants import (
    CATALOG_FETCH_TIMEOUT,
    CURRENT_CONFIG_VERSION,
    DEFAULT_ARCHETYPE_ARTIFACT_ID,
    DEFAULT_ARCHETYPE_GROUP_ID,
    DEFAULT_ARCHETYPE_VERSION,
    DEFAULT_DESCRIPTOR_FILENAME,
    DEFAULT_HISTORY_SIZE,
    DEFAULT_MAVEN_EXECUTABLE,
    DEFAULT_MAX_DEPTH,
    REMOTE_ARCHETYPE_CATALOG_URL,
)
from mvnexplorer.infra.fs import get_user_data_dir, normalize_path

logger = logging.getLogger(__name__)

CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")


# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default explorer settings.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Discovery
        "workspace_folders": [],
        "descriptor_filename": DEFAULT_DESCRIPTOR_FILENAME,
        "max_depth": DEFAULT_MAX_DEPTH,
        "hide_nested_modules": True,

        # Execution
        "maven_executable": DEFAULT_MAVEN_EXECUTABLE,
        "history_size": DEFAULT_HISTORY_SIZE,

        # Archetype catalogs
        "remote_catalog_url": REMOTE_ARCHETYPE_CATALOG_URL,
        "catalog_timeout": CATALOG_FETCH_TIMEOUT,
        "user_catalog_path": "",
    }


def get_default_prompt_values() -> Dict[str, str]:
    """Values pre-filled in the archetype coordinate prompts."""
    return {
        "archetype_group_id": DEFAULT_ARCHETYPE_GROUP_ID,
        "archetype_artifact_id": DEFAULT_ARCHETYPE_ARTIFACT_ID,
        "archetype_version": DEFAULT_ARCHETYPE_VERSION,
    }


def get_default_app_state() -> Dict[str, Any]:
    """
    Generate the complete default application state.

    Returns:
        Dict[str, Any]: The full JSON structure for config.json.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,
        "settings": get_default_config(),
        "prompt_defaults": get_default_prompt_values(),
    }


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------
def validate_settings(raw: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Coerce user supplied settings into well-typed values.

    Unknown keys are dropped, invalid values are replaced by their defaults.

    Args:
        raw: Settings as loaded from disk or merged from CLI overrides.

    Returns:
        Tuple[Dict[str, Any], List[str]]: (Clean settings, warnings).
    """
    defaults = get_default_config()
    clean = dict(defaults)
    warnings: List[str] = []

    for key in defaults:
        if key in raw and raw[key] is not None:
            clean[key] = raw[key]

    folders = clean["workspace_folders"]
    if isinstance(folders, str):
        folders = [folders]
    if not isinstance(folders, list):
        warnings.append("workspace_folders must be a list; ignoring value.")
        folders = []
    clean["workspace_folders"] = [normalize_path(str(f), os.getcwd()) for f in folders if str(f).strip()]

    for key in ("max_depth", "history_size", "catalog_timeout"):
        try:
            clean[key] = int(clean[key])
        except (TypeError, ValueError):
            warnings.append(f"{key} must be an integer; using {defaults[key]}.")
            clean[key] = defaults[key]

    if clean["max_depth"] < -1:
        clean["max_depth"] = -1
    if clean["history_size"] < 1:
        warnings.append("history_size must be at least 1; using 1.")
        clean["history_size"] = 1
    if clean["catalog_timeout"] < 1:
        clean["catalog_timeout"] = defaults["catalog_timeout"]

    for key in ("descriptor_filename", "maven_executable"):
        value = str(clean[key] or "").strip()
        if not value:
            warnings.append(f"{key} cannot be empty; using '{defaults[key]}'.")
            value = defaults[key]
        clean[key] = value

    clean["hide_nested_modules"] = bool(clean["hide_nested_modules"])
    catalog_path = str(clean["user_catalog_path"] or "").strip()
    clean["user_catalog_path"] = normalize_path(catalog_path, "") if catalog_path else ""
    clean["remote_catalog_url"] = str(clean["remote_catalog_url"] or "")

    return clean, warnings


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_app_state() -> Dict[str, Any]:
    """
    Load application state from disk.

    Returns:
        Dict[str, Any]: The loaded state or a default structure on failure.
    """
    state = get_default_app_state()

    if not os.path.exists(CONFIG_FILE):
        logger.debug("Config file not found. Returning defaults.")
        return state

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return state

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return state

    if isinstance(data.get("settings"), dict):
        state["settings"].update(data["settings"])
    if isinstance(data.get("prompt_defaults"), dict):
        state["prompt_defaults"].update(data["prompt_defaults"])

    state["version"] = CURRENT_CONFIG_VERSION
    return state


def save_app_state(state: Dict[str, Any]) -> None:
    """
    Persist application state to disk.

    Args:
        state: The state dictionary to save.
    """
    try:
        os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
        state["version"] = CURRENT_CONFIG_VERSION
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {CONFIG_FILE}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """Retrieve the persisted explorer settings merged over defaults."""
    return load_app_state()["settings"]


def save_config(config: Dict[str, Any]) -> None:
    """Save the provided settings block."""
    state = load_app_state()
    state["settings"] = config
    save_app_state(state)


def load_prompt_defaults() -> Dict[str, str]:
    """Last archetype coordinates entered by the user."""
    return load_app_state()["prompt_defaults"]


def save_prompt_defaults(values: Dict[str, str]) -> None:
    """Remember the archetype coordinates entered by the user."""
    state = load_app_state()
    state["prompt_defaults"].update(values)
    save_app_state(state)
