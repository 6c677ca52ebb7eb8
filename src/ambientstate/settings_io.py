"""Export and import user settings as a versioned JSON document.

Only ``settings`` and ``elements`` travel; transient keys such as
``currentImageMetadata`` stay behind. Import validates the document and
then goes through StateStore.update(), so it merges like any other write
and notifies subscribers of exactly what changed.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any

from ambientstate.store import StateStore
from ambientstate.topics import SETTINGS_IMPORTED
from ambientstate.tree import deep_copy

SETTINGS_FILE_NAME = "clock_page_settings.json"
EXPORT_VERSION = 2

logger = logging.getLogger(__name__)


class SettingsImportError(ValueError):
    """The document is not a valid settings export."""


def export_settings(store: StateStore) -> dict:
    state = store.get_state()
    return {
        "version": EXPORT_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "state": {
            "settings": state.get("settings", {}),
            "elements": state.get("elements", {}),
        },
    }


def write_settings(store: StateStore, path: str | os.PathLike) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(export_settings(store), f, indent=2)
    logger.info("Settings exported to %s", path)


def read_settings(path: str | os.PathLike) -> dict:
    """Load an export document. Unreadable JSON raises SettingsImportError."""
    if os.path.basename(os.fspath(path)) != SETTINGS_FILE_NAME:
        logger.warning("Settings file name %r does not match %r", os.fspath(path), SETTINGS_FILE_NAME)
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise SettingsImportError(f"Settings file is not valid JSON: {e}") from e


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_import(data: Any) -> None:
    """Raise SettingsImportError if data is not a usable settings export."""
    if not isinstance(data, dict) or not isinstance(data.get("state"), dict):
        raise SettingsImportError('Invalid settings file format: missing "state" object')
    if data.get("version") != EXPORT_VERSION:
        logger.warning(
            "Settings file version %r does not match current version %d",
            data.get("version"), EXPORT_VERSION,
        )

    state = data["state"]
    settings = state.get("settings")
    if not isinstance(settings, dict):
        raise SettingsImportError('Missing or invalid "state.settings" object')
    background = settings.get("background")
    if not isinstance(background, dict):
        raise SettingsImportError('Missing or invalid "state.settings.background" object')
    for key in ("type", "provider"):
        if not isinstance(background.get(key), str):
            raise SettingsImportError(f'Invalid "settings.background.{key}"')
    if not _is_number(background.get("overlayOpacity")):
        raise SettingsImportError('Invalid "settings.background.overlayOpacity"')

    elements = state.get("elements")
    if not isinstance(elements, dict):
        raise SettingsImportError('Missing or invalid "state.elements" object')
    for element_id, element in elements.items():
        _validate_element(element_id, element)


def _validate_element(element_id: str, element: Any) -> None:
    if not isinstance(element, dict):
        raise SettingsImportError(f"Invalid element object for {element_id!r}")
    if not isinstance(element.get("type"), str):
        raise SettingsImportError(f'Invalid "type" for element {element_id!r}')
    if element.get("id") != element_id:
        raise SettingsImportError(f'Invalid or mismatched "id" for element {element_id!r}')
    position = element.get("position")
    if position is not None and not (
        isinstance(position, dict) and _is_number(position.get("x")) and _is_number(position.get("y"))
    ):
        raise SettingsImportError(f'Invalid "position" for element {element_id!r}')
    for key in ("scale", "opacity"):
        if key in element and not _is_number(element[key]):
            raise SettingsImportError(f'Invalid "{key}" for element {element_id!r}')
    if not isinstance(element.get("options"), dict):
        raise SettingsImportError(f'Missing or invalid "options" for element {element_id!r}')


def import_settings(store: StateStore, data: Any) -> None:
    """Validate data and merge its settings and elements into the store."""
    validate_import(data)
    state = data["state"]
    logger.info("Applying imported settings (%d elements)", len(state["elements"]))
    store.update({"settings": state["settings"], "elements": state["elements"]})
    store.bus.publish(SETTINGS_IMPORTED, {"state": deep_copy(state)})
