"""Default state tree for the clock widget, and load-time fixups."""

from __future__ import annotations

import logging

from ambientstate.tree import deep_copy

logger = logging.getLogger(__name__)

# Legacy element types written by older releases.
ELEMENT_TYPE_CORRECTIONS: dict[str, str] = {
    "FavoriteToggleElement": "favorite-toggle",
    "youtube-favorite-toggle": "favorite-toggle",
}


def _chrome_element(element_id: str, element_type: str, **options) -> dict:
    return {"type": element_type, "id": element_id, "options": dict(options)}


def default_state() -> dict:
    """Fresh default tree. Each call returns a new, unshared structure."""
    return {
        "settings": {
            "theme": "dark",
            "background": {
                "type": "image",
                "query": "nature",
                "useFavoritesOnly": False,
                "provider": "unsplash",
                "color": "#000000",
                "overlayOpacity": 0.3,
                "zoomEnabled": True,
                "showInfo": True,
                "peapixCountry": "us",
                "cycleEnabled": True,
                "cycleInterval": 300000,  # ms
            },
            "controls": {"isOpen": False},
            "debugModeEnabled": False,
        },
        "elements": {
            "clock-default": {
                "type": "clock",
                "id": "clock-default",
                "position": {"x": 50, "y": 50},
                "scale": 1.4,
                "opacity": 1.0,
                "effectStyle": "raised",
                "options": {
                    "face": "led",
                    "timeFormat": "12",
                    "showSeconds": True,
                    "fontFamily": "Segoe UI",
                    "fontWeight": "normal",
                    "color": "#FFFFFF",
                    "showSeparator": False,
                    "charSpacing": 0.65,
                    "colonAdjustX": 0,
                    "colonAdjustY": 0,
                },
            },
            "date-default": {
                "type": "date",
                "id": "date-default",
                "position": {"x": 50, "y": 80},
                "scale": 1.0,
                "opacity": 1.0,
                "effectStyle": "raised",
                "options": {
                    "format": "Day, Month DD",
                    "fontFamily": "Segoe UI",
                    "fontWeight": "normal",
                    "color": "#FFFFFF",
                    "visible": True,
                    "showSeparator": False,
                },
            },
            "controls-hint-default": _chrome_element(
                "controls-hint-default", "controls-hint", text="Tap background for controls"
            ),
            "background-info-default": _chrome_element("background-info-default", "background-info"),
            "donate-default": _chrome_element("donate-default", "donate"),
            "favorite-toggle-default": _chrome_element("favorite-toggle-default", "favorite-toggle"),
            "next-background-button-default": _chrome_element(
                "next-background-button-default", "next-background-button"
            ),
            "fullscreen-toggle-default": _chrome_element("fullscreen-toggle-default", "fullscreen-toggle"),
            "control-panel-toggle-default": _chrome_element(
                "control-panel-toggle-default", "control-panel-toggle"
            ),
        },
        "currentImageMetadata": None,
    }


def correct_element_types(state: dict) -> dict:
    """Rewrite legacy ``elements.*.type`` values. Returns a corrected copy.

    Pass as StateStore(normalize=correct_element_types).
    """
    fixed = deep_copy(state)
    elements = fixed.get("elements")
    if not isinstance(elements, dict):
        return fixed
    for element_id, element in elements.items():
        if not isinstance(element, dict):
            continue
        element_type = element.get("type")
        corrected = ELEMENT_TYPE_CORRECTIONS.get(element_type) if isinstance(element_type, str) else None
        if corrected:
            logger.warning(
                "Correcting element type for %r: %r -> %r", element_id, element_type, corrected
            )
            element["type"] = corrected
    return fixed
