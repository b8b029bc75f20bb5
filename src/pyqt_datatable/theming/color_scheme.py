"""
Colors for data table widgets.

One dataclass of named RGB tuples grouped by the part of the table that
uses them. The dark palette is the default; a light palette and JSON
persistence let hosts match their own application theme.
"""

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Optional, Tuple

from PyQt6.QtGui import QColor

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]


@dataclass
class ColorScheme:
    """
    Semantic palette for a DataTable and its parts.

    Field names describe a role (``chip_bg``, ``destructive_bg``) rather
    than a hue, so StyleSheetGenerator never hard-codes a color.
    """

    # --- Table shell ---
    window_bg: RGB = (43, 43, 43)
    panel_bg: RGB = (30, 30, 30)
    muted_bg: RGB = (38, 38, 38)            # header row, bulk bar, zebra stripes
    border_color: RGB = (85, 85, 85)
    separator_color: RGB = (51, 51, 51)

    # --- Text ---
    text_primary: RGB = (255, 255, 255)
    text_secondary: RGB = (204, 204, 204)   # summaries, hints
    text_disabled: RGB = (102, 102, 102)

    # --- Buttons (bulk actions, row actions, pagination) ---
    button_normal_bg: RGB = (64, 64, 64)
    button_hover_bg: RGB = (80, 80, 80)
    button_pressed_bg: RGB = (48, 48, 48)
    button_disabled_bg: RGB = (42, 42, 42)
    button_text: RGB = (255, 255, 255)
    button_disabled_text: RGB = (102, 102, 102)
    destructive_bg: RGB = (170, 40, 40)
    destructive_text: RGB = (255, 255, 255)

    # --- Search box and filter controls ---
    input_bg: RGB = (64, 64, 64)
    input_border: RGB = (102, 102, 102)
    input_text: RGB = (255, 255, 255)
    input_focus_border: RGB = (0, 170, 255)

    # --- Rows, current page, chips ---
    selection_bg: RGB = (0, 120, 212)
    selection_text: RGB = (255, 255, 255)
    hover_bg: RGB = (51, 51, 51)
    chip_bg: RGB = (58, 58, 70)

    # --- Status ---
    status_success: RGB = (0, 255, 0)
    status_warning: RGB = (255, 170, 0)     # threshold hints
    status_error: RGB = (255, 85, 85)       # fetch and bulk failures

    def to_qcolor(self, color_tuple: RGB) -> QColor:
        return QColor(*color_tuple)

    def to_hex(self, color_tuple: RGB) -> str:
        """``(255, 0, 16)`` -> ``"#ff0010"``."""
        return "#" + "".join(f"{channel:02x}" for channel in color_tuple)

    @classmethod
    def create_dark_theme(cls) -> 'ColorScheme':
        """Dark theme (the default) with slightly brighter secondary text."""
        return cls(
            text_secondary=(220, 220, 220),
            status_success=(0, 255, 100),
        )

    @classmethod
    def create_light_theme(cls) -> 'ColorScheme':
        """Light palette; status colors are darkened for contrast on white."""
        return cls(
            window_bg=(245, 245, 245),
            panel_bg=(255, 255, 255),
            muted_bg=(241, 243, 245),
            border_color=(180, 180, 180),
            separator_color=(225, 225, 225),
            text_primary=(0, 0, 0),
            text_secondary=(80, 80, 80),
            text_disabled=(160, 160, 160),
            button_normal_bg=(230, 230, 230),
            button_hover_bg=(210, 210, 210),
            button_pressed_bg=(190, 190, 190),
            button_disabled_bg=(250, 250, 250),
            button_text=(0, 0, 0),
            button_disabled_text=(160, 160, 160),
            destructive_bg=(200, 30, 30),
            input_bg=(255, 255, 255),
            input_border=(180, 180, 180),
            input_text=(0, 0, 0),
            input_focus_border=(0, 100, 200),
            selection_bg=(0, 120, 215),
            hover_bg=(240, 240, 240),
            chip_bg=(228, 232, 240),
            status_success=(0, 150, 0),
            status_warning=(200, 100, 0),
            status_error=(200, 0, 0),
        )

    @classmethod
    def load_color_scheme_from_config(cls, config_path: Optional[str] = None) -> 'ColorScheme':
        """
        Build a scheme from a JSON object of ``{"field": [r, g, b]}``.

        Unknown keys and malformed values are ignored; a missing or
        unreadable file yields the default scheme.
        """
        if not config_path or not Path(config_path).exists():
            return cls()
        try:
            raw = json.loads(Path(config_path).read_text())
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load color scheme from {config_path}: {e}")
            return cls()

        known = {f.name for f in fields(cls)}
        overrides = {
            name: tuple(value)
            for name, value in raw.items()
            if name in known and isinstance(value, list) and len(value) == 3
        }
        return cls(**overrides)

    def get_color_dict(self) -> Dict[str, RGB]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def save_to_json(self, config_path: str) -> bool:
        """Write the scheme as JSON. Returns False if the file cannot be written."""
        payload = {name: list(rgb) for name, rgb in self.get_color_dict().items()}
        try:
            Path(config_path).write_text(json.dumps(payload, indent=2, sort_keys=True))
        except OSError as e:
            logger.error(f"Failed to save color scheme to {config_path}: {e}")
            return False
        logger.info(f"Color scheme saved to {config_path}")
        return True
