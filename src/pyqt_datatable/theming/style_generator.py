"""
QStyleSheet Generator for data tables

Generates QStyleSheet strings from ColorScheme objects. Table parts are
addressed by object name (``#BulkActionBar``) and action buttons by their
``variant`` dynamic property, so one stylesheet covers every list page.
"""

import logging
from .color_scheme import ColorScheme
from pyqt_datatable.table.types import ButtonVariant

logger = logging.getLogger(__name__)


class StyleSheetGenerator:
    """
    Turns a ColorScheme into the stylesheet for a DataTable.

    Provides one method per table part; ``generate_data_table_style``
    concatenates them for the orchestrator widget.
    """

    def __init__(self, color_scheme: ColorScheme):
        self.color_scheme = color_scheme

    def update_color_scheme(self, color_scheme: ColorScheme):
        """Switch palettes; regenerate and reapply the stylesheet afterwards."""
        self.color_scheme = color_scheme

    def generate_table_widget_style(self) -> str:
        """
        Generate QStyleSheet for the row table.

        Returns:
            str: Complete QStyleSheet for table widget styling
        """
        cs = self.color_scheme
        return f"""
            QTableWidget {{
                background-color: {cs.to_hex(cs.panel_bg)};
                alternate-background-color: {cs.to_hex(cs.muted_bg)};
                color: {cs.to_hex(cs.text_primary)};
                border: none;
                gridline-color: {cs.to_hex(cs.separator_color)};
            }}
            QTableWidget::item {{
                padding: 6px;
                border-bottom: 1px solid {cs.to_hex(cs.separator_color)};
            }}
            QTableWidget::item:hover {{
                background-color: {cs.to_hex(cs.hover_bg)};
            }}
            QTableWidget::item:selected {{
                background-color: {cs.to_hex(cs.selection_bg)};
                color: {cs.to_hex(cs.selection_text)};
            }}
            QHeaderView::section {{
                background-color: {cs.to_hex(cs.muted_bg)};
                color: {cs.to_hex(cs.text_secondary)};
                padding: 6px;
                border: none;
                border-bottom: 1px solid {cs.to_hex(cs.border_color)};
                font-weight: bold;
            }}
        """

    def generate_button_style(self) -> str:
        """
        Generate QStyleSheet for buttons with all states and variants.

        Returns:
            str: Complete QStyleSheet for button styling
        """
        cs = self.color_scheme
        return f"""
            QPushButton {{
                background-color: {cs.to_hex(cs.button_normal_bg)};
                color: {cs.to_hex(cs.button_text)};
                border: none;
                border-radius: 3px;
                padding: 5px 8px;
            }}
            QPushButton:hover {{
                background-color: {cs.to_hex(cs.button_hover_bg)};
            }}
            QPushButton:pressed {{
                background-color: {cs.to_hex(cs.button_pressed_bg)};
            }}
            QPushButton:disabled {{
                background-color: {cs.to_hex(cs.button_disabled_bg)};
                color: {cs.to_hex(cs.button_disabled_text)};
            }}
            QPushButton[variant="{ButtonVariant.OUTLINE.value}"] {{
                background-color: transparent;
                border: 1px solid {cs.to_hex(cs.border_color)};
            }}
            QPushButton[variant="{ButtonVariant.GHOST.value}"] {{
                background-color: transparent;
            }}
            QPushButton[variant="{ButtonVariant.DESTRUCTIVE.value}"] {{
                background-color: {cs.to_hex(cs.destructive_bg)};
                color: {cs.to_hex(cs.destructive_text)};
            }}
            QPushButton[current="true"] {{
                background-color: {cs.to_hex(cs.selection_bg)};
                color: {cs.to_hex(cs.selection_text)};
            }}
        """

    def generate_input_style(self) -> str:
        """
        Generate QStyleSheet for the search box and filter controls.

        Returns:
            str: Complete QStyleSheet for input styling
        """
        cs = self.color_scheme
        return f"""
            QLineEdit, QComboBox, QDateEdit {{
                background-color: {cs.to_hex(cs.input_bg)};
                color: {cs.to_hex(cs.input_text)};
                border: 1px solid {cs.to_hex(cs.input_border)};
                border-radius: 3px;
                padding: 5px;
            }}
            QLineEdit:focus, QComboBox:focus, QDateEdit:focus {{
                border: 1px solid {cs.to_hex(cs.input_focus_border)};
            }}
            QComboBox QAbstractItemView {{
                background-color: {cs.to_hex(cs.input_bg)};
                color: {cs.to_hex(cs.input_text)};
                selection-background-color: {cs.to_hex(cs.selection_bg)};
            }}
            QCheckBox {{
                color: {cs.to_hex(cs.text_primary)};
            }}
        """

    def generate_chip_style(self) -> str:
        """Generate QStyleSheet for active filter chips."""
        cs = self.color_scheme
        return f"""
            QPushButton#DataTableChip {{
                background-color: {cs.to_hex(cs.chip_bg)};
                color: {cs.to_hex(cs.text_primary)};
                border-radius: 9px;
                padding: 2px 8px;
                font-size: 11px;
            }}
            QPushButton#DataTableChip:hover {{
                color: {cs.to_hex(cs.status_error)};
            }}
        """

    def generate_panel_style(self) -> str:
        """Generate QStyleSheet for the bulk bar, footer, status and error panels."""
        cs = self.color_scheme
        return f"""
            QFrame#BulkActionBar {{
                background-color: {cs.to_hex(cs.muted_bg)};
                border-top: 1px solid {cs.to_hex(cs.border_color)};
            }}
            QFrame#PaginationFooter {{
                border-top: 1px solid {cs.to_hex(cs.border_color)};
            }}
            QLabel#DataTableHint, QLabel#PaginationSummary, QLabel#DataTableEmpty {{
                color: {cs.to_hex(cs.text_secondary)};
            }}
            QLabel#BulkActionError, QLabel#DataTableErrorTitle {{
                color: {cs.to_hex(cs.status_error)};
            }}
            QLabel#DataTableErrorDetail {{
                color: {cs.to_hex(cs.text_secondary)};
                font-size: 11px;
            }}
        """

    def generate_data_table_style(self) -> str:
        """
        Generate the complete stylesheet for a DataTable widget.

        Returns:
            str: Complete QStyleSheet for the table and all of its parts
        """
        cs = self.color_scheme
        base = f"""
            QWidget#DataTable {{
                background-color: {cs.to_hex(cs.window_bg)};
                color: {cs.to_hex(cs.text_primary)};
            }}
        """
        return "".join([
            base,
            self.generate_input_style(),
            self.generate_button_style(),
            self.generate_chip_style(),
            self.generate_panel_style(),
            self.generate_table_widget_style(),
        ])

    def get_status_color_hex(self, status_type: str) -> str:
        """
        Hex color for a status (success, warning, error).

        Raises:
            KeyError: for any other status name
        """
        cs = self.color_scheme
        status_colors = {
            "success": cs.status_success,
            "warning": cs.status_warning,
            "error": cs.status_error,
        }
        return cs.to_hex(status_colors[status_type])
