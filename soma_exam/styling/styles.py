"""Centralized stylesheets for the exam window."""

from soma_exam.core.services.countdown import CountdownUrgency

from .color_palette import ColorPalette, Theme

_URGENCY_COLORS = {
    CountdownUrgency.NORMAL: ColorPalette.TIMER_NORMAL,
    CountdownUrgency.LOW: ColorPalette.TIMER_LOW,
    CountdownUrgency.CRITICAL: ColorPalette.TIMER_CRITICAL,
}


class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        text = ColorPalette.TEXT_PRIMARY.get(theme)
        border = ColorPalette.BORDER_PRIMARY.get(theme)
        accent = ColorPalette.BUTTON_PRIMARY_BG.get(theme)
        return f"""
            QMainWindow, QWidget {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {text};
                font-family: "Segoe UI", "Roboto", sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                border: 1px solid {border};
                border-radius: 8px;
                padding: 10px 16px;
                text-align: left;
            }}
            QPushButton:hover {{ background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)}; }}
            QPushButton:checked {{
                background-color: {accent};
                border-color: {accent};
                color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)};
            }}
            QPushButton:disabled {{ color: {ColorPalette.TEXT_SECONDARY.get(theme)}; }}
            QLineEdit {{
                background-color: {ColorPalette.BACKGROUND_SECONDARY.get(theme)};
                border: 1px solid {border};
                border-radius: 8px;
                padding: 8px;
            }}
            QProgressBar {{
                border: none;
                background-color: {ColorPalette.UNANSWERED.get(theme)};
                max-height: 6px;
            }}
            QProgressBar::chunk {{ background-color: {accent}; }}
        """

    @staticmethod
    def get_primary_button_style(theme: Theme = Theme.LIGHT) -> str:
        return (
            f"background-color: {ColorPalette.BUTTON_PRIMARY_BG.get(theme)};"
            f" color: {ColorPalette.BUTTON_PRIMARY_TEXT.get(theme)};"
            " font-weight: bold;"
        )

    @staticmethod
    def get_heading_style() -> str:
        return "font-size: 18pt; font-weight: bold;"

    @staticmethod
    def get_secondary_text_style(theme: Theme = Theme.LIGHT) -> str:
        return f"color: {ColorPalette.TEXT_SECONDARY.get(theme)};"

    @staticmethod
    def get_timer_style(urgency: CountdownUrgency, theme: Theme = Theme.LIGHT) -> str:
        color = _URGENCY_COLORS[urgency].get(theme)
        return f"font-family: monospace; font-size: 16pt; font-weight: bold; color: {color};"

    @staticmethod
    def get_progress_dot_style(answered: bool, current: bool, theme: Theme = Theme.LIGHT) -> str:
        fill = ColorPalette.ANSWERED if answered else ColorPalette.UNANSWERED
        border = ColorPalette.CURRENT_RING if current else ColorPalette.BORDER_PRIMARY
        text = ColorPalette.BUTTON_PRIMARY_TEXT if answered else ColorPalette.TEXT_PRIMARY
        return (
            f"background-color: {fill.get(theme)}; color: {text.get(theme)};"
            f" border: 2px solid {border.get(theme)}; border-radius: 14px;"
            " min-width: 28px; max-width: 28px; min-height: 28px; max-height: 28px; padding: 0;"
        )

    @staticmethod
    def get_score_style(theme: Theme = Theme.LIGHT) -> str:
        return f"font-size: 22pt; font-weight: bold; color: {ColorPalette.SUCCESS.get(theme)};"
