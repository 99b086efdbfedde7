"""Color palette for the exam window supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        """Get color value for the specified theme."""
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the exam window."""

    TEXT_PRIMARY = ThemeColors(light="#0F172A", dark="#F1F5F9")
    TEXT_SECONDARY = ThemeColors(light="#64748B", dark="#94A3B8")

    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#0B1120")
    BACKGROUND_SECONDARY = ThemeColors(light="#F8FAFC", dark="#111A30")

    BORDER_PRIMARY = ThemeColors(light="#CBD5E1", dark="#334155")

    BUTTON_PRIMARY_BG = ThemeColors(light="#7C3AED", dark="#8B5CF6")
    BUTTON_PRIMARY_TEXT = ThemeColors(light="#FFFFFF", dark="#FFFFFF")
    BUTTON_SECONDARY_BG = ThemeColors(light="#F1F5F9", dark="#1E293B")
    BUTTON_HOVER_BG = ThemeColors(light="#E2E8F0", dark="#334155")

    # Countdown urgency
    TIMER_NORMAL = ThemeColors(light="#0F172A", dark="#F1F5F9")
    TIMER_LOW = ThemeColors(light="#EA580C", dark="#FB923C")
    TIMER_CRITICAL = ThemeColors(light="#DC2626", dark="#F87171")

    # Progress dots and review grid
    ANSWERED = ThemeColors(light="#7C3AED", dark="#8B5CF6")
    UNANSWERED = ThemeColors(light="#E2E8F0", dark="#1E293B")
    CURRENT_RING = ThemeColors(light="#0F172A", dark="#F1F5F9")

    # Final score
    SUCCESS = ThemeColors(light="#15803D", dark="#4ADE80")
