"""Dark theme constants for the FL Backup Cleaner GUI."""

# Base colors
BG_PRIMARY = "#1e1e1e"
BG_SECONDARY = "#2d2d2d"
BG_TERTIARY = "#383838"
BG_HOVER = "#444444"

# Accent colors (FL orange)
ACCENT = "#ff9e3d"
ACCENT_DARK = "#d9791a"
ACCENT_SUCCESS = "#03dac6"
ACCENT_WARNING = "#cf6679"
ACCENT_INFO = "#64b5f6"

# Text colors
TEXT_PRIMARY = "#ffffff"
TEXT_SECONDARY = "#cccccc"
TEXT_MUTED = "#888888"

# Fonts
FONT_FAMILY = "Segoe UI"
FONT_MONO = "Consolas"
FONT_SIZE_TITLE = 20
FONT_SIZE_BODY = 11
FONT_SIZE_SMALL = 9
FONT_SIZE_MONO = 10
FONT_SIZE_STAT = 22
