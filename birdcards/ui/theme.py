"""Design tokens shared by the study and catalog views."""


class DesignTokens:
    """Centralized design tokens for consistent styling."""
    # Colors - Deep dark theme
    BG_PRIMARY = "#121212"
    BG_SURFACE = "#1A1A1B"
    BG_CARD = "#242426"
    BG_ELEVATED = "#2D2D30"

    # Text colors
    TEXT_PRIMARY = "#FFFFFF"
    TEXT_SECONDARY = "#B3B3B3"
    TEXT_MUTED = "#5C5C5C"

    # Card faces
    FRONT_START = "#E0F2FE"
    FRONT_END = "#BFDBFE"
    FRONT_TEXT = "#075985"

    # Accent colors (desaturated)
    ACCENT_PRIMARY = "#3B82F6"
    ACCENT_DANGER = "#E57373"
    ACCENT_LEARNED = "#81C784"
    ACCENT_STARRED = "#FFD54F"

    # Geometry
    CARD_WIDTH = 420
    CARD_HEIGHT = 320
    RADIUS = 12
    THUMB_SIZE = 64
