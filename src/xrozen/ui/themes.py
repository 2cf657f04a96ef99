"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Deep indigo palette with a violet brand accent
XROZEN_NIGHT = Theme(
    name="xrozen-night",
    primary="#8b5cf6",      # Violet - brand accent
    secondary="#38bdf8",    # Sky - assistant messages
    accent="#f472b6",       # Pink - highlights
    foreground="#e2e8f0",   # Slate 200
    background="#0b0d17",   # Near black
    success="#34d399",      # Emerald
    warning="#fbbf24",      # Amber
    error="#f87171",        # Red
    surface="#161a2e",
    panel="#11142a",
    dark=True,
    variables={
        "block-cursor-foreground": "#0b0d17",
        "block-cursor-background": "#c4b5fd",
        "block-cursor-text-style": "bold",
        "block-cursor-blurred-foreground": "#e2e8f0",
        "block-cursor-blurred-background": "#2e335a",
        "block-hover-background": "#2e335a 30%",

        "input-cursor-background": "#e2e8f0",
        "input-cursor-foreground": "#0b0d17",
        "input-selection-background": "#8b5cf6 30%",

        "border": "#2e335a",
        "border-blurred": "#1f2340",

        "scrollbar": "#1f2340",
        "scrollbar-hover": "#2e335a",
        "scrollbar-active": "#8b5cf6",
        "scrollbar-background": "#11142a",
        "scrollbar-corner-color": "#11142a",

        "footer-foreground": "#cbd5e1",
        "footer-background": "#0b0d17",
        "footer-key-foreground": "#c4b5fd",
        "footer-key-background": "#1f2340",
        "footer-description-foreground": "#94a3b8",

        "text-muted": "#64748b",
        "text-disabled": "#334155",
    },
)
