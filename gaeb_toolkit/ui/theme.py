"""
Centralized Theme Constants for the GAEB Converter

Canonical colours and spacing for the message boxes rendered via st.markdown.

Usage:
    from gaeb_toolkit.ui.theme import ThemeColors, info_box

    st.markdown(info_box("Upload a GAEB file to begin"), unsafe_allow_html=True)
"""


class ThemeColors:
    """Canonical color definitions"""

    TEXT = "#FAFAFA"

    BLUE = "#1E40AF"  # Info/neutral messages
    GREEN = "#1F4E3D"  # Success states
    AMBER = "#7A5F0B"  # Warnings, partial parses
    RED = "#660022"  # Errors, rejected uploads


class ThemeSpacing:
    """Spacing constants for consistent UI layout"""

    PADDING_STANDARD = "0.75rem"
    BORDER_RADIUS = "0.5rem"
    MARGIN_STANDARD = "0.5rem"


def create_info_box_style(
    background_color: str,
    text: str,
    margin_bottom: str = ThemeSpacing.MARGIN_STANDARD,
    extra_styles: str = ""
) -> str:
    """
    Create a styled info box with consistent theme formatting

    Args:
        background_color: Background color for the box
        text: Text content for the box
        margin_bottom: Bottom margin (default: standard margin)
        extra_styles: Additional CSS styles to append

    Returns:
        Formatted HTML string for st.markdown()
    """
    base_style = f"""
        background-color: {background_color};
        padding: {ThemeSpacing.PADDING_STANDARD};
        border-radius: {ThemeSpacing.BORDER_RADIUS};
        color: {ThemeColors.TEXT};
        text-align: left;
        margin-bottom: {margin_bottom};
        {extra_styles}
    """

    return f"""
    <div style="{base_style.strip()}">
        {text}
    </div>
    """


# Convenience functions for common patterns
def info_box(text: str, margin_bottom: str = ThemeSpacing.MARGIN_STANDARD) -> str:
    """Create blue info box - most common pattern"""
    return create_info_box_style(ThemeColors.BLUE, text, margin_bottom)


def success_box(text: str, margin_bottom: str = ThemeSpacing.MARGIN_STANDARD) -> str:
    """Create green success box"""
    return create_info_box_style(ThemeColors.GREEN, text, margin_bottom)


def warning_box(text: str, margin_bottom: str = ThemeSpacing.MARGIN_STANDARD) -> str:
    """Create amber warning box"""
    return create_info_box_style(ThemeColors.AMBER, text, margin_bottom)


def error_box(text: str, margin_bottom: str = ThemeSpacing.MARGIN_STANDARD) -> str:
    """Create red error box"""
    return create_info_box_style(ThemeColors.RED, text, margin_bottom)
