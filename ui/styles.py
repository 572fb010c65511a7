from rich.theme import Theme
from rich.style import Style
from rich.text import Text

CLINIC_TEAL = "#16A085"
CLINIC_NAVY = "#2C3E50"
WARNING_AMBER = "#F39C12"
SUCCESS_GREEN = "#27AE60"
ERROR_RED = "#C0392B"
INFO_BLUE = "#3498DB"
MUTED_GRAY = "#7F8C8D"
TEXT_WHITE = "#FFFFFF"

DEFAULT_THEME = Theme(
    {
        "primary": Style(color=CLINIC_TEAL, bold=True),
        "secondary": Style(color=WARNING_AMBER, bold=True),
        "success": Style(color=SUCCESS_GREEN),
        "error": Style(color=ERROR_RED, bold=True),
        "info": Style(color=INFO_BLUE),
        "muted": Style(color=MUTED_GRAY),
        "option_label": Style(color=WARNING_AMBER, bold=True),
        "option_text": Style(color=TEXT_WHITE),
        "title": Style(color=CLINIC_TEAL, bold=True),
        "subtitle": Style(color=MUTED_GRAY),
        "task_open": Style(color=WARNING_AMBER),
        "task_done": Style(color=SUCCESS_GREEN, bold=True),
        "task_locked": Style(color=MUTED_GRAY, dim=True),
    }
)


def get_status_style(done: bool, locked: bool = False) -> Style:
    """Get style for a room task status marker."""
    if locked:
        return Style(color=MUTED_GRAY, dim=True)
    if done:
        return Style(color=SUCCESS_GREEN, bold=True)
    return Style(color=WARNING_AMBER)


def get_accuracy_style(accuracy: float) -> Style:
    """Get color style based on an accuracy fraction."""
    if accuracy >= 0.8:
        return Style(color=SUCCESS_GREEN, bold=True)
    elif accuracy >= 0.5:
        return Style(color=WARNING_AMBER)
    else:
        return Style(color=ERROR_RED)


def create_stage_header(title: str) -> Text:
    """Create a header line for a stage."""
    header = Text()
    header.append("▌ ", Style(color=CLINIC_TEAL, bold=True))
    header.append(title, Style(color=CLINIC_TEAL, bold=True))
    return header
