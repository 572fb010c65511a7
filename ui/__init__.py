"""Practicum UI Module - terminal interface for the medical office practicum."""

from ui.app import TrainerUI
from ui.components import (
    ExercisePanel,
    FeedbackPanel,
    RoomPanel,
    RoomTask,
    ChecklistPanel,
    DocumentPagePanel,
    ScoreSummaryPanel,
    CertificatePanel,
    WelcomeScreen,
)
from ui.styles import (
    CLINIC_TEAL,
    CLINIC_NAVY,
    WARNING_AMBER,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
)

__all__ = [
    "TrainerUI",
    "ExercisePanel",
    "FeedbackPanel",
    "RoomPanel",
    "RoomTask",
    "ChecklistPanel",
    "DocumentPagePanel",
    "ScoreSummaryPanel",
    "CertificatePanel",
    "WelcomeScreen",
    "CLINIC_TEAL",
    "CLINIC_NAVY",
    "WARNING_AMBER",
    "SUCCESS_GREEN",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
]
