"""
Models package initialization
"""

from .profile import (
    Profile, SpecialSkill, LanguageSkill, ToolSoftware,
    Project, EducationTraining, MediaAsset, Award, WorkLink
)
from .connection import Connection
from .audition import Audition, AuditionApplication
from .event import Event, EventRegistration
from .booking import Booking
from .notification import Notification

__all__ = [
    "Profile", "SpecialSkill", "LanguageSkill", "ToolSoftware",
    "Project", "EducationTraining", "MediaAsset", "Award", "WorkLink",
    "Connection",
    "Audition", "AuditionApplication",
    "Event", "EventRegistration",
    "Booking",
    "Notification",
]
