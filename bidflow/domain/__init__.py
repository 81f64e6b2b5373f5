"""Domain models for tender announcements."""

from .exceptions import AnnouncementLoadError, InputError
from .loader import load_announcements
from .models import Announcement, ConfidenceTier, Recommendation

__all__ = [
    "Announcement",
    "ConfidenceTier",
    "Recommendation",
    "load_announcements",
    "InputError",
    "AnnouncementLoadError",
]
