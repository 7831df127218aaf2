"""
Enumeration definitions for fixed options stored as plain strings.
"""

from enum import Enum


class ConnectionStatus(str, Enum):
    PENDING = "pending"
    REJECTED = "rejected"
    CONNECTED = "connected"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    FRESHER = "fresher"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"
    VETERAN = "veteran"


class WorkPreference(str, Enum):
    FREELANCE = "freelance"
    CONTRACT = "contract"
    FULL_TIME = "full_time"
    ANY = "any"


class ProfileStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    UNDER_REVIEW = "under_review"


class UserRole(str, Enum):
    ARTIST = "artist"
    EVENT_ORGANIZER = "event_organizer"
    CASTING_AGENT = "casting_agent"
    ADMIN = "admin"


class ArtistCategory(str, Enum):
    ACTOR = "actor"
    DIRECTOR = "director"
    CINEMATOGRAPHER = "cinematographer"
    MUSICIAN = "musician"
    EDITOR = "editor"
    ART_DIRECTOR = "art_director"
    STUNT_COORDINATOR = "stunt_coordinator"
    PRODUCER = "producer"
    WRITER = "writer"
    OTHER = "other"


class LanguageProficiency(str, Enum):
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    FLUENT = "fluent"
    NATIVE = "native"


class ProjectType(str, Enum):
    FEATURE_FILM = "feature_film"
    SHORT_FILM = "short_film"
    WEB_SERIES = "web_series"
    AD = "ad"
    MUSIC_VIDEO = "music_video"
    THEATER = "theater"
    COMMERCIAL = "commercial"
    DOCUMENTARY = "documentary"
    TV_SHOW = "tv_show"
    OTHER = "other"


class AuditionStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    SHORTLISTED = "shortlisted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class EventStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"


class SwipeOutcome(str, Enum):
    MATCHED = "matched"
    REQUEST_SENT = "request_sent"
    SLOW_CONNECTION = "slow_connection"
    FAILED = "failed"
    REJECTED = "rejected"


class BookingStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class NotificationType(str, Enum):
    AUDITION = "audition"
    BOOKING = "booking"
    NETWORKING = "networking"
    EVENT = "event"


# Neutral values substituted when an enum-like column is null
DEFAULT_EXPERIENCE_LEVEL = ExperienceLevel.BEGINNER.value
DEFAULT_WORK_PREFERENCE = WorkPreference.ANY.value
DEFAULT_PROFILE_STATUS = ProfileStatus.ACTIVE.value
