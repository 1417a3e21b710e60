# alumni_portal/schemas/session.py
import datetime as dt
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

class SessionStatus(str, Enum):
    PENDING = "pending"
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"

# Sessions in these states never reach the board
HIDDEN_STATUSES = {SessionStatus.CANCELLED.value, SessionStatus.REJECTED.value}

class Bucket(str, Enum):
    ONGOING = "ongoing"
    UPCOMING = "upcoming"
    PREVIOUS = "previous"

DEFAULT_TITLE = "Untitled Session"
DEFAULT_DESCRIPTION = "No description available"
DEFAULT_PROFILE_IMAGE = "/default-profile.png"
TBA = "TBA"


class SessionHead(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(default=None, alias="_id")
    full_name: str = Field(default=TBA, alias="fullName")
    email: Optional[str] = None
    profile_photo: Optional[str] = Field(default=None, alias="profilePhoto")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return None if v is None else str(v)

    @field_validator("full_name", mode="before")
    @classmethod
    def default_full_name(cls, v):
        return v if isinstance(v, str) and v.strip() else TBA


def _parse_date(value: Any) -> Optional[dt.date]:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return dt.datetime.fromisoformat(text).date()
        except ValueError:
            try:
                return dt.date.fromisoformat(text[:10])
            except ValueError:
                return None
    return None


class Session(BaseModel):
    """A session record as the portal backend returns it.

    Everything is optional: records come from a backend this service does not
    control, so missing or odd fields are defaulted during classification.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(default=None, alias="_id")
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt.date] = None
    time: Optional[str] = None
    venue: Optional[str] = None
    session_head: Optional[SessionHead] = Field(default=None, alias="sessionHead")
    status: Optional[str] = None
    manually_completed: bool = Field(default=False, alias="manuallyCompleted")
    target_audience: Any = Field(default=None, alias="targetAudience")
    target_departments: Any = Field(default=None, alias="targetDepartments")
    department: Optional[str] = None
    feedback_form_link: Optional[str] = Field(default=None, alias="feedbackFormLink")
    meeting_link: Optional[str] = Field(default=None, alias="meetingLink")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return None if v is None else str(v)

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, v):
        return _parse_date(v)

    @field_validator("time", "title", "description", "venue", "department", "status", mode="before")
    @classmethod
    def text_or_none(cls, v):
        if v is None:
            return None
        return v if isinstance(v, str) else str(v)

    @field_validator("session_head", mode="before")
    @classmethod
    def head_reference(cls, v):
        # An unpopulated reference is just the user's id
        if isinstance(v, (str, int)):
            return {"_id": str(v)}
        return v if isinstance(v, (dict, SessionHead)) else None

    @field_validator("manually_completed", mode="before")
    @classmethod
    def truthy_flag(cls, v):
        return bool(v)

    @property
    def is_hidden(self) -> bool:
        return (self.status or "").lower() in HIDDEN_STATUSES


class ClassifiedSession(BaseModel):
    """A session placed in exactly one bucket, with its display fields filled in."""
    id: Optional[str] = None
    title: str = DEFAULT_TITLE
    description: str = DEFAULT_DESCRIPTION
    session_head: SessionHead = Field(default_factory=SessionHead)
    profile_image: str = DEFAULT_PROFILE_IMAGE
    venue: str = TBA
    date: Optional[dt.date] = None
    time: str = ""
    day: Optional[str] = None
    month: Optional[str] = None
    start: Optional[dt.datetime] = None
    status: str
    bucket: Bucket
    department: str = ""
    manually_completed: bool = False
    target_audience: List[str] = Field(default_factory=list)
    target_departments: List[str] = Field(default_factory=list)
    feedback_form_link: Optional[str] = None
    meeting_link: Optional[str] = None


class ClassifiedSessions(BaseModel):
    ongoing: List[ClassifiedSession] = Field(default_factory=list)
    upcoming: List[ClassifiedSession] = Field(default_factory=list)
    previous: List[ClassifiedSession] = Field(default_factory=list)

    def all(self) -> List[ClassifiedSession]:
        return [*self.ongoing, *self.upcoming, *self.previous]

    def find(self, session_id: str) -> Optional[ClassifiedSession]:
        for session in self.all():
            if session.id == session_id:
                return session
        return None


class SessionStats(BaseModel):
    total: int = 0
    ongoing: int = 0
    upcoming: int = 0
    previous: int = 0
