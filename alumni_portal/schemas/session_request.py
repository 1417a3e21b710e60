# alumni_portal/schemas/session_request.py
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from alumni_portal.schemas.user import normalize_audience, normalize_departments

class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class SessionType(str, Enum):
    TECHNICAL = "technical"
    NON_TECHNICAL = "non-technical"
    CAREER = "career"
    OTHER = "other"

class SessionMode(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class SessionRequest(BaseModel):
    """A request to host a session, awaiting an admin's decision."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(default=None, alias="_id")
    full_name: Optional[str] = Field(default=None, alias="fullName")
    email: Optional[str] = None
    user_type: Optional[str] = Field(default=None, alias="userType")
    department: Optional[str] = None
    session_title: Optional[str] = Field(default=None, alias="sessionTitle")
    session_description: Optional[str] = Field(default=None, alias="sessionDescription")
    session_type: Optional[str] = Field(default=None, alias="sessionType")
    session_mode: Optional[str] = Field(default=None, alias="sessionMode")
    target_audience: List[str] = Field(default_factory=list, alias="targetAudience")
    target_departments: List[str] = Field(default_factory=list, alias="targetDepartments")
    preferred_date: Optional[str] = Field(default=None, alias="preferredDate")
    preferred_time: Optional[str] = Field(default=None, alias="preferredTime")
    id_number: Optional[str] = Field(default=None, alias="idNumber")
    contact: Optional[str] = None
    status: str = RequestStatus.PENDING.value

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return None if v is None else str(v)

    @field_validator("status", mode="before")
    @classmethod
    def lower_status(cls, v):
        return v.strip().lower() if isinstance(v, str) and v.strip() else RequestStatus.PENDING.value

    @field_validator("target_audience", mode="before")
    @classmethod
    def canonical_audience(cls, v: Any):
        return normalize_audience(v)

    @field_validator("target_departments", mode="before")
    @classmethod
    def canonical_departments(cls, v: Any):
        return normalize_departments(v)


class SessionRequestCreate(BaseModel):
    session_title: str
    session_description: str = ""
    session_type: SessionType = SessionType.TECHNICAL
    session_mode: SessionMode = SessionMode.ONLINE
    target_audience: List[str] = Field(default_factory=list)
    target_departments: List[str] = Field(default_factory=list)
    preferred_date: str
    preferred_time: str
    department: str = ""
    phone_number: str = ""
    graduation_year: Optional[str] = None

class ApproveRequest(BaseModel):
    venue: str = ""
    date: str = ""
    time: str = ""

class FeedbackLinkRequest(BaseModel):
    feedback_form_link: str = ""
