# alumni_portal/schemas/board.py
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from alumni_portal.schemas.session import ClassifiedSession, SessionStats

class AttendanceView(BaseModel):
    state: str
    will_attend: Optional[bool] = None
    enabled: bool = False

class FeedbackView(BaseModel):
    state: str
    rating: Optional[int] = None
    text: Optional[str] = None
    editable: bool = False

class SessionCard(BaseModel):
    session: ClassifiedSession
    eligible: bool = False
    attendance: AttendanceView
    feedback: FeedbackView
    admin_actions: List[str] = Field(default_factory=list)

class SessionBoard(BaseModel):
    ongoing: List[SessionCard] = Field(default_factory=list)
    upcoming: List[SessionCard] = Field(default_factory=list)
    previous: List[SessionCard] = Field(default_factory=list)
    stats: SessionStats = Field(default_factory=SessionStats)
    stale: bool = False
    fetched_at: Optional[datetime] = None
