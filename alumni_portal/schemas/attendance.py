# alumni_portal/schemas/attendance.py
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field

class AttendanceRecord(BaseModel):
    """A student's stored response for one session, as the backend returns it."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    will_attend: Optional[bool] = Field(default=None, alias="willAttend")
    feedback_submitted: bool = Field(default=False, alias="feedbackSubmitted")
    feedback_text: Optional[str] = Field(default=None, alias="feedbackText")
    feedback_rating: Optional[int] = Field(default=None, alias="feedbackRating")
    response_date: Optional[datetime] = Field(default=None, alias="responseDate")
    feedback_date: Optional[datetime] = Field(default=None, alias="feedbackDate")

class FeedbackSubmission(BaseModel):
    """Feedback that passed local validation and may be sent to the backend."""
    rating: int
    text: str = ""

class AttendanceRequest(BaseModel):
    will_attend: bool

class FeedbackRequest(BaseModel):
    # rating is checked by the workflow, not here
    rating: Any = None
    text: Optional[str] = None

class StatusUpdateRequest(BaseModel):
    status: str
    reason: str = ""

class AttendanceStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    will_attend_count: int = Field(default=0, alias="willAttendCount")
    will_not_attend_count: int = Field(default=0, alias="willNotAttendCount")
    total_responses: int = Field(default=0, alias="totalResponses")
    feedback_submitted_count: int = Field(default=0, alias="feedbackSubmittedCount")
    average_rating: float = Field(default=0.0, alias="averageRating")
    will_attend_percentage: float = Field(default=0.0, alias="willAttendPercentage")
    will_not_attend_percentage: float = Field(default=0.0, alias="willNotAttendPercentage")
    feedback_submitted_percentage: float = Field(default=0.0, alias="feedbackSubmittedPercentage")
    response_rate: Optional[float] = Field(default=None, alias="responseRate")

    def fill_percentages(self) -> "AttendanceStats":
        """Derive the percentage fields from the counts where the backend left them out."""
        total = self.total_responses or (self.will_attend_count + self.will_not_attend_count)
        if not total:
            return self
        update = {"total_responses": total}
        if not self.will_attend_percentage:
            update["will_attend_percentage"] = round(self.will_attend_count * 100 / total, 2)
        if not self.will_not_attend_percentage:
            update["will_not_attend_percentage"] = round(self.will_not_attend_count * 100 / total, 2)
        if not self.feedback_submitted_percentage:
            update["feedback_submitted_percentage"] = round(self.feedback_submitted_count * 100 / total, 2)
        return self.model_copy(update=update)
