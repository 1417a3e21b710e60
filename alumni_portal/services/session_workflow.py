# alumni_portal/services/session_workflow.py
"""
Per (session, viewer) attendance and feedback workflow.

Attendance: NOT_APPLICABLE, or UNANSWERED -> ANSWERED(will_attend), where a
new answer overwrites the previous one. Feedback: NOT_APPLICABLE, or
NO_FEEDBACK_YET -> SUBMITTED, which is terminal.

Local state only changes after the backend accepted the request, so a failed
submission leaves the workflow exactly as it was.
"""

import logging
from enum import Enum
from typing import Any, List, Optional

from alumni_portal.core.config import settings
from alumni_portal.core.errors import PermissionDenied, ValidationError
from alumni_portal.schemas.attendance import AttendanceRecord, FeedbackSubmission
from alumni_portal.schemas.board import AttendanceView, FeedbackView, SessionCard
from alumni_portal.schemas.session import Bucket, ClassifiedSession
from alumni_portal.schemas.user import Viewer
from alumni_portal.services.eligibility import can_participate, is_eligible

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5

class AttendanceState(str, Enum):
    NOT_APPLICABLE = "not_applicable"
    UNANSWERED = "unanswered"
    ANSWERED = "answered"

class FeedbackState(str, Enum):
    NOT_APPLICABLE = "not_applicable"
    NO_FEEDBACK_YET = "no_feedback_yet"
    SUBMITTED = "submitted"

class AdminAction(str, Enum):
    START = "start"
    COMPLETE = "complete"
    CANCEL = "cancel"
    DELETE = "delete"


def validate_feedback(
    rating: Any,
    text: Optional[str] = None,
    max_length: Optional[int] = None,
) -> FeedbackSubmission:
    """Check a feedback form before anything is sent.

    The rating must be an int in [1, 5] (bools and floats are rejected); the
    text is optional, stripped, and limited to ``max_length`` characters.
    """
    if max_length is None:
        max_length = settings.FEEDBACK_MAX_LENGTH

    if rating is None:
        raise ValidationError("Please provide a rating between 1 and 5")
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError(
            "Rating must be a whole number between 1 and 5",
            details={"rating": repr(rating)}
        )
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(
            "Please provide a rating between 1 and 5",
            details={"rating": rating}
        )

    if text is not None and not isinstance(text, str):
        raise ValidationError("Feedback text must be a string")
    text = (text or "").strip()
    if len(text) > max_length:
        raise ValidationError(
            f"Feedback must be at most {max_length} characters",
            details={"length": len(text), "max_length": max_length}
        )

    return FeedbackSubmission(rating=rating, text=text)


def available_admin_actions(session: ClassifiedSession, viewer: Viewer) -> List[str]:
    """Lifecycle actions an admin is offered on a card.

    Availability only; the backend decides whether the transition is allowed.
    """
    if not viewer.is_admin:
        return []
    actions = []
    if session.bucket == Bucket.UPCOMING:
        actions.append(AdminAction.START.value)
    if session.bucket == Bucket.ONGOING:
        actions.append(AdminAction.COMPLETE.value)
    actions.extend([AdminAction.CANCEL.value, AdminAction.DELETE.value])
    return actions


class SessionWorkflow:
    def __init__(
        self,
        session: ClassifiedSession,
        viewer: Viewer,
        record: Optional[AttendanceRecord] = None,
    ):
        self.session = session
        self.viewer = viewer
        self.will_attend: Optional[bool] = None
        self.feedback_submitted = False
        self.feedback_rating: Optional[int] = None
        self.feedback_text: Optional[str] = None
        self._pending = False
        if record is not None:
            self.hydrate(record)

    def hydrate(self, record: AttendanceRecord) -> None:
        """Load the last known response from the backend."""
        self.will_attend = record.will_attend
        if record.feedback_submitted:
            self.feedback_submitted = True
            self.feedback_rating = record.feedback_rating
            self.feedback_text = record.feedback_text or ""

    @property
    def eligible(self) -> bool:
        return is_eligible(self.session, self.viewer)

    @property
    def pending(self) -> bool:
        return self._pending

    @property
    def attendance_state(self) -> AttendanceState:
        if not self.can_respond:
            return AttendanceState.NOT_APPLICABLE
        if self.will_attend is None:
            return AttendanceState.UNANSWERED
        return AttendanceState.ANSWERED

    @property
    def feedback_state(self) -> FeedbackState:
        if not self._feedback_applicable:
            return FeedbackState.NOT_APPLICABLE
        if self.feedback_submitted:
            return FeedbackState.SUBMITTED
        return FeedbackState.NO_FEEDBACK_YET

    @property
    def can_respond(self) -> bool:
        return (
            can_participate(self.session, self.viewer)
            and self.session.bucket == Bucket.UPCOMING
        )

    @property
    def _feedback_applicable(self) -> bool:
        return (
            can_participate(self.session, self.viewer)
            and self.session.bucket == Bucket.PREVIOUS
        )

    @property
    def feedback_editable(self) -> bool:
        return self._feedback_applicable and not self.feedback_submitted

    def _begin(self) -> None:
        if self._pending:
            raise ValidationError(
                "A submission for this session is already in progress",
                details={"session_id": self.session.id}
            )
        self._pending = True

    async def respond(self, client, will_attend: bool) -> AttendanceState:
        """Send an attendance answer; a later answer replaces an earlier one."""
        if not self.can_respond:
            raise PermissionDenied(
                "Attendance responses are only open to eligible students for upcoming sessions",
                details={"session_id": self.session.id, "bucket": self.session.bucket.value}
            )
        if not isinstance(will_attend, bool):
            raise ValidationError("Attendance response must be yes or no")

        self._begin()
        try:
            await client.submit_attendance_response(self.session.id, will_attend)
        finally:
            self._pending = False

        self.will_attend = will_attend
        logger.info(
            f"Attendance recorded for session {self.session.id}",
            extra={"session_id": self.session.id, "viewer_id": self.viewer.id}
        )
        return self.attendance_state

    async def submit_feedback(self, client, rating: Any, text: Optional[str] = None) -> FeedbackState:
        """Validate and send feedback. Succeeds at most once per viewer and session."""
        if self.feedback_submitted:
            raise PermissionDenied(
                "Feedback has already been submitted for this session",
                details={"session_id": self.session.id}
            )
        if not self._feedback_applicable:
            raise PermissionDenied(
                "Feedback is only open to eligible students for completed sessions",
                details={"session_id": self.session.id, "bucket": self.session.bucket.value}
            )

        submission = validate_feedback(rating, text)

        self._begin()
        try:
            await client.submit_feedback(self.session.id, submission.text, submission.rating)
        finally:
            self._pending = False

        self.feedback_submitted = True
        self.feedback_rating = submission.rating
        self.feedback_text = submission.text
        logger.info(
            f"Feedback recorded for session {self.session.id}",
            extra={"session_id": self.session.id, "viewer_id": self.viewer.id}
        )
        return self.feedback_state

    def to_card(self) -> SessionCard:
        attendance_state = self.attendance_state
        feedback_state = self.feedback_state
        return SessionCard(
            session=self.session,
            eligible=self.viewer.is_student and self.eligible,
            attendance=AttendanceView(
                state=attendance_state.value,
                will_attend=self.will_attend if attendance_state == AttendanceState.ANSWERED else None,
                enabled=attendance_state != AttendanceState.NOT_APPLICABLE and not self._pending,
            ),
            feedback=FeedbackView(
                state=feedback_state.value,
                rating=self.feedback_rating if feedback_state == FeedbackState.SUBMITTED else None,
                text=self.feedback_text if feedback_state == FeedbackState.SUBMITTED else None,
                editable=self.feedback_editable and not self._pending,
            ),
            admin_actions=available_admin_actions(self.session, self.viewer),
        )
