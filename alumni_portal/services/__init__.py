# alumni_portal/services/__init__.py
from .eligibility import can_participate, is_eligible
from .session_classifier import classify, classify_session, session_stats
from .session_workflow import (
    AttendanceState,
    FeedbackState,
    SessionWorkflow,
    available_admin_actions,
    validate_feedback,
)
