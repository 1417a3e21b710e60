from .user import Viewer, UserRoleEnum, YearOfStudy, Department
from .session import (
    Bucket,
    ClassifiedSession,
    ClassifiedSessions,
    Session,
    SessionHead,
    SessionStats,
    SessionStatus,
)
from .attendance import (
    AttendanceRecord,
    AttendanceRequest,
    AttendanceStats,
    FeedbackRequest,
    FeedbackSubmission,
    StatusUpdateRequest,
)
from .board import AttendanceView, FeedbackView, SessionBoard, SessionCard
