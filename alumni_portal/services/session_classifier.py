# alumni_portal/services/session_classifier.py
"""
Buckets portal sessions into ongoing, upcoming and previous.

Every session that is not cancelled or rejected lands in exactly one bucket.
A session is assumed to last ``SESSION_DURATION_MINUTES`` from its start; on
its own calendar day it is ongoing while the current minute lies inside that
window (both ends inclusive). Sessions without a time start at midnight.
"""

import logging
from datetime import datetime, time, timedelta
from typing import Any, Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError as SchemaValidationError

from alumni_portal.core.config import get_session_duration
from alumni_portal.schemas.session import (
    Bucket,
    ClassifiedSession,
    ClassifiedSessions,
    DEFAULT_DESCRIPTION,
    DEFAULT_PROFILE_IMAGE,
    DEFAULT_TITLE,
    Session,
    SessionHead,
    SessionStats,
    SessionStatus,
    TBA,
)
from alumni_portal.schemas.user import normalize_audience, normalize_departments

logger = logging.getLogger(__name__)

MIDNIGHT = "00:00"

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# Display status shown on the card for each bucket
BUCKET_STATUS = {
    Bucket.ONGOING: SessionStatus.ONGOING.value,
    Bucket.UPCOMING: SessionStatus.UPCOMING.value,
    Bucket.PREVIOUS: SessionStatus.COMPLETED.value,
}

def parse_time(value: Optional[str]) -> Tuple[int, int]:
    """``"HH:MM"`` -> (hour, minute). Anything unusable falls back to midnight."""
    text = (value or "").strip() or MIDNIGHT
    parts = text.split(":")
    try:
        hour = int(parts[0])
        minute = int(parts[1]) if len(parts) > 1 else 0
    except ValueError:
        logger.warning(f"Unparsable session time {value!r}, defaulting to {MIDNIGHT}")
        return 0, 0
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        logger.warning(f"Out of range session time {value!r}, defaulting to {MIDNIGHT}")
        return 0, 0
    return hour, minute

def session_start(session: Session) -> Optional[datetime]:
    if session.date is None:
        return None
    hour, minute = parse_time(session.time)
    return datetime.combine(session.date, time(hour, minute))

def _wall_clock(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now()
    if now.tzinfo is not None:
        return now.replace(tzinfo=None)
    return now

def bucket_for(
    start: Optional[datetime],
    now: datetime,
    duration: timedelta,
) -> Bucket:
    """Pick the bucket for a session starting at ``start``.

    Same-day comparisons use minute resolution; the seconds of ``now`` are
    ignored, so a session ending at 11:00 is still ongoing at 11:00:59.
    """
    if start is None:
        # No usable date: never "today" and never in the future
        return Bucket.PREVIOUS

    if start.date() == now.date():
        current = now.replace(second=0, microsecond=0)
        end = start + duration
        if start <= current <= end:
            return Bucket.ONGOING
        if current < start:
            return Bucket.UPCOMING
        return Bucket.PREVIOUS

    if start > now:
        return Bucket.UPCOMING
    return Bucket.PREVIOUS

def _display(session: Session, start: Optional[datetime], bucket: Bucket) -> ClassifiedSession:
    head = session.session_head or SessionHead()
    return ClassifiedSession(
        id=session.id,
        title=session.title or DEFAULT_TITLE,
        description=session.description or DEFAULT_DESCRIPTION,
        session_head=head,
        profile_image=head.profile_photo or DEFAULT_PROFILE_IMAGE,
        venue=session.venue or TBA,
        date=session.date,
        time=session.time or "",
        day=str(session.date.day) if session.date else None,
        month=MONTH_NAMES[session.date.month - 1] if session.date else None,
        start=start,
        status=BUCKET_STATUS[bucket],
        bucket=bucket,
        department=session.department or "",
        manually_completed=session.manually_completed,
        target_audience=normalize_audience(session.target_audience),
        target_departments=normalize_departments(session.target_departments),
        feedback_form_link=session.feedback_form_link,
        meeting_link=session.meeting_link,
    )

def coerce_sessions(records: Iterable[Any]) -> List[Session]:
    """Turn raw backend records into Session models, dropping unusable ones."""
    sessions = []
    for record in records or []:
        if record is None:
            continue
        if isinstance(record, Session):
            sessions.append(record)
            continue
        try:
            sessions.append(Session.model_validate(record))
        except SchemaValidationError as e:
            logger.warning(f"Skipping malformed session record: {e.error_count()} errors")
    return sessions

def classify_session(
    session: Session,
    now: Optional[datetime] = None,
    duration: Optional[timedelta] = None,
) -> Optional[ClassifiedSession]:
    """Classify one session; cancelled and rejected sessions yield ``None``."""
    if session.is_hidden:
        return None

    now = _wall_clock(now)
    duration = duration if duration is not None else get_session_duration()
    start = session_start(session)

    if session.manually_completed:
        bucket = Bucket.PREVIOUS
    else:
        bucket = bucket_for(start, now, duration)
    return _display(session, start, bucket)

def _start_key(session: ClassifiedSession) -> datetime:
    return session.start or datetime.min

def classify(
    sessions: Iterable[Union[Session, dict]],
    now: Optional[datetime] = None,
    duration: Optional[timedelta] = None,
) -> ClassifiedSessions:
    """Partition sessions into the three board buckets.

    ``upcoming`` is sorted soonest first, ``previous`` most recent first and
    ``ongoing`` keeps input order. The result is recomputed from scratch on
    every call.
    """
    now = _wall_clock(now)
    duration = duration if duration is not None else get_session_duration()

    result = ClassifiedSessions()
    for session in coerce_sessions(sessions):
        classified = classify_session(session, now, duration)
        if classified is None:
            continue
        if session.manually_completed:
            logger.debug(f"Session {session.id or session.title} is manually completed")
        getattr(result, classified.bucket.value).append(classified)

    result.upcoming.sort(key=_start_key)
    result.previous.sort(key=_start_key, reverse=True)
    return result

def session_stats(classified: ClassifiedSessions) -> SessionStats:
    return SessionStats(
        total=len(classified.ongoing) + len(classified.upcoming) + len(classified.previous),
        ongoing=len(classified.ongoing),
        upcoming=len(classified.upcoming),
        previous=len(classified.previous),
    )
