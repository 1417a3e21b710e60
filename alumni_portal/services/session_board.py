# alumni_portal/services/session_board.py
import asyncio
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from alumni_portal.core.errors import (
    BaseAPIError,
    NetworkError,
    NotFoundError,
    PermissionDenied,
    ServerError,
    ValidationError,
)
from alumni_portal.core.logging import log_function_call
from alumni_portal.schemas.attendance import AttendanceRecord, AttendanceStats
from alumni_portal.schemas.board import SessionBoard, SessionCard
from alumni_portal.schemas.session import Bucket, ClassifiedSessions, Session, SessionStats, SessionStatus
from alumni_portal.schemas.session_request import SessionRequest, SessionRequestCreate
from alumni_portal.schemas.user import Viewer
from alumni_portal.services.eligibility import can_participate
from alumni_portal.services.portal_client import PortalClient
from alumni_portal.services.session_classifier import classify, session_stats
from alumni_portal.services.session_requests import (
    build_request_payload,
    validate_approval,
    validate_feedback_link,
)
from alumni_portal.services.session_workflow import SessionWorkflow

logger = logging.getLogger(__name__)

# Statuses an admin may set through the lifecycle actions
ADMIN_SETTABLE_STATUSES = {
    SessionStatus.UPCOMING.value,
    SessionStatus.ONGOING.value,
    SessionStatus.COMPLETED.value,
    SessionStatus.CANCELLED.value,
}


class SessionSnapshot:
    """Last session list successfully fetched from the backend.

    Replaced as a whole on every successful refresh and left alone when a
    refresh fails, so readers always see one consistent list.
    """

    def __init__(self):
        self.sessions: Optional[List[Session]] = None
        self.fetched_at: Optional[datetime] = None

    @property
    def loaded(self) -> bool:
        return self.sessions is not None

    def replace(self, sessions: List[Session]) -> None:
        self.sessions = list(sessions)
        self.fetched_at = datetime.now()


class SessionBoardService:
    def __init__(
        self,
        client: PortalClient,
        snapshot: Optional[SessionSnapshot] = None,
        duration: Optional[timedelta] = None,
    ):
        self.client = client
        self.snapshot = snapshot if snapshot is not None else SessionSnapshot()
        self.duration = duration

    @log_function_call(logger)
    async def refresh(self) -> List[Session]:
        try:
            sessions = await self.client.fetch_all_sessions()
        except (NetworkError, ServerError) as e:
            logger.warning(f"Session refresh failed, keeping previous snapshot: {e.message}")
            raise
        self.snapshot.replace(sessions)
        logger.debug(f"Session snapshot refreshed with {len(sessions)} sessions")
        return sessions

    def classify(self, now: Optional[datetime] = None) -> ClassifiedSessions:
        return classify(self.snapshot.sessions or [], now=now, duration=self.duration)

    def stats(self, now: Optional[datetime] = None) -> SessionStats:
        return session_stats(self.classify(now))

    async def _load_record(self, session_id: str) -> Optional[AttendanceRecord]:
        try:
            return await self.client.get_student_attendance(session_id)
        except (NetworkError, ServerError) as e:
            # Shown as unanswered; the next refresh will try again
            logger.warning(
                f"Could not load attendance for session {session_id}: {e.message}",
                extra={"session_id": session_id}
            )
            return None

    async def _hydrate(self, classified: ClassifiedSessions, viewer: Viewer) -> Dict[str, AttendanceRecord]:
        if not viewer.is_student:
            return {}
        wanted = [
            session.id
            for session in (*classified.upcoming, *classified.previous)
            if session.id and can_participate(session, viewer)
        ]
        records = await asyncio.gather(*(self._load_record(session_id) for session_id in wanted))
        return {
            session_id: record
            for session_id, record in zip(wanted, records)
            if record is not None
        }

    async def build_board(
        self,
        viewer: Viewer,
        now: Optional[datetime] = None,
        stale: bool = False,
    ) -> SessionBoard:
        classified = self.classify(now)
        records = await self._hydrate(classified, viewer)

        def cards(bucket: Bucket) -> List[SessionCard]:
            return [
                SessionWorkflow(session, viewer, records.get(session.id)).to_card()
                for session in getattr(classified, bucket.value)
            ]

        return SessionBoard(
            ongoing=cards(Bucket.ONGOING),
            upcoming=cards(Bucket.UPCOMING),
            previous=cards(Bucket.PREVIOUS),
            stats=session_stats(classified),
            stale=stale,
            fetched_at=self.snapshot.fetched_at,
        )

    @log_function_call(logger)
    async def load_board(self, viewer: Viewer, now: Optional[datetime] = None) -> SessionBoard:
        """Refresh and build the board; serve the last snapshot if the refresh fails."""
        try:
            await self.refresh()
        except (NetworkError, ServerError):
            if not self.snapshot.loaded:
                raise
            return await self.build_board(viewer, now, stale=True)
        return await self.build_board(viewer, now)

    async def workflow_for(
        self,
        session_id: str,
        viewer: Viewer,
        now: Optional[datetime] = None,
    ) -> SessionWorkflow:
        await self.refresh()
        session = self.classify(now).find(session_id)
        if session is None:
            raise NotFoundError("Session not found", details={"session_id": session_id})
        record = None
        if can_participate(session, viewer):
            record = await self.client.get_student_attendance(session_id)
        return SessionWorkflow(session, viewer, record)

    @log_function_call(logger)
    async def respond(
        self,
        session_id: str,
        viewer: Viewer,
        will_attend: bool,
        now: Optional[datetime] = None,
    ) -> SessionCard:
        workflow = await self.workflow_for(session_id, viewer, now)
        await workflow.respond(self.client, will_attend)
        return workflow.to_card()

    @log_function_call(logger)
    async def submit_feedback(
        self,
        session_id: str,
        viewer: Viewer,
        rating,
        text: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> SessionCard:
        workflow = await self.workflow_for(session_id, viewer, now)
        await workflow.submit_feedback(self.client, rating, text)
        return workflow.to_card()

    def _require_admin(self, viewer: Viewer) -> None:
        if not viewer.is_admin:
            raise PermissionDenied("Only admins can manage sessions")

    async def _refresh_after_change(self) -> None:
        try:
            await self.refresh()
        except BaseAPIError as e:
            logger.warning(f"Refresh after session change failed: {e.message}")

    @log_function_call(logger)
    async def change_status(
        self,
        session_id: str,
        viewer: Viewer,
        status: str,
        reason: str = "",
    ) -> None:
        """Admin lifecycle transition (start, complete, cancel). The backend decides."""
        self._require_admin(viewer)
        status = (status or "").strip().lower()
        if status not in ADMIN_SETTABLE_STATUSES:
            raise ValidationError(
                f"Unsupported session status: {status!r}",
                details={"allowed": sorted(ADMIN_SETTABLE_STATUSES)}
            )
        await self.client.update_session_status(session_id, status, reason)
        logger.info(f"Session {session_id} status set to {status}", extra={"session_id": session_id})
        await self._refresh_after_change()

    @log_function_call(logger)
    async def delete(self, session_id: str, viewer: Viewer) -> None:
        self._require_admin(viewer)
        await self.client.delete_session(session_id)
        logger.info(f"Session {session_id} deleted", extra={"session_id": session_id})
        await self._refresh_after_change()

    async def attendance_stats(self, session_id: str, viewer: Viewer) -> AttendanceStats:
        self._require_admin(viewer)
        return await self.client.get_attendance_stats(session_id)

    @log_function_call(logger)
    async def set_feedback_link(self, session_id: str, viewer: Viewer, link: str) -> None:
        self._require_admin(viewer)
        link = validate_feedback_link(link)
        await self.client.update_feedback_link(session_id, link)
        logger.info(f"Feedback form link set for session {session_id}", extra={"session_id": session_id})
        await self._refresh_after_change()

    @log_function_call(logger)
    async def request_session(self, viewer: Viewer, body: SessionRequestCreate) -> None:
        payload = build_request_payload(body, viewer)
        await self.client.create_session(payload)
        logger.info(
            f"Session request '{payload['sessionTitle']}' submitted",
            extra={"viewer_id": viewer.id}
        )

    async def session_requests(self, viewer: Viewer, pending_only: bool = False) -> List[SessionRequest]:
        self._require_admin(viewer)
        if pending_only:
            return await self.client.get_pending_sessions()
        return await self.client.get_session_requests()

    @log_function_call(logger)
    async def approve_request(
        self,
        request_id: str,
        viewer: Viewer,
        venue: str,
        session_date: str,
        session_time: str,
    ) -> None:
        """Schedule a pending request; the approved session then shows up on the board."""
        self._require_admin(viewer)
        schedule = validate_approval(venue, session_date, session_time)
        await self.client.approve_session_request(
            request_id, schedule["venue"], schedule["date"], schedule["time"]
        )
        logger.info(f"Session request {request_id} approved")
        await self._refresh_after_change()

    @log_function_call(logger)
    async def reject_request(self, request_id: str, viewer: Viewer) -> None:
        self._require_admin(viewer)
        await self.client.reject_session_request(request_id)
        logger.info(f"Session request {request_id} rejected")
