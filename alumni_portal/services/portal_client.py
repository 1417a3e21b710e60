# alumni_portal/services/portal_client.py
import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import ValidationError as SchemaValidationError

from alumni_portal.core.config import settings
from alumni_portal.core.errors import (
    AuthenticationError,
    NetworkError,
    NotFoundError,
    PermissionDenied,
    ServerError,
)
from alumni_portal.schemas.attendance import AttendanceRecord, AttendanceStats
from alumni_portal.schemas.session import Session
from alumni_portal.schemas.session_request import SessionRequest
from alumni_portal.schemas.user import Viewer
from alumni_portal.services.session_classifier import coerce_sessions

logger = logging.getLogger(__name__)


class PortalClient:
    """Thin client for the portal's REST backend.

    Every call is a single request: no retries and no backoff. Failures are
    raised as NetworkError, NotFoundError, AuthenticationError,
    PermissionDenied or ServerError.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.PORTAL_API_URL).rstrip('/')
        self.token = token
        self.timeout = aiohttp.ClientTimeout(
            total=timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS
        )

    @property
    def headers(self) -> Dict[str, str]:
        headers = {
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        }
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.request(
                    method,
                    url,
                    headers=self.headers,
                    json=payload
                ) as response:
                    try:
                        body = await response.json(content_type=None)
                    except ValueError:
                        body = None
                    if not isinstance(body, dict):
                        body = {}

                    if response.status >= 400:
                        self._raise_for_status(response.status, body, method, path)
                    return body

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Portal request {method} {path} failed: {str(e)}")
            raise NetworkError(
                message="Could not reach the portal backend",
                details={"path": path, "reason": str(e) or type(e).__name__}
            ) from e

    @staticmethod
    def _raise_for_status(status_code: int, body: Dict[str, Any], method: str, path: str):
        message = body.get('message') or f"Portal backend returned {status_code}"
        details = {"path": path, "status": status_code}
        if status_code == 404:
            raise NotFoundError(message=message, details=details)
        if status_code == 401:
            raise AuthenticationError(message=message, details=details)
        if status_code == 403:
            raise PermissionDenied(message=message, details=details)

        logger.error(f"Portal request {method} {path} returned {status_code}: {message}")
        raise ServerError(
            message=message,
            status_code=status_code if status_code >= 500 else 502,
            details=details
        )

    async def fetch_all_sessions(self) -> List[Session]:
        """Every session the backend knows about, in any state."""
        body = await self._request('GET', '/api/sessions')
        data = body.get('data') or {}
        raw_sessions = data.get('sessions') if isinstance(data, dict) else None
        return coerce_sessions(raw_sessions or [])

    async def submit_attendance_response(self, session_id: str, will_attend: bool) -> Dict[str, Any]:
        return await self._request(
            'POST',
            f'/api/sessions/{session_id}/attendance',
            {'willAttend': will_attend}
        )

    async def get_student_attendance(self, session_id: str) -> Optional[AttendanceRecord]:
        """The viewer's stored response, or ``None`` when there is none yet."""
        try:
            body = await self._request('GET', f'/api/sessions/{session_id}/student-attendance')
        except NotFoundError:
            return None
        data = body.get('data') or {}
        attendance = data.get('attendance') if isinstance(data, dict) else None
        if not attendance:
            return None
        return AttendanceRecord.model_validate(attendance)

    async def submit_feedback(self, session_id: str, text: str, rating: int) -> Dict[str, Any]:
        return await self._request(
            'POST',
            f'/api/sessions/{session_id}/feedback',
            {'feedbackText': text, 'feedbackRating': rating}
        )

    async def update_session_status(self, session_id: str, status: str, reason: str = '') -> Dict[str, Any]:
        return await self._request(
            'PATCH',
            f'/api/sessions/{session_id}/status',
            {'status': status, 'reason': reason}
        )

    async def delete_session(self, session_id: str) -> Dict[str, Any]:
        return await self._request('DELETE', f'/api/sessions/{session_id}')

    async def get_attendance_stats(self, session_id: str) -> AttendanceStats:
        body = await self._request('GET', f'/api/sessions/{session_id}/attendance-stats')
        data = body.get('data')
        stats = data if isinstance(data, dict) else body
        if isinstance(stats.get('stats'), dict):
            stats = stats['stats']
        return AttendanceStats.model_validate(stats).fill_percentages()

    async def update_feedback_link(self, session_id: str, feedback_form_link: str) -> Dict[str, Any]:
        return await self._request(
            'PATCH',
            f'/api/sessions/{session_id}/feedback-link',
            {'feedbackFormLink': feedback_form_link}
        )

    async def create_session(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Submit a session request; the backend stores it as pending."""
        return await self._request('POST', '/api/sessions', payload)

    async def get_pending_sessions(self) -> List[SessionRequest]:
        body = await self._request('GET', '/api/sessions/pending')
        data = body.get('data') if isinstance(body.get('data'), dict) else {}
        raw = data.get('pendingRequests') or body.get('pendingRequests') or []
        return self._coerce_requests(raw)

    async def get_session_requests(self) -> List[SessionRequest]:
        body = await self._request('GET', '/api/sessions/requests')
        data = body.get('data') if isinstance(body.get('data'), dict) else {}
        return self._coerce_requests(data.get('requests') or [])

    async def approve_session_request(
        self,
        request_id: str,
        venue: str,
        date: str,
        time: str
    ) -> Dict[str, Any]:
        return await self._request(
            'PATCH',
            f'/api/sessions/requests/{request_id}/approve',
            {'venue': venue, 'date': date, 'time': time}
        )

    async def reject_session_request(self, request_id: str) -> Dict[str, Any]:
        return await self._request('PATCH', f'/api/sessions/requests/{request_id}/reject')

    @staticmethod
    def _coerce_requests(records: List[Any]) -> List[SessionRequest]:
        requests = []
        for record in records:
            if not isinstance(record, dict):
                continue
            try:
                requests.append(SessionRequest.model_validate(record))
            except SchemaValidationError as e:
                logger.warning(f"Skipping malformed session request: {e.error_count()} errors")
        return requests

    async def get_profile(self) -> Viewer:
        body = await self._request('GET', '/user/profile')
        data = body.get('data') if isinstance(body.get('data'), dict) else body
        user = data.get('user') if isinstance(data.get('user'), dict) else data
        return Viewer.model_validate(user)
