# alumni_portal/services/session_requests.py
"""
Checks for the session request lifecycle.

Alumni, faculty and admins ask to host a session; the request waits as
``pending`` until an admin approves it (fixing venue, date and time) or
rejects it. Everything here runs before the backend is called.
"""

import re
from datetime import date
from typing import Any, Dict

from alumni_portal.core.errors import PermissionDenied, ValidationError
from alumni_portal.schemas.session import SessionStatus
from alumni_portal.schemas.session_request import SessionRequestCreate
from alumni_portal.schemas.user import UserRoleEnum, Viewer, normalize_audience, normalize_departments

# Students attend sessions; they do not host them
REQUESTER_ROLES = {UserRoleEnum.ALUMNI, UserRoleEnum.FACULTY, UserRoleEnum.ADMIN}

_TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def _check_date(value: str, field: str) -> str:
    value = (value or "").strip()
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"{field} must be a date (YYYY-MM-DD)", details={field: value})
    return value


def _check_time(value: str, field: str) -> str:
    value = (value or "").strip()
    match = _TIME_PATTERN.match(value)
    if not match:
        raise ValidationError(f"{field} must be a time (HH:MM)", details={field: value})
    return f"{int(match.group(1)):02d}:{match.group(2)}"


def build_request_payload(body: SessionRequestCreate, viewer: Viewer) -> Dict[str, Any]:
    """Backend payload for a new session request, filled from the requester's profile."""
    if viewer.role not in REQUESTER_ROLES:
        raise PermissionDenied("Only alumni, faculty and admins can request sessions")

    title = body.session_title.strip()
    if not title:
        raise ValidationError("Please provide a session title")

    audience = normalize_audience(body.target_audience)
    departments = normalize_departments(body.target_departments)
    if not audience:
        raise ValidationError("Please select at least one target year")
    if not departments:
        raise ValidationError("Please select at least one target department")

    return {
        "fullName": viewer.full_name or "",
        "email": viewer.email or "",
        "userId": viewer.id,
        "userType": viewer.role.value,
        "department": body.department.strip().upper() or (viewer.department or ""),
        "phoneNumber": body.phone_number.strip(),
        "graduationYear": body.graduation_year,
        "sessionTitle": title,
        "sessionDescription": body.session_description.strip(),
        "sessionType": body.session_type.value,
        "sessionMode": body.session_mode.value,
        "targetAudience": audience,
        "targetDepartments": departments,
        "preferredDate": _check_date(body.preferred_date, "preferredDate"),
        "preferredTime": _check_time(body.preferred_time, "preferredTime"),
        "status": SessionStatus.PENDING.value,
        "contact": body.phone_number.strip(),
    }


def validate_approval(venue: str, session_date: str, session_time: str) -> Dict[str, str]:
    """Venue, date and time an approved request is scheduled at; all three are required."""
    venue = (venue or "").strip()
    if not venue:
        raise ValidationError("Please provide a venue")
    return {
        "venue": venue,
        "date": _check_date(session_date, "date"),
        "time": _check_time(session_time, "time"),
    }


def validate_feedback_link(link: str) -> str:
    link = (link or "").strip()
    if not link:
        raise ValidationError("Please enter a feedback form link")
    return link
