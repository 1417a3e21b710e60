from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from alumni_portal.core.dependencies import get_current_viewer, get_session_board_service
from alumni_portal.core.errors import BaseAPIError
from alumni_portal.core.logging import logger
from alumni_portal.schemas.attendance import (
    AttendanceRequest,
    AttendanceStats,
    FeedbackRequest,
    StatusUpdateRequest,
)
from alumni_portal.schemas.board import SessionBoard, SessionCard
from alumni_portal.schemas.session import SessionStats
from alumni_portal.schemas.session_request import (
    ApproveRequest,
    FeedbackLinkRequest,
    RequestStatus,
    SessionRequest,
    SessionRequestCreate,
)
from alumni_portal.schemas.user import Viewer
from alumni_portal.services.session_board import SessionBoardService

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.get("", response_model=SessionBoard)
async def get_session_board(
    viewer: Viewer = Depends(get_current_viewer),
    board_service: SessionBoardService = Depends(get_session_board_service)
) -> SessionBoard:
    """
    Ongoing, upcoming and previous sessions for the current viewer, with the
    attendance, feedback and admin actions each card offers.
    """
    try:
        return await board_service.load_board(viewer)
    except BaseAPIError:
        raise
    except Exception as e:
        logger.exception("Unexpected error building the session board")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats", response_model=SessionStats)
async def get_session_stats(
    viewer: Viewer = Depends(get_current_viewer),
    board_service: SessionBoardService = Depends(get_session_board_service)
) -> SessionStats:
    try:
        await board_service.refresh()
        return board_service.stats()
    except BaseAPIError:
        raise
    except Exception as e:
        logger.exception("Unexpected error computing session stats")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{session_id}/attendance", response_model=SessionCard)
async def submit_attendance(
    session_id: str,
    body: AttendanceRequest,
    viewer: Viewer = Depends(get_current_viewer),
    board_service: SessionBoardService = Depends(get_session_board_service)
) -> SessionCard:
    """Record whether the student will attend; a new answer replaces the old one."""
    try:
        return await board_service.respond(session_id, viewer, body.will_attend)
    except BaseAPIError:
        raise
    except Exception as e:
        logger.exception("Unexpected error submitting attendance")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{session_id}/feedback", response_model=SessionCard)
async def submit_feedback(
    session_id: str,
    body: FeedbackRequest,
    viewer: Viewer = Depends(get_current_viewer),
    board_service: SessionBoardService = Depends(get_session_board_service)
) -> SessionCard:
    """Submit feedback for a completed session. Only one submission is accepted."""
    try:
        return await board_service.submit_feedback(session_id, viewer, body.rating, body.text)
    except BaseAPIError:
        raise
    except Exception as e:
        logger.exception("Unexpected error submitting feedback")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/{session_id}/status", status_code=status.HTTP_204_NO_CONTENT)
async def update_session_status(
    session_id: str,
    body: StatusUpdateRequest,
    viewer: Viewer = Depends(get_current_viewer),
    board_service: SessionBoardService = Depends(get_session_board_service)
):
    try:
        await board_service.change_status(session_id, viewer, body.status, body.reason)
    except BaseAPIError:
        raise
    except Exception as e:
        logger.exception("Unexpected error updating session status")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    session_id: str,
    viewer: Viewer = Depends(get_current_viewer),
    board_service: SessionBoardService = Depends(get_session_board_service)
):
    try:
        await board_service.delete(session_id, viewer)
    except BaseAPIError:
        raise
    except Exception as e:
        logger.exception("Unexpected error deleting session")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{session_id}/attendance-stats", response_model=AttendanceStats)
async def get_attendance_stats(
    session_id: str,
    viewer: Viewer = Depends(get_current_viewer),
    board_service: SessionBoardService = Depends(get_session_board_service)
) -> AttendanceStats:
    try:
        return await board_service.attendance_stats(session_id, viewer)
    except BaseAPIError:
        raise
    except Exception as e:
        logger.exception("Unexpected error fetching attendance stats")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/{session_id}/feedback-link", status_code=status.HTTP_204_NO_CONTENT)
async def update_feedback_link(
    session_id: str,
    body: FeedbackLinkRequest,
    viewer: Viewer = Depends(get_current_viewer),
    board_service: SessionBoardService = Depends(get_session_board_service)
):
    try:
        await board_service.set_feedback_link(session_id, viewer, body.feedback_form_link)
    except BaseAPIError:
        raise
    except Exception as e:
        logger.exception("Unexpected error updating feedback link")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/requests", status_code=status.HTTP_201_CREATED)
async def request_session(
    body: SessionRequestCreate,
    viewer: Viewer = Depends(get_current_viewer),
    board_service: SessionBoardService = Depends(get_session_board_service)
):
    """Ask to host a session. It stays pending until an admin approves it."""
    try:
        await board_service.request_session(viewer, body)
        return {"status": RequestStatus.PENDING.value, "message": "Session request submitted"}
    except BaseAPIError:
        raise
    except Exception as e:
        logger.exception("Unexpected error submitting session request")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/requests", response_model=List[SessionRequest])
async def list_session_requests(
    pending: bool = False,
    viewer: Viewer = Depends(get_current_viewer),
    board_service: SessionBoardService = Depends(get_session_board_service)
) -> List[SessionRequest]:
    try:
        return await board_service.session_requests(viewer, pending_only=pending)
    except BaseAPIError:
        raise
    except Exception as e:
        logger.exception("Unexpected error listing session requests")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/requests/{request_id}/approve", status_code=status.HTTP_204_NO_CONTENT)
async def approve_session_request(
    request_id: str,
    body: ApproveRequest,
    viewer: Viewer = Depends(get_current_viewer),
    board_service: SessionBoardService = Depends(get_session_board_service)
):
    try:
        await board_service.approve_request(request_id, viewer, body.venue, body.date, body.time)
    except BaseAPIError:
        raise
    except Exception as e:
        logger.exception("Unexpected error approving session request")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/requests/{request_id}/reject", status_code=status.HTTP_204_NO_CONTENT)
async def reject_session_request(
    request_id: str,
    viewer: Viewer = Depends(get_current_viewer),
    board_service: SessionBoardService = Depends(get_session_board_service)
):
    try:
        await board_service.reject_request(request_id, viewer)
    except BaseAPIError:
        raise
    except Exception as e:
        logger.exception("Unexpected error rejecting session request")
        raise HTTPException(status_code=500, detail=str(e))
