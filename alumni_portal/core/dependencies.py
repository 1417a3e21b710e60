from functools import lru_cache

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from alumni_portal.core.config import get_portal_settings
from alumni_portal.core.errors import AuthenticationError
from alumni_portal.schemas.user import Viewer
from alumni_portal.services.portal_client import PortalClient
from alumni_portal.services.session_board import SessionBoardService, SessionSnapshot

# Tokens are issued by the portal backend; this service only forwards them
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


@lru_cache()
def get_session_snapshot() -> SessionSnapshot:
    """Process-wide snapshot shared by every request"""
    return SessionSnapshot()

async def get_portal_client(token: str = Depends(oauth2_scheme)) -> PortalClient:
    """Backend client acting on behalf of the caller"""
    portal = get_portal_settings()
    return PortalClient(portal["base_url"], token=token, timeout=portal["timeout"])

async def get_current_viewer(
    token: str = Depends(oauth2_scheme),
    client: PortalClient = Depends(get_portal_client)
) -> Viewer:
    if not token:
        raise AuthenticationError("Not authenticated", error_code="MISSING_TOKEN")
    return await client.get_profile()

async def get_session_board_service(
    client: PortalClient = Depends(get_portal_client),
    snapshot: SessionSnapshot = Depends(get_session_snapshot)
) -> SessionBoardService:
    return SessionBoardService(client, snapshot)
