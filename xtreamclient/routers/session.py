"""
Session API endpoints.
Login, logout, status and "remember me" management.
"""
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from xtreamclient.config import get_settings
from xtreamclient.limiter import limiter
from xtreamclient.models.session import SessionResponse
from xtreamclient.services.session_controller import SessionController, get_session_controller

router = APIRouter(prefix="/api/session", tags=["session"])


class LoginRequest(BaseModel):
    server: str
    username: str
    password: str
    remember: bool = False


async def _response(controller: SessionController) -> SessionResponse:
    remembered = await controller.remembered_credentials() is not None
    return SessionResponse.from_session(controller.session, remembered=remembered)


@router.get("", response_model=SessionResponse)
async def get_session(controller: SessionController = Depends(get_session_controller)):
    """Current authentication status and account profile."""
    return await _response(controller)


@router.post("/login", response_model=SessionResponse)
@limiter.limit(lambda: f"{get_settings().rate_limit_per_minute}/minute")
async def login(
    request: Request,
    body: LoginRequest,
    controller: SessionController = Depends(get_session_controller)
):
    """
    Log in to a provider.
    Failures return a localized, kind-specific message.
    """
    await controller.login(body.server, body.username, body.password, remember=body.remember)
    return await _response(controller)


@router.post("/logout", response_model=SessionResponse)
async def logout(controller: SessionController = Depends(get_session_controller)):
    """Forget all credentials and end the session."""
    await controller.logout()
    return await _response(controller)


@router.delete("/remember", response_model=SessionResponse)
async def forget_credentials(controller: SessionController = Depends(get_session_controller)):
    """Stop remembering credentials; the current session stays active."""
    await controller.forget()
    return await _response(controller)
