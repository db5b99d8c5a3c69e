"""API endpoints for the login surface: bootstrap, credential submission, status."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from typing import Dict, Any
from login_gateway.core.surface_manager import SurfaceManager, surface_manager
from login_gateway.models.auth import LoginRequest, LoginResponse, SurfaceResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def get_surface_manager() -> SurfaceManager:
    """Dependency returning the process-wide surface manager."""
    return surface_manager


def _require_session_id(request: Request) -> str:
    session_id = getattr(request.state, "session_id", None)
    if not session_id:
        raise HTTPException(status_code=400, detail="No session ID found")
    return session_id


@router.get("/surface", response_model=SurfaceResponse)
async def login_surface(
    request: Request, manager: SurfaceManager = Depends(get_surface_manager)
):
    """
    Activate the login surface for this browser.

    Redirects straight away when a session already exists; otherwise waits
    for the display settings so the page renders in one pass.
    """
    session_id = _require_session_id(request)
    surface = await manager.get_or_create_surface(session_id)

    redirected = await surface.bootstrap.activate()
    if not redirected:
        await surface.bootstrap.wait_for_settings()

    return SurfaceResponse(
        session_id=session_id,
        interactive=surface.interactive,
        redirect=surface.redirect,
        settings=surface.display_settings,
        notifications=surface.drain_notifications(),
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    login_data: LoginRequest,
    manager: SurfaceManager = Depends(get_surface_manager),
):
    """Submit the login form. Answers with JSON instead of reloading the page."""
    session_id = _require_session_id(request)
    surface = await manager.get_or_create_surface(session_id)
    flow = surface.login_flow

    if flow.in_flight:
        raise HTTPException(status_code=409, detail="A sign-in is already in progress")

    # The form only accepts input once bootstrap found no session
    if not surface.interactive:
        if await surface.bootstrap.activate():
            return LoginResponse(
                state=flow.state.value,
                in_flight=flow.in_flight,
                redirect=surface.redirect,
                notifications=surface.drain_notifications(),
            )
        await surface.bootstrap.wait_for_settings()

    flow.update_credentials(login_data.email, login_data.password)
    settled = await flow.submit()
    if settled is None:
        raise HTTPException(status_code=409, detail="A sign-in is already in progress")

    return LoginResponse(
        state=settled.value,
        in_flight=flow.in_flight,
        redirect=surface.redirect,
        notifications=surface.drain_notifications(),
    )


@router.get("/status")
async def auth_status(
    request: Request, manager: SurfaceManager = Depends(get_surface_manager)
) -> Dict[str, Any]:
    """Check whether this browser holds a session the identity service accepts."""
    session_id = getattr(request.state, "session_id", None)

    if not session_id:
        return {"authenticated": False, "message": "No session"}

    identity = manager.get_identity(session_id)
    if identity is None:
        return {"authenticated": False, "session_id": session_id}

    try:
        session = await identity.get_current_session()
    except Exception as e:
        logger.warning(f"Session lookup failed for {session_id}: {e}")
        session = None

    return {"authenticated": session is not None, "session_id": session_id}
