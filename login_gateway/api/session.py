"""Login surface management endpoints"""

from fastapi import APIRouter, Depends, Request
from typing import Dict, Any
from login_gateway.api.auth import get_surface_manager
from login_gateway.core.surface_manager import SurfaceManager

router = APIRouter(prefix="/session", tags=["session"])


@router.get("/info")
async def get_session_info(
    request: Request, manager: SurfaceManager = Depends(get_surface_manager)
) -> Dict[str, Any]:
    """Get current surface information"""
    session_id = getattr(request.state, "session_id", None)

    if not session_id:
        return {"error": "No session ID found", "session_id": None}

    surface = await manager.get_surface(session_id)

    if surface:
        return {
            "session_id": session_id,
            "created_at": surface.created_at.isoformat(),
            "age_minutes": round(surface.age_minutes, 2),
            "idle_minutes": round(surface.idle_minutes, 2),
            "is_active": surface.is_active,
            "interactive": surface.interactive,
            "redirect": surface.redirect,
            "submission_state": surface.login_flow.state.value,
        }
    else:
        return {"session_id": session_id, "error": "Surface not found in manager"}


@router.delete("/")
async def destroy_session(
    request: Request, manager: SurfaceManager = Depends(get_surface_manager)
) -> Dict[str, Any]:
    """Tear down the current login surface"""
    session_id = getattr(request.state, "session_id", None)

    if session_id and await manager.destroy_surface(session_id):
        return {"message": "Surface destroyed", "session_id": session_id}
    else:
        return {"error": "No surface to destroy"}
