"""Manages one login surface per browser session"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional
from login_gateway.config import settings
from login_gateway.core.http_client import http_client_manager
from login_gateway.core.identity_client import IdentityClient
from login_gateway.core.settings_store import SettingsStore
from login_gateway.core.surface import LoginSurface

logger = logging.getLogger(__name__)


def _default_identity_factory() -> IdentityClient:
    return IdentityClient(
        http_client_manager.client, settings.identity_url, settings.identity_api_key
    )


def _default_settings_store_factory() -> SettingsStore:
    return SettingsStore(
        http_client_manager.client,
        settings.identity_url,
        settings.identity_api_key,
        table=settings.settings_table,
    )


class SurfaceManager:
    """
    Tracks login surfaces keyed by browser session id.

    The identity client outlives the surface: when a torn-down surface is
    replaced, the new one reuses the browser's identity client so a session
    obtained earlier is visible to the next bootstrap.
    """

    def __init__(
        self,
        identity_factory: Callable[[], Any] = _default_identity_factory,
        settings_store_factory: Callable[[], Any] = _default_settings_store_factory,
        landing_path: Optional[str] = None,
    ):
        """Initializes the surface manager's state."""
        self._identity_factory = identity_factory
        self._settings_store_factory = settings_store_factory
        self.landing_path = landing_path or settings.landing_path
        self._surfaces: Dict[str, LoginSurface] = {}
        self._identities: Dict[str, Any] = {}
        self._lock = asyncio.Lock()
        self._cleanup_task: Optional[asyncio.Task] = None
        self.surface_timeout_minutes = settings.surface_max_age_minutes
        self.idle_timeout_minutes = settings.surface_idle_timeout_minutes

    async def start(self):
        """Start the cleanup task"""
        if not self._cleanup_task:
            self._cleanup_task = asyncio.create_task(self._cleanup_loop())
            logger.info("Surface manager started")

    async def stop(self):
        """Stop the cleanup task and tear down all surfaces"""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None

        async with self._lock:
            for surface in self._surfaces.values():
                surface.deactivate()
            self._surfaces.clear()
            self._identities.clear()

        logger.info("Surface manager stopped")

    async def get_or_create_surface(self, session_id: str) -> LoginSurface:
        """Get the active surface for a session, replacing a torn-down one"""
        async with self._lock:
            surface = self._surfaces.get(session_id)
            if surface and surface.is_active:
                surface.touch()
                return surface

            identity = self._identities.get(session_id)
            if identity is None:
                identity = self._identity_factory()
                self._identities[session_id] = identity

            logger.info(f"Creating login surface for session {session_id}")
            surface = LoginSurface(
                session_id,
                identity,
                self._settings_store_factory(),
                landing_path=self.landing_path,
            )
            self._surfaces[session_id] = surface
            return surface

    async def get_surface(self, session_id: str) -> Optional[LoginSurface]:
        """Get existing surface by session id"""
        async with self._lock:
            surface = self._surfaces.get(session_id)
            if surface:
                surface.touch()
            return surface

    def get_identity(self, session_id: str) -> Optional[Any]:
        """Identity client held for a session, if any"""
        return self._identities.get(session_id)

    async def destroy_surface(self, session_id: str) -> bool:
        """Tear down the surface and forget the browser's identity client"""
        async with self._lock:
            surface = self._surfaces.pop(session_id, None)
            self._identities.pop(session_id, None)
            if surface is None:
                return False
            surface.deactivate()
            logger.info(f"Destroyed surface {session_id}")
            return True

    async def _cleanup_loop(self):
        """Background task to tear down expired surfaces"""
        while True:
            try:
                await asyncio.sleep(60)
                await self._cleanup_expired_surfaces()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in cleanup loop: {e}")

    async def _cleanup_expired_surfaces(self):
        """Remove expired or idle surfaces"""
        async with self._lock:
            expired = [
                session_id
                for session_id, surface in self._surfaces.items()
                if surface.age_minutes > self.surface_timeout_minutes
                or surface.idle_minutes > self.idle_timeout_minutes
            ]

            for session_id in expired:
                logger.info(f"Cleaning up expired surface {session_id}")
                self._surfaces.pop(session_id).deactivate()
                self._identities.pop(session_id, None)

    @property
    def active_surfaces(self) -> int:
        """Get count of active surfaces"""
        return sum(1 for surface in self._surfaces.values() if surface.is_active)

    def get_surface_info(self) -> Dict[str, Any]:
        """Get information about all surfaces"""
        return {
            "active_surfaces": self.active_surfaces,
            "surfaces": [
                {
                    "session_id": surface.surface_id,
                    "age_minutes": round(surface.age_minutes, 2),
                    "idle_minutes": round(surface.idle_minutes, 2),
                    "is_active": surface.is_active,
                    "interactive": surface.interactive,
                    "created_at": surface.created_at.isoformat(),
                }
                for surface in self._surfaces.values()
            ],
        }


# Global instance
surface_manager = SurfaceManager()
