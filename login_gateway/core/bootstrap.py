"""Session check and settings fetch run when a login surface is activated."""

import asyncio
import logging
from typing import Optional
from login_gateway.models.settings import default_display_settings, merge_display_settings

logger = logging.getLogger(__name__)


class BootstrapController:
    """
    Runs the two activation lookups for a login surface.

    The settings fetch runs as its own task; the session check is awaited
    directly so that an existing session redirects without waiting on
    settings. Failures of either lookup are logged and degrade silently.
    """

    def __init__(self, surface, identity, settings_store, landing_path: str = "/"):
        self.surface = surface
        self.identity = identity
        self.settings_store = settings_store
        self.landing_path = landing_path
        self._settings_task: Optional[asyncio.Task] = None

    async def activate(self) -> bool:
        """Bootstrap the surface. Returns True if the caller was redirected."""
        if not self.surface.is_active:
            return self.surface.redirect is not None

        if self._settings_task and not self._settings_task.done():
            self._settings_task.cancel()

        # Each activation starts from its own defaults
        self.surface.apply_display_settings(default_display_settings())
        self._settings_task = self.surface.track(
            asyncio.create_task(self._load_settings())
        )

        if await self._session_exists():
            logger.info(f"Surface {self.surface.surface_id} already has a session")
            self.surface.redirect_to(self.landing_path)
            return True

        self.surface.mark_interactive()
        return False

    async def wait_for_settings(self):
        """Wait until the settings fetch has settled. Never raises."""
        if self._settings_task is not None:
            await asyncio.wait({self._settings_task})

    async def _session_exists(self) -> bool:
        try:
            session = await self.identity.get_current_session()
        except Exception as e:
            logger.warning(f"Session check failed, treating as signed out: {e}")
            return False
        return session is not None

    async def _load_settings(self):
        try:
            rows = await self.settings_store.list_settings()
        except Exception as e:
            logger.warning(f"Settings fetch failed, keeping defaults: {e}")
            return

        if not rows:
            logger.info("No remote display settings, keeping defaults")
            return

        merged = merge_display_settings(default_display_settings(), rows)
        self.surface.apply_display_settings(merged)
