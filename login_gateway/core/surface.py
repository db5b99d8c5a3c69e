"""The per-browser login surface: display state, notifications, navigation."""

import asyncio
import logging
from datetime import datetime
from typing import List, Optional, Set
from login_gateway.core.bootstrap import BootstrapController
from login_gateway.core.login_flow import CredentialSubmissionFlow
from login_gateway.models.auth import Notification
from login_gateway.models.settings import DisplaySettings, default_display_settings

logger = logging.getLogger(__name__)


class LoginSurface:
    """
    Server-side state of one login page.

    All mutation goes through the methods below, and every one of them is a
    no-op once the surface has been torn down (redirected, expired or
    explicitly destroyed). Pending lookups that resolve afterwards therefore
    cannot touch it.
    """

    def __init__(
        self,
        surface_id: str,
        identity,
        settings_store,
        landing_path: str = "/",
    ):
        self.surface_id = surface_id
        self.identity = identity
        self.created_at = datetime.now()
        self.last_accessed = datetime.now()
        self.is_active = True
        self.interactive = False
        self.redirect: Optional[str] = None
        self.display_settings: DisplaySettings = default_display_settings()
        self._notifications: List[Notification] = []
        self._pending: Set[asyncio.Task] = set()

        self.bootstrap = BootstrapController(
            self, identity, settings_store, landing_path
        )
        self.login_flow = CredentialSubmissionFlow(self, identity, landing_path)

    def touch(self):
        """Update last accessed time"""
        self.last_accessed = datetime.now()

    @property
    def age_minutes(self) -> float:
        """Get surface age in minutes"""
        return (datetime.now() - self.created_at).total_seconds() / 60

    @property
    def idle_minutes(self) -> float:
        """Get idle time in minutes"""
        return (datetime.now() - self.last_accessed).total_seconds() / 60

    def track(self, task: asyncio.Task) -> asyncio.Task:
        """Register a pending lookup so teardown can cancel it"""
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def notify_success(self, message: str):
        if self.is_active:
            self._notifications.append(Notification(level="success", message=message))

    def notify_error(self, message: str):
        if self.is_active:
            self._notifications.append(Notification(level="error", message=message))

    def drain_notifications(self) -> List[Notification]:
        """Return queued notifications and clear the queue"""
        notifications, self._notifications = self._notifications, []
        return notifications

    def apply_display_settings(self, display_settings: DisplaySettings):
        if self.is_active:
            self.display_settings = display_settings

    def mark_interactive(self):
        if self.is_active:
            self.interactive = True

    def redirect_to(self, path: str):
        """Navigate away: record the target and tear the surface down."""
        if not self.is_active:
            return
        self.redirect = path
        logger.info(f"Surface {self.surface_id} redirecting to {path}")
        self.deactivate()

    def deactivate(self):
        """Tear the surface down and cancel pending lookups"""
        if not self.is_active:
            return
        self.is_active = False
        self.interactive = False
        for task in list(self._pending):
            task.cancel()
        logger.debug(f"Surface {self.surface_id} deactivated")
