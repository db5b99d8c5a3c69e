"""Singleton manager for the shared outbound httpx client"""

import asyncio
import logging
from typing import Optional
import httpx
from login_gateway.config import settings

logger = logging.getLogger(__name__)


class HttpClientManager:
    """Manages the httpx.AsyncClient lifecycle"""

    _instance: Optional["HttpClientManager"] = None
    _lock = asyncio.Lock()

    def __new__(cls):
        """Implements the singleton pattern for the HttpClientManager."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initializes the manager's state."""
        if not hasattr(self, "_initialized"):
            self._initialized = True
            self._client: Optional[httpx.AsyncClient] = None
            self._transport: Optional[httpx.AsyncBaseTransport] = None

    async def start(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Create the shared client"""
        async with self._lock:
            if self._client:
                return
            if transport is not None:
                self._transport = transport
            self._client = self._build_client()
            logger.info("HTTP client started")

    async def stop(self):
        """Close the shared client"""
        async with self._lock:
            if self._client:
                await self._client.aclose()
                self._client = None
                logger.info("HTTP client stopped")

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=settings.http_timeout_seconds,
            transport=self._transport,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the shared client, creating it on first use"""
        if self._client is None:
            self._client = self._build_client()
        return self._client

    @property
    def is_running(self) -> bool:
        """Check if the client is open"""
        return self._client is not None and not self._client.is_closed


# Global instance
http_client_manager = HttpClientManager()
