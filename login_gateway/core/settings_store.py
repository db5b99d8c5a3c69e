"""Read-only access to the site settings table."""

import logging
from typing import List, Tuple
import httpx

logger = logging.getLogger(__name__)


class SettingsStore:
    """Reads key/value display settings over the PostgREST interface"""

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        table: str = "site_settings",
    ):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.table = table

    async def list_settings(self) -> List[Tuple[str, str]]:
        """Fetch every (setting_key, setting_value) row."""
        response = await self.http.get(
            f"{self.base_url}/rest/v1/{self.table}",
            params={"select": "setting_key,setting_value"},
            headers={
                "apikey": self.api_key,
                "Authorization": f"Bearer {self.api_key}",
            },
        )
        response.raise_for_status()

        rows = []
        for item in response.json() or []:
            key = item.get("setting_key")
            value = item.get("setting_value")
            if key is None or value is None:
                continue
            rows.append((str(key), str(value)))

        logger.info(f"Fetched {len(rows)} settings rows from '{self.table}'")
        return rows
