"""
HTTP rule source.
"""

import httpx
from typing import Dict, Any, Optional

from shared.logging import get_logger
from shared.errors import RuleLoadError


class HttpRuleSource:
    """Fetches ``{"data": [...]}`` rule payloads from an HTTP endpoint."""

    def __init__(self, url: str, timeout: float = 10.0, headers: Optional[Dict[str, str]] = None):
        self.url = url
        self.timeout = timeout
        self.headers = headers or {}
        self.logger = get_logger("permissions.http_source")

    async def fetch_rules(self) -> Dict[str, Any]:
        """GET the rule payload."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url, headers=self.headers)
        except httpx.HTTPError as e:
            self.logger.error("Rule source HTTP error", url=self.url, error=str(e))
            raise RuleLoadError(
                "Rule source unavailable",
                details={"url": self.url, "http_error": str(e)}
            )

        if response.status_code != 200:
            self.logger.error("Rule source returned error status", url=self.url, status_code=response.status_code)
            raise RuleLoadError(
                f"Rule source error: {response.status_code}",
                details={"url": self.url, "status_code": response.status_code}
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RuleLoadError(
                "Rule source returned invalid JSON",
                details={"url": self.url, "error": str(e)}
            )

        self.logger.debug("Rules fetched", url=self.url)
        return payload
