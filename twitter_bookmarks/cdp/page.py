"""Page-level effects over a CDPClient."""

import logging
from typing import Any, Optional

from ..exceptions import CDPError
from ..scripts import navigation_script
from .connection import CDPClient
from .protocol import NavigateResult

logger = logging.getLogger(__name__)

NAVIGATE_TIMEOUT = 20.0
FALLBACK_NAVIGATE_TIMEOUT = 10.0


class PageDriver:
    """Thin capability layer used by the scraper.

    Attributes:
        client: Connected CDPClient
    """

    def __init__(self, client: CDPClient):
        self.client = client

    async def enable_domains(self) -> None:
        """Enable the Runtime and Page domains."""
        await self.client.send_command("Runtime.enable")
        await self.client.send_command("Page.enable")

    async def navigate(self, url: str) -> Optional[NavigateResult]:
        """Navigate the page to url.

        Falls back to assigning window.location.href when Page.navigate fails,
        e.g. on relays that do not expose the Page domain. The fallback's
        outcome is what propagates.

        Returns:
            NavigateResult from Page.navigate, or None when the fallback was used
        """
        try:
            response = await self.client.send_command(
                "Page.navigate", {"url": url}, timeout=NAVIGATE_TIMEOUT
            )
        except CDPError as e:
            logger.warning(f"Page.navigate failed ({e}); falling back to location.href")
            await self.client.evaluate(
                navigation_script(url), timeout=FALLBACK_NAVIGATE_TIMEOUT
            )
            return None

        result = NavigateResult.from_response(response)
        if result.error_text:
            logger.warning(f"Page.navigate reported: {result.error_text}")
        return result

    async def evaluate(self, expression: str, timeout: Optional[float] = None) -> Any:
        return await self.client.evaluate(expression, timeout=timeout)
