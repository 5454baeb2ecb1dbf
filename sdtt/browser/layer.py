"""Browser Layer: Playwright-based headless browser that renders URL inputs.

Structured data is often injected by client-side scripts, so URL inputs are
rendered before extraction. The layer only navigates and returns the final
markup; it never interacts with the page.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

from playwright.async_api import Browser, BrowserContext, Page, async_playwright

from sdtt.config.settings import BrowserConfig
from sdtt.errors import DocumentLoadError
from sdtt.extraction.base import Document
from sdtt.telemetry.errors import ErrorCode, emit_structured_error

logger = logging.getLogger(__name__)


class BrowserLayer:
    """Playwright browser with one isolated context and page.

    Contract:
    - ``render`` returns the full serialized DOM, scripts included
    - navigation failures surface as DocumentLoadError
    - ``stop`` always releases every Playwright resource
    """

    def __init__(self, config: BrowserConfig | None = None) -> None:
        self._config = config or BrowserConfig()
        self._playwright: Any = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    async def __aenter__(self) -> BrowserLayer:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()

    async def start(self) -> None:
        """Launch browser and create an isolated context.

        Any start-up failure releases what was already started and surfaces
        as DocumentLoadError.
        """
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self._config.headless,
            )
            self._context = await self._browser.new_context(
                viewport={
                    "width": self._config.viewport_width,
                    "height": self._config.viewport_height,
                },
                user_agent=self._config.user_agent,
                locale=self._config.locale,
            )
            self._page = await self._context.new_page()
        except Exception as exc:
            await self.stop()
            raise DocumentLoadError(f"Unable to start browser: {exc}") from exc

    async def stop(self) -> None:
        """Clean up browser resources; each one is released even if another fails."""
        closers = []
        if self._context:
            closers.append(self._context.close)
        if self._browser:
            closers.append(self._browser.close)
        if self._playwright:
            closers.append(self._playwright.stop)
        self._context = None
        self._browser = None
        self._playwright = None
        self._page = None
        for close in closers:
            try:
                await close()
            except Exception as exc:
                emit_structured_error(
                    logger,
                    code=ErrorCode.BROWSER_CLEANUP_FAILED,
                    message=str(exc),
                    suppressed=True,
                )

    async def render(self, url: str) -> Document:
        """Navigate to ``url`` and return the rendered document."""
        if not self._page:
            raise DocumentLoadError("Browser not started")
        timeout_ms = self._config.page_load_timeout_s * 1000
        try:
            response = await self._page.goto(url, wait_until="load", timeout=timeout_ms)
        except Exception as exc:
            raise DocumentLoadError(f"Unable to load URL '{url}': {exc}") from exc
        if response is not None and response.status >= 400:
            raise DocumentLoadError(f"Unable to load URL '{url}': HTTP {response.status}")

        try:
            html = await self._page.content()
        except Exception as exc:
            raise DocumentLoadError(f"Unable to read URL '{url}': {exc}") from exc
        return Document(content=html, source=url, url=self._page.url)


async def render_url(url: str, config: BrowserConfig | None = None) -> Document:
    """Render one URL in a fresh browser."""
    async with BrowserLayer(config) as browser:
        return await browser.render(url)
