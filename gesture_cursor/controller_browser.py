"""
Browser controller: applies hover, dwell clicks and scrolling to a Playwright page.
"""
import logging
from typing import Optional, Tuple

from playwright.async_api import Browser, Page, Playwright, async_playwright

logger = logging.getLogger(__name__)

INTERACTIVE_SELECTOR = 'button, a, [role="button"], [data-gesture-target]'

_HOVER_JS = """
([x, y, selector]) => {
    const el = document.elementFromPoint(x, y);
    const target = el ? el.closest(selector) : null;
    for (const prev of document.querySelectorAll('[data-gesture-hover]')) {
        if (prev !== target) prev.removeAttribute('data-gesture-hover');
    }
    if (target) target.setAttribute('data-gesture-hover', 'true');
    return target !== null;
}
"""

_CLICK_JS = """
([x, y, selector]) => {
    const el = document.elementFromPoint(x, y);
    const target = el ? el.closest(selector) : null;
    if (target) target.click();
    return target !== null;
}
"""

_SCROLL_JS = "dy => window.scrollBy({ top: dy, behavior: 'auto' })"


class BrowserController:
    """Drives a browser page from gesture commands."""

    def __init__(self, page: Page):
        self.page = page
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    @classmethod
    async def launch(cls, url: str, headless: bool = False) -> "BrowserController":
        """
        Start Chromium, open ``url`` and return a controller for that page.

        Args:
            url: Page to control
            headless: Run the browser without a window

        Returns:
            BrowserController owning the browser
        """
        p = await async_playwright().start()
        browser = await p.chromium.launch(headless=headless)
        page = await browser.new_page()
        await page.goto(url)
        logger.info("Browser opened at %s", url)

        controller = cls(page)
        controller._playwright = p
        controller._browser = browser
        return controller

    async def _to_viewport(self, x: float, y: float) -> Tuple[float, float]:
        size = self.page.viewport_size
        if size is None:
            size = await self.page.evaluate("() => ({width: window.innerWidth, height: window.innerHeight})")
        return x * size["width"], y * size["height"]

    async def hover(self, x: float, y: float, gesture: str) -> None:
        px, py = await self._to_viewport(x, y)
        await self.page.mouse.move(px, py)
        await self.page.evaluate(_HOVER_JS, [px, py, INTERACTIVE_SELECTOR])

    async def click(self, x: float, y: float) -> None:
        px, py = await self._to_viewport(x, y)
        clicked = await self.page.evaluate(_CLICK_JS, [px, py, INTERACTIVE_SELECTOR])
        logger.info("Dwell click at (%.0f, %.0f)%s", px, py, "" if clicked else " (nothing clickable)")

    async def gesture_changed(self, gesture: str, x: float, y: float) -> None:
        logger.debug("Gesture changed to %s", gesture)

    async def scroll_by(self, dy_px: float) -> None:
        await self.page.evaluate(_SCROLL_JS, dy_px)

    async def close(self) -> None:
        """Close the browser if this controller launched it."""
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
            logger.info("Browser closed")
