"""
Pagination observer - page count and current page for the preview pane

Everything here is derived from two measurements (content height and scroll
offset); nothing is persisted.
"""
import logging
import math
from typing import Callable, List, NamedTuple

from cvstudio.config import PAGE_HEIGHT_PX, PAGE_PROBE_OFFSET_PX

logger = logging.getLogger(__name__)


class PageIndicator(NamedTuple):
    current_page: int
    total_pages: int

    def label(self) -> str:
        return f"Page {self.current_page} of {self.total_pages}"


def compute_total_pages(content_height: float, page_height: float = PAGE_HEIGHT_PX) -> int:
    """Ceiling of content height over page height, never less than 1"""
    if page_height <= 0:
        raise ValueError("page_height must be positive")
    if not content_height or content_height <= 0:
        return 1
    return max(1, math.ceil(content_height / page_height))


def compute_current_page(scroll_offset: float, page_height: float = PAGE_HEIGHT_PX,
                         total_pages: int = 1, probe_offset: float = PAGE_PROBE_OFFSET_PX) -> int:
    """
    Page under the probe line near the top of the viewport, clamped to [1, total_pages].
    """
    if page_height <= 0:
        raise ValueError("page_height must be positive")
    offset = max(0.0, scroll_offset or 0.0)
    page = math.floor((offset + probe_offset) / page_height) + 1
    return min(max(page, 1), max(total_pages, 1))


class PaginationObserver:
    """
    Tracks the preview's size and scroll position.

    Call on_resize from the content size observer and on_scroll from the
    viewport scroll handler; subscribers are told only when the indicator
    actually changes.
    """

    def __init__(self, page_height: float = PAGE_HEIGHT_PX, probe_offset: float = PAGE_PROBE_OFFSET_PX):
        self.page_height = page_height
        self.probe_offset = probe_offset
        self.content_height = 0.0
        self.scroll_offset = 0.0
        self._indicator = PageIndicator(1, 1)
        self._subscribers: List[Callable[[PageIndicator], None]] = []

    @property
    def indicator(self) -> PageIndicator:
        return self._indicator

    @property
    def total_pages(self) -> int:
        return self._indicator.total_pages

    @property
    def current_page(self) -> int:
        return self._indicator.current_page

    def subscribe(self, callback: Callable[[PageIndicator], None]) -> Callable[[], None]:
        """Register a callback; returns a function that unsubscribes it"""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def on_resize(self, content_height: float) -> PageIndicator:
        self.content_height = max(0.0, content_height or 0.0)
        return self._recompute()

    def on_scroll(self, scroll_offset: float) -> PageIndicator:
        self.scroll_offset = max(0.0, scroll_offset or 0.0)
        return self._recompute()

    def _recompute(self) -> PageIndicator:
        total = compute_total_pages(self.content_height, self.page_height)
        current = compute_current_page(self.scroll_offset, self.page_height, total, self.probe_offset)
        indicator = PageIndicator(current, total)
        if indicator != self._indicator:
            self._indicator = indicator
            logger.debug("pagination.changed", extra={"current_page": current, "total_pages": total})
            for callback in list(self._subscribers):
                callback(indicator)
        return indicator
