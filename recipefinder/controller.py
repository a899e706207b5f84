"""
Search controller: the client-side state behind the Recipe Finder page.

The controller owns everything the UI needs to render a search: the
ingredient text, dietary and extra filters, the current page, the processed
recipes, error and rate-limit state. It talks to the proxy only through an
injected fetcher, so it can be driven by tests with a fake fetcher and clock.

Searches are debounced. perform_search() only schedules a search; it runs
once due (750 ms for automatic searches triggered by typing or toggling a
filter, immediately for manual ones). Streamlit has no timers, so the page
calls seconds_until_due() and run_pending() on each rerun.

Rules applied before scheduling:
- Nothing runs while rate limited
- An automatic search is skipped when its parameters equal the last executed
  search, or when it comes within 2 seconds of a manual search
- A new search replaces any pending one

Results are cached per parameter set (text, filters and page) for 5 minutes.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from recipefinder import dietary
from recipefinder.errors import ErrorCode, RecipeAPIError
from recipefinder.matching import parse_ingredients
from recipefinder.models import DEFAULT_MAX_RESULTS, DEFAULT_PAGE_SIZE, DIETARY_FLAGS, DietaryFilters
from recipefinder.pagination import page_numbers_for
from recipefinder.search import ANY, EXTRA_FILTERS, build_search_payload, no_results_message, process_results

logger = logging.getLogger(__name__)

AUTO_SEARCH_DELAY_SECONDS = 0.75
MANUAL_SEARCH_GUARD_SECONDS = 2.0
CLIENT_CACHE_TTL_SECONDS = 5 * 60

BACKOFF_BASE_SECONDS = 10.0
BACKOFF_FACTOR = 1.5
BACKOFF_MAX_SECONDS = 120.0

MODE_RECIPE = "recipe"
MODE_PHOTO = "photo"

EMPTY_INGREDIENTS_MESSAGE = "Please enter at least one ingredient"
VALIDATION_MESSAGE = "Invalid search request. Please check your search parameters."
NO_DETECTED_INGREDIENTS_MESSAGE = "No ingredients detected in the image. Please try a different image."
DETECTION_ERROR_MESSAGE = "Error detecting ingredients. Please try again."

Fetcher = Callable[[Dict[str, Any]], Dict[str, Any]]


def backoff_seconds(attempts: int) -> float:
    """
    Rate-limit backoff after a 429, given the failures counted so far.

    Examples:
        >>> backoff_seconds(0), backoff_seconds(1), backoff_seconds(2)
        (10.0, 15.0, 22.5)
        >>> backoff_seconds(10)
        120.0
    """
    return min(BACKOFF_MAX_SECONDS, BACKOFF_BASE_SECONDS * BACKOFF_FACTOR ** attempts)


def total_results_for(pagination: Optional[Mapping[str, Any]], recipes: List[Dict[str, Any]]) -> int:
    """Backend total across all pages (capped at max_results), else the recipes on this page."""
    total = (pagination or {}).get("total")
    if total:
        return min(int(total), DEFAULT_MAX_RESULTS)
    return len(recipes)


@dataclass
class PendingSearch:
    """A scheduled search and the parameters captured when it was scheduled."""
    due_at: float
    page: int
    manual: bool
    params: str
    text: str
    filters: Dict[str, bool]
    extras: Dict[str, str]


class SearchController:
    """
    State and actions of the recipe search page.

    Args:
        fetcher: Callable taking a backend payload and returning the backend
            response; raises RecipeAPIError on failure
        clock: Monotonic clock in seconds
        page_size: Results per page
    """

    def __init__(
        self,
        fetcher: Fetcher,
        clock: Callable[[], float] = time.monotonic,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._fetcher = fetcher
        self._clock = clock

        self.mode = MODE_RECIPE
        self.ingredients_text = ""
        self.dietary_filters: Dict[str, bool] = DietaryFilters().model_dump()
        self.extra_filters: Dict[str, str] = {name: ANY for name in EXTRA_FILTERS}

        self.current_page = 1
        self.page_size = page_size
        self.pagination: Optional[Dict[str, Any]] = None
        self.recipes: List[Dict[str, Any]] = []
        self.total_results = 0

        self.loading = False
        self.error_message = ""
        self.rate_limited_until: Optional[float] = None
        self.search_attempts = 0

        self._cache: Dict[str, Tuple[float, Dict[str, Any]]] = {}
        self._pending: Optional[PendingSearch] = None
        self._last_params = ""
        self._last_manual_at: Optional[float] = None

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def is_rate_limited(self) -> bool:
        if self.rate_limited_until is None:
            return False
        if self._clock() >= self.rate_limited_until:
            # The retry message is stale once the backoff has expired
            self.rate_limited_until = None
            self.error_message = ""
            return False
        return True

    @property
    def rate_limit_seconds_left(self) -> float:
        if not self.is_rate_limited:
            return 0.0
        return self.rate_limited_until - self._clock()

    @property
    def can_search(self) -> bool:
        """False while a search is loading or the client is rate limited."""
        return not self.loading and not self.is_rate_limited

    @property
    def is_error(self) -> bool:
        return bool(self.error_message)

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def total_pages(self) -> int:
        if self.pagination and self.pagination.get("pages"):
            return int(self.pagination["pages"])
        return 1

    @property
    def page_numbers(self) -> List[int]:
        return page_numbers_for(self.pagination)

    @property
    def terms(self) -> List[str]:
        return parse_ingredients(self.ingredients_text)

    def _params_key(self, page: int) -> str:
        flags = ",".join(f"{name}={int(self.dietary_filters.get(name, False))}" for name in DIETARY_FLAGS)
        extras = "-".join(self.extra_filters.get(name, ANY) for name in EXTRA_FILTERS)
        return f"{self.ingredients_text}-{flags}-{extras}-{page}"

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def perform_search(self, page: Optional[int] = None, manual: bool = False) -> bool:
        """
        Schedule a search.

        Args:
            page: Page to fetch, defaults to the current page
            manual: True for user-initiated searches (button, Enter, paging)

        Returns:
            True if a search was scheduled
        """
        page = page or self.current_page
        params = self._params_key(page)
        now = self._clock()

        if self.is_rate_limited:
            logger.info("Search aborted: rate limited")
            return False

        if not manual:
            recently_manual = (
                self._last_manual_at is not None
                and now - self._last_manual_at < MANUAL_SEARCH_GUARD_SECONDS
            )
            if params == self._last_params or recently_manual:
                logger.debug("Skipping duplicate auto-search")
                return False

        if manual:
            self._last_manual_at = now

        if page == 1:
            self.recipes = []

        self.cancel_pending()

        if not self.ingredients_text.strip():
            logger.debug("Search aborted: empty ingredients")
            return False

        delay = 0.0 if manual else AUTO_SEARCH_DELAY_SECONDS
        self._pending = PendingSearch(
            due_at=now + delay,
            page=page,
            manual=manual,
            params=params,
            text=self.ingredients_text,
            filters=dict(self.dietary_filters),
            extras=dict(self.extra_filters),
        )
        return True

    def cancel_pending(self) -> None:
        self._pending = None

    def seconds_until_due(self) -> Optional[float]:
        """Seconds until the pending search is due (0 if overdue), None if nothing is pending."""
        if self._pending is None:
            return None
        return max(0.0, self._pending.due_at - self._clock())

    def run_pending(self, now: Optional[float] = None) -> bool:
        """
        Execute the pending search if it is due.

        Returns:
            True if a search was executed
        """
        pending = self._pending
        if pending is None:
            return False

        now = self._clock() if now is None else now
        if now < pending.due_at:
            return False

        self._pending = None
        self._execute(pending)
        return True

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _execute(self, pending: PendingSearch) -> None:
        logger.info("%s search initiated with: %s", "Manual" if pending.manual else "Auto", pending.text)
        self._last_params = pending.params

        cached = self._cache.get(pending.params)
        if cached and self._clock() - cached[0] < CLIENT_CACHE_TTL_SECONDS:
            entry = cached[1]
            logger.debug("Using cached search results: %d recipes", len(entry["recipes"]))
            self.recipes = entry["recipes"]
            self.pagination = entry["pagination"]
            self.total_results = entry["total_results"]
            return

        self.loading = True
        self.error_message = ""

        try:
            terms = parse_ingredients(pending.text)
            if not terms:
                self.error_message = EMPTY_INGREDIENTS_MESSAGE
                return

            payload = build_search_payload(
                terms, pending.filters, pending.extras, page=pending.page, page_size=self.page_size
            )
            data = self._fetcher(payload) or {}

            recipes = process_results(data, terms, pending.filters)
            pagination = data.get("pagination") or None
            total_results = total_results_for(pagination, recipes)

            self._cache[pending.params] = (
                self._clock(),
                {"recipes": recipes, "pagination": pagination, "total_results": total_results},
            )

            self.recipes = recipes
            self.pagination = pagination
            self.total_results = total_results
            self.search_attempts = 0

            if not recipes:
                self.error_message = no_results_message(terms, pending.filters)

        except RecipeAPIError as e:
            logger.error("Error fetching recipes: %r", e)
            self._handle_search_error(e)
        finally:
            self.loading = False

    def _handle_search_error(self, error: RecipeAPIError) -> None:
        self.recipes = []
        attempts = self.search_attempts
        self.search_attempts += 1

        if error.code is ErrorCode.RATE_LIMITED:
            backoff = backoff_seconds(attempts)
            self.rate_limited_until = self._clock() + backoff
            self.error_message = (
                f"Server error: Too many requests. Please try again in {math.floor(backoff + 0.5)} seconds."
            )
        elif error.status_code == 422:
            logger.error("Validation error details: %s", error.details)
            self.error_message = VALIDATION_MESSAGE
        else:
            self.error_message = f"Error searching for recipes: {error.message}"

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _auto_search(self) -> None:
        if self.ingredients_text.strip():
            self.current_page = 1
            self.perform_search(1, manual=False)

    def set_mode(self, mode: str) -> None:
        if mode not in (MODE_RECIPE, MODE_PHOTO):
            raise ValueError(f"Unknown search mode: '{mode}'")
        self.mode = mode

    def set_ingredients(self, text: str) -> None:
        if text == self.ingredients_text:
            return
        self.ingredients_text = text
        self._auto_search()

    def toggle_dietary_filter(self, name: str) -> None:
        self.dietary_filters = dietary.toggle_filter(self.dietary_filters, name)
        self._auto_search()

    def set_extra_filter(self, name: str, value: str) -> None:
        if name not in EXTRA_FILTERS:
            raise ValueError(f"Unknown filter: '{name}'. Valid options: {', '.join(EXTRA_FILTERS)}")
        if self.extra_filters.get(name) == value:
            return
        self.extra_filters[name] = value or ANY
        self._auto_search()

    def reset_filters(self) -> None:
        self.dietary_filters = DietaryFilters().model_dump()
        self.extra_filters = {name: ANY for name in EXTRA_FILTERS}
        self._auto_search()

    def set_page(self, page: int) -> bool:
        """Go to a page; ignored when out of range."""
        if page < 1 or (self.pagination and page > int(self.pagination.get("pages") or 0)):
            return False
        self.current_page = page
        return self.perform_search(page, manual=True)

    def submit(self) -> bool:
        """Manual search from the search button or the Enter key."""
        self.current_page = 1
        return self.perform_search(1, manual=True)

    def detect_and_search(self, detector: Callable[[Any], Mapping[str, Any]], image: Any) -> List[str]:
        """
        Detect ingredients in a photo and search for them.

        Args:
            detector: Callable returning the detectIngredients response
                ({"ingredients": [...], "message": ...})
            image: Uploaded image passed through to the detector

        Returns:
            The detected ingredients (empty when nothing was found or on error)
        """
        self.error_message = ""
        try:
            result = detector(image) or {}
        except RecipeAPIError as e:
            logger.error("Error detecting ingredients: %r", e)
            self.error_message = e.message or DETECTION_ERROR_MESSAGE
            return []

        ingredients = [str(name) for name in result.get("ingredients") or []]
        if not ingredients:
            self.error_message = NO_DETECTED_INGREDIENTS_MESSAGE
            return []

        self.ingredients_text = ", ".join(ingredients)
        self.mode = MODE_RECIPE
        self.submit()
        return ingredients
