"""Caller-owned state for one activity feed"""

import logging
import threading
from datetime import datetime

from cm2git.config import DEFAULT_SORT_ORDER, DEFAULT_TYPE_FILTER, SORT_ORDERS, TYPE_FILTERS
from cm2git.github.activity_fetcher import ActivityFetcher
from cm2git.github.activity_processor import build_activities
from cm2git.grouping import group_activities
from cm2git.view_model import apply_view

logger = logging.getLogger(__name__)


class ActivitySession:
    """Holds the latest loaded activities plus the current filter and sort order"""

    def __init__(self, fetcher_factory=ActivityFetcher):
        """
        Args:
            fetcher_factory: Callable taking a token and returning an object
                with fetch(owner, repo)
        """
        self.fetcher_factory = fetcher_factory
        self.activities = []
        self.type_filter = DEFAULT_TYPE_FILTER
        self.sort_order = DEFAULT_SORT_ORDER
        self.owner = None
        self.repo = None
        self.loaded_at = None
        self._load_lock = threading.Lock()

    def load(self, owner: str, repo: str, token: str) -> bool:
        """
        Fetch, normalize and group activity, replacing the current list

        Missing owner, repo or token rejects the load before any request and
        leaves the current list untouched. Overlapping loads run one at a
        time.

        Returns:
            True if a load ran (even one that produced an empty list)
        """
        owner = (owner or "").strip()
        repo = (repo or "").strip()
        token = (token or "").strip()
        if not owner or not repo or not token:
            logger.warning("Owner, repo, and token are required")
            return False

        with self._load_lock:
            try:
                raw = self.fetcher_factory(token).fetch(owner, repo)
                activities = group_activities(build_activities(raw, owner, repo))
            except Exception:
                logger.exception("Unexpected failure loading %s/%s", owner, repo)
                activities = []

            self.activities = activities
            self.owner = owner
            self.repo = repo
            self.loaded_at = datetime.now().isoformat()

        logger.info("Loaded %d activities for %s/%s", len(activities), owner, repo)
        return True

    def set_filter(self, type_filter: str) -> None:
        if type_filter not in TYPE_FILTERS:
            raise ValueError(f"Unknown type filter: {type_filter}")
        self.type_filter = type_filter

    def set_sort(self, sort_order: str) -> None:
        if sort_order not in SORT_ORDERS:
            raise ValueError(f"Unknown sort order: {sort_order}")
        self.sort_order = sort_order

    def view(self) -> list:
        """Current activities under the current filter and sort order"""
        return apply_view(self.activities, self.type_filter, self.sort_order)
