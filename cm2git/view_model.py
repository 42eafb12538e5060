"""Filter and sort grouped activities for display"""

from cm2git.config import SORT_ORDERS, TYPE_FILTERS
from cm2git.github.activity_processor import timestamp_key


def filter_activities(activities: list, type_filter: str = "all") -> list:
    """
    Keep activities matching a type filter

    "merge" selects PR groups that carry a merge event; "PR" and "commit"
    match the activity type literally.
    """
    if type_filter not in TYPE_FILTERS:
        raise ValueError(f"Unknown type filter: {type_filter}")

    if type_filter == "all":
        return list(activities)
    if type_filter == "merge":
        return [a for a in activities if a.get("merge") is not None]
    return [a for a in activities if a.get("type") == type_filter]


def sort_activities(activities: list, order: str = "desc") -> list:
    """Stable sort by (effective) date; equal dates keep their relative order"""
    if order not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order: {order}")
    return sorted(activities, key=timestamp_key, reverse=(order == "desc"))


def apply_view(activities: list, type_filter: str = "all", order: str = "desc") -> list:
    """Filter then sort, producing the sequence to render"""
    return sort_activities(filter_activities(activities, type_filter), order)
