"""Group commits and merge events under the pull request they belong to"""

from cm2git.github.activity_processor import (
    COMMIT,
    MERGE,
    PULL_REQUEST,
    parse_timestamp,
    timestamp_key,
    to_pr_number,
)


def new_group(pr: dict) -> dict:
    """Seed a PR group from a PR activity"""
    group = dict(pr)
    group["created_at"] = pr.get("date")
    group["commits"] = []
    group["merge"] = None
    return group


def effective_date(group: dict):
    """Latest date among the PR, its commits and its merge event"""
    members = [{"date": group.get("created_at")}] + group["commits"]
    if group.get("merge"):
        members.append(group["merge"])
    return max(members, key=timestamp_key)["date"]


def effective_timestamp(group: dict):
    """Parsed effective date of a group (or plain activity)"""
    return parse_timestamp(group.get("date"))


def group_activities(activities: list) -> list:
    """
    Replace PR activities with PR groups holding their commits and merge event

    Commits whose linked PR and merge events whose PR number do not resolve
    to a group are passed through unchanged. Input activities are not
    mutated.

    Args:
        activities: Flat list from build_activities

    Returns:
        PR groups followed by ungrouped activities
    """
    groups = {}
    ungrouped = []

    for activity in activities:
        if activity["type"] != PULL_REQUEST:
            continue
        number = to_pr_number(activity.get("number"))
        if number is None:
            ungrouped.append(new_group(activity))
            continue
        groups[number] = new_group(activity)

    for activity in activities:
        if activity["type"] == COMMIT:
            number = to_pr_number((activity.get("linked_pr") or {}).get("number"))
            group = groups.get(number) if number is not None else None
            if group is None:
                ungrouped.append(activity)
            else:
                group["commits"].append(dict(activity))
        elif activity["type"] == MERGE:
            number = to_pr_number(activity.get("pr_number"))
            group = groups.get(number) if number is not None else None
            if group is None:
                ungrouped.append(activity)
            else:
                group["merge"] = dict(activity)

    for group in groups.values():
        group["date"] = effective_date(group)

        # Children inherit the group's status, never the other way round
        status = group.get("kanban_status")
        if status:
            for child in group["commits"]:
                if not child.get("kanban_status"):
                    child["kanban_status"] = status
            if group["merge"] and not group["merge"].get("kanban_status"):
                group["merge"]["kanban_status"] = status

    return list(groups.values()) + ungrouped
