"""Normalize raw GitHub records into activity dictionaries"""

from datetime import datetime, timezone

from cm2git.config import GITHUB_WEB_URL

PULL_REQUEST = "PR"
COMMIT = "commit"
MERGE = "merge"

# Sorts before any real timestamp
MISSING_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value):
    """Parse an ISO-8601 timestamp (GitHub 'Z' suffix allowed) to an aware datetime"""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def timestamp_key(activity: dict) -> datetime:
    """Sort key for an activity's date"""
    return parse_timestamp(activity.get("date")) or MISSING_TIMESTAMP


def to_pr_number(value):
    """Return value if it is a PR number (a real int), else None"""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def is_merge_event(event: dict) -> bool:
    """Only PullRequestEvents whose pull request was merged qualify"""
    if event.get("type") != "PullRequestEvent":
        return False
    pull_request = (event.get("payload") or {}).get("pull_request") or {}
    return bool(pull_request.get("merged"))


def resolve_commit_author(commit: dict) -> str:
    """Resolve commit author: login, then author name, then committer name"""
    details = commit.get("commit") or {}
    return (
        (commit.get("author") or {}).get("login")
        or (details.get("author") or {}).get("name")
        or (details.get("committer") or {}).get("name")
        or "unknown"
    )


def normalize_pull_request(pr: dict, kanban: dict = None) -> dict:
    """Convert a REST pull request into a PR activity"""
    number = to_pr_number(pr.get("number"))
    return {
        "type": PULL_REQUEST,
        "id": pr.get("id"),
        "number": number,
        "title": pr.get("title") or "",
        "url": pr.get("html_url"),
        "date": pr.get("created_at"),
        "author": (pr.get("user") or {}).get("login") or "unknown",
        "kanban_status": (kanban or {}).get(number),
    }


def normalize_commit(commit: dict, linked_pr: dict = None, kanban: dict = None) -> dict:
    """
    Convert a REST commit into a commit activity

    Args:
        commit: Commit record from the commits list
        linked_pr: {"number", "url"} of the PR that introduced the commit, if known
        kanban: PR number -> status mapping

    Returns:
        Commit activity dictionary
    """
    details = commit.get("commit") or {}
    message = details.get("message") or ""
    linked_number = to_pr_number((linked_pr or {}).get("number"))

    return {
        "type": COMMIT,
        "id": commit.get("sha"),
        "sha": commit.get("sha"),
        "title": message.split("\n")[0],
        "url": commit.get("html_url"),
        "date": (details.get("author") or {}).get("date") or (details.get("committer") or {}).get("date"),
        "author": resolve_commit_author(commit),
        "linked_pr": dict(linked_pr) if linked_pr else None,
        "kanban_status": (kanban or {}).get(linked_number) if linked_number is not None else None,
    }


def normalize_merge_event(event: dict, owner: str, repo: str, kanban: dict = None) -> dict:
    """Convert a merged PullRequestEvent into a merge activity linking to the merge commit"""
    pull_request = (event.get("payload") or {}).get("pull_request") or {}
    pr_number = to_pr_number(pull_request.get("number"))
    sha = pull_request.get("merge_commit_sha")

    if sha:
        url = f"{GITHUB_WEB_URL}/{owner}/{repo}/commit/{sha}"
    else:
        url = pull_request.get("html_url")

    return {
        "type": MERGE,
        "id": event.get("id"),
        "sha": sha,
        "pr_number": pr_number,
        "title": pull_request.get("title") or "",
        "url": url,
        "date": event.get("created_at"),
        "author": (
            (event.get("actor") or {}).get("login")
            or (pull_request.get("user") or {}).get("login")
            or "unknown"
        ),
        "kanban_status": (kanban or {}).get(pr_number) if pr_number is not None else None,
    }


def build_activities(raw: dict, owner: str, repo: str) -> list:
    """
    Normalize a raw fetch result into one flat activity list

    Args:
        raw: Result of ActivityFetcher.fetch
        owner: Repository owner
        repo: Repository name

    Returns:
        PR activities, then commit activities, then merge activities
    """
    kanban = raw.get("kanban") or {}
    commit_pulls = raw.get("commit_pulls") or {}

    activities = [normalize_pull_request(pr, kanban) for pr in raw.get("pulls", [])]
    activities.extend(
        normalize_commit(commit, commit_pulls.get(commit.get("sha")), kanban)
        for commit in raw.get("commits", [])
    )
    activities.extend(
        normalize_merge_event(event, owner, repo, kanban)
        for event in raw.get("events", [])
        if is_merge_event(event)
    )
    return activities
