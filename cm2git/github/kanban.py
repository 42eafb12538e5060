"""Project board (kanban) status lookup for pull requests"""

import logging

from cm2git.config import KANBAN_PROJECT_ITEMS, KANBAN_STATUS_FIELD
from cm2git.github.client import GitHubAPIError

logger = logging.getLogger(__name__)

# Fragment requesting every typed variant of the status field value
STATUS_VALUE_FRAGMENT = """
          fieldValueByName(name: "%s") {
            __typename
            ... on ProjectV2ItemFieldSingleSelectValue { name }
            ... on ProjectV2ItemFieldTextValue { text }
            ... on ProjectV2ItemFieldNumberValue { number }
            ... on ProjectV2ItemFieldIterationValue { title }
          }"""

PULL_REQUEST_FRAGMENT = """
    pr%(number)d: pullRequest(number: %(number)d) {
      number
      projectItems(first: %(items)d) {
        nodes {
          project { title }%(status)s
        }
      }
    }"""

STATUS_QUERY = """
query($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {%s
  }
}
"""


def _format_number(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# __typename -> (payload key, formatter)
STATUS_VARIANTS = {
    "ProjectV2ItemFieldSingleSelectValue": ("name", str),
    "ProjectV2ItemFieldTextValue": ("text", str),
    "ProjectV2ItemFieldNumberValue": ("number", _format_number),
    "ProjectV2ItemFieldIterationValue": ("title", str),
}


def build_status_query(pr_numbers) -> str:
    """Build one query with an aliased pullRequest lookup per PR number"""
    status = STATUS_VALUE_FRAGMENT % KANBAN_STATUS_FIELD
    fragments = [
        PULL_REQUEST_FRAGMENT % {"number": number, "items": KANBAN_PROJECT_ITEMS, "status": status}
        for number in sorted(pr_numbers)
    ]
    return STATUS_QUERY % "".join(fragments)


def resolve_status_value(value: dict):
    """
    Resolve a typed status field value to a display string

    Args:
        value: fieldValueByName payload, keyed by __typename

    Returns:
        Display string, or None for empty values and unknown variants
    """
    if not value:
        return None

    variant = STATUS_VARIANTS.get(value.get("__typename"))
    if variant is None:
        return None

    key, formatter = variant
    raw = value.get(key)
    if raw is None or raw == "":
        return None
    return formatter(raw)


def resolve_pr_status(pr_node: dict):
    """Combine the status of every project item on a PR into one string"""
    if not pr_node:
        return None

    items = (pr_node.get("projectItems") or {}).get("nodes") or []
    statuses = []
    for item in items:
        if not item:
            continue
        status = resolve_status_value(item.get("fieldValueByName"))
        if status is None:
            continue
        project_title = (item.get("project") or {}).get("title")
        statuses.append(f"{project_title}: {status}" if project_title else status)

    return ", ".join(statuses) if statuses else None


def fetch_kanban_statuses(client, owner: str, repo: str, pr_numbers) -> dict:
    """
    Fetch project board status for a set of PRs in one GraphQL request

    Args:
        client: GraphQLClient
        owner: Repository owner
        repo: Repository name
        pr_numbers: Iterable of PR numbers

    Returns:
        Dictionary mapping PR number to status string or None. Never raises;
        failed lookups degrade to None.
    """
    pr_numbers = sorted(set(pr_numbers))
    statuses = {number: None for number in pr_numbers}
    if not pr_numbers:
        return statuses

    try:
        data = client.execute(
            build_status_query(pr_numbers),
            {"owner": owner, "name": repo},
            allow_partial=True
        )
    except GitHubAPIError as e:
        logger.warning("Kanban status lookup failed for %s/%s: %s", owner, repo, e)
        return statuses

    repository = data.get("repository") if isinstance(data, dict) else None
    if not isinstance(repository, dict):
        repository = {}
    for number in pr_numbers:
        node = repository.get(f"pr{number}")
        statuses[number] = resolve_pr_status(node if isinstance(node, dict) else None)

    return statuses
