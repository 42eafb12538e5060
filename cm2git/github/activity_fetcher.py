"""Fetch pull requests, commits and merge events for one repository"""

import logging
from concurrent.futures import ThreadPoolExecutor

from cm2git.config import GITHUB_MAX_WORKERS
from cm2git.github.activity_processor import is_merge_event, to_pr_number
from cm2git.github.client import GitHubAPIError, GraphQLClient, RestClient
from cm2git.github.kanban import fetch_kanban_statuses

logger = logging.getLogger(__name__)


def empty_result() -> dict:
    """Raw fetch result with nothing in it"""
    return {
        "pulls": [],
        "commits": [],
        "events": [],
        "commit_pulls": {},
        "kanban": {},
    }


class ActivityFetcher:
    """Fetches raw activity data from GitHub for a repository"""

    def __init__(self, token: str, rest_client: RestClient = None,
                 graphql_client: GraphQLClient = None, max_workers: int = GITHUB_MAX_WORKERS):
        """
        Initialize GitHub clients

        Args:
            token: GitHub personal access token
            rest_client: Optional REST client (defaults to one built from token)
            graphql_client: Optional GraphQL client (defaults to one built from token)
            max_workers: Thread pool size for parallel requests
        """
        self.rest = rest_client or RestClient(token)
        self.graphql = graphql_client or GraphQLClient(token)
        self.max_workers = max_workers

    def fetch(self, owner: str, repo: str) -> dict:
        """
        Fetch everything needed to build the activity feed

        The three primary lists are all-or-nothing: if any of them fails the
        result is empty. PR association and kanban lookups are best-effort.

        Returns:
            Dictionary with pulls, commits, events, commit_pulls
            (sha -> {"number", "url"}) and kanban (PR number -> status)
        """
        base = f"/repos/{owner}/{repo}"

        try:
            with ThreadPoolExecutor(max_workers=3) as executor:
                pulls_future = executor.submit(self.rest.get_list, f"{base}/pulls", {"state": "all"})
                commits_future = executor.submit(self.rest.get_list, f"{base}/commits")
                events_future = executor.submit(self.rest.get_list, f"{base}/events")
                pulls = pulls_future.result()
                commits = commits_future.result()
                events = events_future.result()
        except Exception as e:
            logger.error("Failed to load activity for %s/%s: %s", owner, repo, e)
            return empty_result()

        logger.info(
            "Fetched %d PRs, %d commits, %d events for %s/%s",
            len(pulls), len(commits), len(events), owner, repo
        )

        commit_pulls = self.fetch_commit_pulls(owner, repo, commits)

        pr_numbers = collect_pr_numbers(pulls, commit_pulls, events)
        kanban = self.fetch_kanban(owner, repo, pr_numbers)

        return {
            "pulls": pulls,
            "commits": commits,
            "events": events,
            "commit_pulls": commit_pulls,
            "kanban": kanban,
        }

    def fetch_kanban(self, owner: str, repo: str, pr_numbers: set) -> dict:
        """Project board status per PR; any failure leaves every status None"""
        if not pr_numbers:
            return {}
        try:
            return fetch_kanban_statuses(self.graphql, owner, repo, pr_numbers)
        except Exception as e:
            logger.warning("Kanban status enrichment failed for %s/%s: %s", owner, repo, e)
            return {number: None for number in pr_numbers}

    def fetch_commit_pulls(self, owner: str, repo: str, commits: list) -> dict:
        """
        Look up the PR that introduced each commit, in parallel

        Returns:
            Dictionary mapping sha to {"number", "url"} for commits with a PR
        """
        shas = [c.get("sha") for c in commits if c.get("sha")]
        if not shas:
            return {}

        commit_pulls = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [(sha, executor.submit(self._fetch_commit_pull, owner, repo, sha)) for sha in shas]

            for sha, future in futures:
                try:
                    link = future.result()
                except (GitHubAPIError, KeyError, TypeError, AttributeError) as e:
                    # Best-effort: the commit stays unlinked
                    logger.debug("PR lookup for commit %s failed: %s", sha, e)
                    continue
                if link:
                    commit_pulls[sha] = link

        return commit_pulls

    def _fetch_commit_pull(self, owner: str, repo: str, sha: str):
        """Return the first PR associated with a commit, or None"""
        pulls = self.rest.get_list(f"/repos/{owner}/{repo}/commits/{sha}/pulls")
        if not pulls:
            return None
        first = pulls[0]
        return {"number": first["number"], "url": first.get("html_url")}


def collect_pr_numbers(pulls: list, commit_pulls: dict, events: list) -> set:
    """Every PR number referenced by the PR list, commit links and merge events"""
    numbers = {to_pr_number(pr.get("number")) for pr in pulls}
    numbers.update(to_pr_number(link.get("number")) for link in commit_pulls.values())
    numbers.update(
        to_pr_number(((e.get("payload") or {}).get("pull_request") or {}).get("number"))
        for e in events
        if is_merge_event(e)
    )
    numbers.discard(None)
    return numbers
