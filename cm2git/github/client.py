"""GitHub REST and GraphQL clients"""

import logging

import requests

from cm2git.config import GITHUB_API_URL, GITHUB_GRAPHQL_URL

logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """A GitHub request failed or returned an unexpected body"""


class GraphQLError(GitHubAPIError):
    """GraphQL response carried errors"""

    def __init__(self, errors: list):
        super().__init__(f"GraphQL errors: {errors}")
        self.errors = errors


class RestClient:
    """GitHub REST API client with token auth"""

    def __init__(self, token: str, base_url: str = GITHUB_API_URL):
        """
        Initialize REST client

        Args:
            token: GitHub personal access token, used as-is
            base_url: REST API root (e.g., https://api.github.com)
        """
        self.base_url = base_url.rstrip("/")
        self.headers = {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github+json"
        }

    def get(self, endpoint: str, params: dict = None):
        """
        Make a GET request to the REST API

        Args:
            endpoint: API endpoint (e.g., /repos/octocat/hello/pulls)
            params: Query parameters

        Returns:
            Decoded JSON body

        Raises:
            GitHubAPIError: on transport failure, HTTP error or non-JSON body
        """
        url = f"{self.base_url}{endpoint}"
        try:
            response = requests.get(url, headers=self.headers, params=params)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise GitHubAPIError(f"GET {endpoint} failed: {e}") from e

    def get_list(self, endpoint: str, params: dict = None) -> list:
        """GET an endpoint that must return a JSON array"""
        data = self.get(endpoint, params)
        if not isinstance(data, list):
            message = data.get("message") if isinstance(data, dict) else data
            raise GitHubAPIError(f"GET {endpoint} returned no list: {message}")
        return data


class GraphQLClient:
    """Simple GitHub GraphQL client"""

    def __init__(self, token: str, url: str = GITHUB_GRAPHQL_URL):
        self.url = url
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json"
        }

    def execute(self, query: str, variables: dict = None, allow_partial: bool = False) -> dict:
        """
        Execute a GraphQL query

        With allow_partial, a response carrying both errors and data returns
        the data; the caller decides what is missing.
        """
        try:
            response = requests.post(
                self.url,
                headers=self.headers,
                json={"query": query, "variables": variables or {}}
            )
            response.raise_for_status()
            result = response.json()
        except (requests.RequestException, ValueError) as e:
            raise GitHubAPIError(f"GraphQL request failed: {e}") from e

        if not isinstance(result, dict):
            raise GitHubAPIError(f"GraphQL response is not an object: {result!r}")

        errors = result.get("errors")
        data = result.get("data")
        if errors and not (allow_partial and data):
            raise GraphQLError(errors)
        if errors:
            logger.warning("GraphQL returned partial data: %s", errors)

        return data or {}
