"""GitHub data fetching and normalization"""

from .client import GitHubAPIError, GraphQLClient, GraphQLError, RestClient
from .activity_fetcher import ActivityFetcher
from .activity_processor import build_activities, parse_timestamp
from .kanban import fetch_kanban_statuses
