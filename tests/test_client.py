"""Tests for the GitHub REST and GraphQL clients"""

import unittest
from unittest.mock import MagicMock, patch

import requests

from cm2git.github.client import GitHubAPIError, GraphQLClient, GraphQLError, RestClient


def fake_response(payload=None, status_error=None):
    response = MagicMock()
    response.json.return_value = payload
    if status_error:
        response.raise_for_status.side_effect = status_error
    return response


class TestRestClient(unittest.TestCase):
    """Test REST requests"""

    @patch("cm2git.github.client.requests.get")
    def test_get_list_sends_token(self, mock_get):
        """Test get list sends token"""
        mock_get.return_value = fake_response([{"number": 1}])
        client = RestClient("secret", base_url="https://api.example.com/")

        result = client.get_list("/repos/octo/hello/pulls", {"state": "all"})

        self.assertEqual(result, [{"number": 1}])
        mock_get.assert_called_once_with(
            "https://api.example.com/repos/octo/hello/pulls",
            headers={"Authorization": "token secret", "Accept": "application/vnd.github+json"},
            params={"state": "all"}
        )

    @patch("cm2git.github.client.requests.get")
    def test_http_error_is_wrapped(self, mock_get):
        """Test HTTP errors are wrapped"""
        mock_get.return_value = fake_response(status_error=requests.HTTPError("404 Not Found"))

        with self.assertRaises(GitHubAPIError):
            RestClient("secret").get("/repos/octo/missing/pulls")

    @patch("cm2git.github.client.requests.get")
    def test_transport_error_is_wrapped(self, mock_get):
        """Test transport error is wrapped"""
        mock_get.side_effect = requests.ConnectionError("offline")

        with self.assertRaises(GitHubAPIError):
            RestClient("secret").get("/repos/octo/hello/commits")

    @patch("cm2git.github.client.requests.get")
    def test_get_list_rejects_objects(self, mock_get):
        """Test get list rejects objects"""
        mock_get.return_value = fake_response({"message": "Bad credentials"})

        with self.assertRaises(GitHubAPIError) as ctx:
            RestClient("secret").get_list("/repos/octo/hello/events")
        self.assertIn("Bad credentials", str(ctx.exception))


class TestGraphQLClient(unittest.TestCase):
    """Test GraphQL execution"""

    @patch("cm2git.github.client.requests.post")
    def test_execute_returns_data(self, mock_post):
        """Test execute returns data"""
        mock_post.return_value = fake_response({"data": {"repository": {}}})
        client = GraphQLClient("secret", url="https://api.example.com/graphql")

        data = client.execute("query { viewer { login } }", {"a": 1})

        self.assertEqual(data, {"repository": {}})
        kwargs = mock_post.call_args[1]
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer secret")
        self.assertEqual(kwargs["json"], {"query": "query { viewer { login } }", "variables": {"a": 1}})

    @patch("cm2git.github.client.requests.post")
    def test_errors_raise(self, mock_post):
        """Test GraphQL errors without data raise"""
        mock_post.return_value = fake_response({"data": None, "errors": [{"message": "boom"}]})

        with self.assertRaises(GraphQLError) as ctx:
            GraphQLClient("secret").execute("query {}", allow_partial=True)
        self.assertEqual(ctx.exception.errors, [{"message": "boom"}])

    @patch("cm2git.github.client.requests.post")
    def test_partial_data_allowed(self, mock_post):
        """Test partial data allowed"""
        payload = {"data": {"repository": {"pr1": None}}, "errors": [{"message": "not found"}]}
        mock_post.return_value = fake_response(payload)

        with self.assertRaises(GraphQLError):
            GraphQLClient("secret").execute("query {}")
        self.assertEqual(
            GraphQLClient("secret").execute("query {}", allow_partial=True),
            {"repository": {"pr1": None}}
        )

    @patch("cm2git.github.client.requests.post")
    def test_non_object_body_is_wrapped(self, mock_post):
        """Test a non-object GraphQL body is wrapped"""
        for body in (None, [], "oops"):
            mock_post.return_value = fake_response(body)
            with self.assertRaises(GitHubAPIError):
                GraphQLClient("secret").execute("query {}", allow_partial=True)

    @patch("cm2git.github.client.requests.post")
    def test_bad_gateway_is_wrapped(self, mock_post):
        """Test bad gateway is wrapped"""
        mock_post.return_value = fake_response(status_error=requests.HTTPError("502 Bad Gateway"))

        with self.assertRaises(GitHubAPIError):
            GraphQLClient("secret").execute("query {}")


if __name__ == "__main__":
    unittest.main()
