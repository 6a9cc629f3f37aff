"""
Tests for the alert threshold handler.

Dependencies: pytest, unittest.mock, backend.lambdas.user_data_handler
System role: Alert settings validation
"""

from unittest.mock import patch

import pytest

from backend.lambdas import user_data_handler


@pytest.fixture
def repository():
    with patch("backend.lambdas.user_data_handler.get_user_data_repository") as factory:
        yield factory.return_value


class TestUserDataHandler:
    """Test threshold reads and writes."""

    def test_set_threshold(self, api_event, auth_headers, repository, response_body) -> None:
        """Should store a positive threshold for the caller."""
        response = user_data_handler.handler(api_event("POST", "/alerts", auth_headers, body={"threshold": 25}), None)

        assert response["statusCode"] == 200
        assert response_body(response)["message"] == "Threshold set successfully"
        args, kwargs = repository.set_threshold.call_args
        assert args == ("user-123", 25)
        assert kwargs["ttl"] > 0

    @pytest.mark.parametrize("threshold", [0, -5, "10", True, None])
    def test_invalid_threshold(self, api_event, auth_headers, repository, response_body, threshold) -> None:
        """Should reject non-positive, non-numeric and boolean thresholds."""
        event = api_event("POST", "/alerts", auth_headers, body={"threshold": threshold})

        response = user_data_handler.handler(event, None)

        assert response["statusCode"] == 400
        assert response_body(response)["message"] == "Invalid threshold value"
        repository.set_threshold.assert_not_called()

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_threshold(self, api_event, auth_headers, repository, response_body, literal) -> None:
        """Should reject NaN and infinite thresholds sent as JSON literals."""
        event = api_event("POST", "/alerts", auth_headers, body=f'{{"threshold": {literal}}}')

        response = user_data_handler.handler(event, None)

        assert response["statusCode"] == 400
        assert response_body(response)["message"] == "Invalid threshold value"
        repository.set_threshold.assert_not_called()

    def test_get_threshold(self, api_event, auth_headers, repository, response_body) -> None:
        repository.get.return_value = {"UserId": "user-123", "threshold": 30}

        response = user_data_handler.handler(api_event("GET", "/alerts", auth_headers), None)

        assert response["statusCode"] == 200
        assert response_body(response) == {"threshold": 30}

    def test_get_threshold_not_set(self, api_event, auth_headers, repository, response_body) -> None:
        """Should answer 404 for a row holding only the prediction endpoint."""
        repository.get.return_value = {"UserId": "user-123", "sagemakerEndpoint": "ep"}

        response = user_data_handler.handler(api_event("GET", "/alerts", auth_headers), None)

        assert response["statusCode"] == 404
        assert response_body(response)["message"] == "No threshold found"

    def test_other_method(self, api_event, auth_headers, repository) -> None:
        assert user_data_handler.handler(api_event("PUT", "/alerts", auth_headers), None)["statusCode"] == 405

    def test_options(self, api_event) -> None:
        assert user_data_handler.handler(api_event("OPTIONS", "/alerts"), None)["statusCode"] == 200

    def test_expired_tokens(self, api_event, make_token, repository) -> None:
        headers = {"X-Id-Token": make_token("id", exp=1), "Authorization": make_token("access")}

        assert user_data_handler.handler(api_event("GET", "/alerts", headers), None)["statusCode"] == 401
        repository.get.assert_not_called()
