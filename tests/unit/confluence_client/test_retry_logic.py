"""Unit tests for confluence_client.retry_logic module."""

import pytest
from unittest.mock import patch, MagicMock
from confluence_loader.confluence_client.retry_logic import (
    AttemptFailed,
    DEFAULT_MAX_RETRIES,
    retry_on_failure,
)
from confluence_loader.confluence_client.errors import FetchError

URL = "https://example.atlassian.net/wiki/rest/api/content/search"


class TestRetryOnFailure:
    """Test cases for retry_on_failure function."""

    def test_default_budget_is_five_attempts(self):
        """The default attempt budget is 5."""
        assert DEFAULT_MAX_RETRIES == 5

    def test_success_on_first_attempt(self):
        """retry_on_failure should return result on first successful attempt."""
        mock_func = MagicMock(return_value="success")

        assert retry_on_failure(mock_func, URL) == "success"
        mock_func.assert_called_once_with()

    def test_retries_until_success(self):
        """retry_on_failure should retry failed attempts."""
        error = AttemptFailed("HTTP 500", status_code=500)
        mock_func = MagicMock(side_effect=[error, error, "success"])

        assert retry_on_failure(mock_func, URL, max_retries=5) == "success"
        assert mock_func.call_count == 3

    def test_succeeds_on_last_allowed_attempt(self):
        """max_retries - 1 failures still end in success."""
        error = AttemptFailed("HTTP 500", status_code=500)
        mock_func = MagicMock(side_effect=[error] * 4 + ["success"])

        assert retry_on_failure(mock_func, URL, max_retries=5) == "success"
        assert mock_func.call_count == 5

    def test_raises_fetch_error_after_max_retries(self):
        """retry_on_failure should raise FetchError once the budget is spent."""
        mock_func = MagicMock(side_effect=AttemptFailed("HTTP 503", status_code=503))

        with pytest.raises(FetchError) as exc_info:
            retry_on_failure(mock_func, URL, max_retries=5)

        assert mock_func.call_count == 5
        assert exc_info.value.attempts == 5
        assert exc_info.value.status_code == 503
        assert exc_info.value.url == URL

    def test_any_exception_is_retried(self):
        """Transport errors count as failed attempts too."""
        mock_func = MagicMock(side_effect=[ConnectionError("reset"), "success"])

        assert retry_on_failure(mock_func, URL) == "success"

    def test_last_cause_is_chained(self):
        """The last exception is kept as the cause."""
        cause = ValueError("bad json")
        mock_func = MagicMock(side_effect=cause)

        with pytest.raises(FetchError) as exc_info:
            retry_on_failure(mock_func, URL, max_retries=2)

        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause
        assert exc_info.value.status_code is None

    def test_budget_below_one_still_tries_once(self):
        """max_retries=0 makes a single attempt."""
        mock_func = MagicMock(side_effect=AttemptFailed("HTTP 500", status_code=500))

        with pytest.raises(FetchError):
            retry_on_failure(mock_func, URL, max_retries=0)

        assert mock_func.call_count == 1

    @patch('time.sleep')
    def test_no_sleep_without_backoff(self, mock_sleep):
        """Attempts are immediate by default."""
        mock_func = MagicMock(side_effect=[AttemptFailed("x"), AttemptFailed("x"), "ok"])

        retry_on_failure(mock_func, URL)

        mock_sleep.assert_not_called()

    @patch('time.sleep')
    def test_exponential_backoff_timing(self, mock_sleep):
        """retry_on_failure should double the wait after each failure."""
        mock_func = MagicMock(side_effect=[AttemptFailed("x")] * 3 + ["ok"])

        retry_on_failure(mock_func, URL, max_retries=5, backoff_factor=0.5)

        calls = [call[0][0] for call in mock_sleep.call_args_list]
        assert calls == [0.5, 1.0, 2.0]

    @patch('time.sleep')
    def test_no_sleep_after_final_attempt(self, mock_sleep):
        """No wait happens once the budget is exhausted."""
        mock_func = MagicMock(side_effect=AttemptFailed("x"))

        with pytest.raises(FetchError):
            retry_on_failure(mock_func, URL, max_retries=3, backoff_factor=1.0)

        assert mock_sleep.call_count == 2
