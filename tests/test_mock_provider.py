"""Tests for the mock provider used across the test suite."""

import pytest

from contentforge.exceptions import ProviderError
from tests.mocks import MockProvider


class TestMockProvider:
    """Test mock provider behaviour."""

    def setup_method(self):
        self.provider = MockProvider()

    def test_scripted_responses_in_order(self):
        self.provider.add_response("One", "First body").add_response("Two", "Second body")

        assert self.provider.generate("prompt 1").title == "One"
        assert self.provider.generate("prompt 2").content == "Second body"
        assert self.provider.prompts == ["prompt 1", "prompt 2"]

    def test_default_response_when_script_is_empty(self):
        result = self.provider.generate("prompt")
        assert result.title == "Mock title 1"

    def test_scripted_failure(self):
        self.provider.add_failure("Quota exceeded", status_code=429)

        with pytest.raises(ProviderError) as exc_info:
            self.provider.generate("prompt")

        assert exc_info.value.status_code == 429
        assert exc_info.value.provider == "mock"
        assert exc_info.value.message == "Quota exceeded"

    def test_connection_result(self):
        assert self.provider.test_connection().success is True
