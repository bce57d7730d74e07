"""
Unit tests for user agent rotation.
"""
import pytest

from harvester.utils import UserAgentProvider
from harvester.utils.user_agents import DEFAULT_USER_AGENTS


class TestUserAgentProvider:

    @pytest.mark.unit
    def test_round_robin(self):
        provider = UserAgentProvider(["a", "b", "c"])
        assert [provider.next_user_agent() for _ in range(5)] == ["a", "b", "c", "a", "b"]

    @pytest.mark.unit
    def test_default_pool(self):
        provider = UserAgentProvider()
        seen = {provider.next_user_agent() for _ in range(len(DEFAULT_USER_AGENTS))}
        assert seen == set(DEFAULT_USER_AGENTS)
