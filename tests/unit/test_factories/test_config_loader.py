"""
Unit tests for YAML settings loading.
"""
from datetime import timedelta

import pytest

from harvester.factories import SettingsLoader
from harvester.factories.config_loader import DEFAULT_CONFIG_PATH
from harvester.interfaces import Category, ConfigurationError, Source

VALID_YAML = """
crawler:
  max_concurrent_requests: 10
  request_timeout_seconds: 5
  parse_workers: 2
auto_crawl:
  enabled: true
  interval: "1d12h"
sources:
  - name: rt_ru
    rate_limit_per_second: 5
    categories:
      POLITICS: ["abc", "/def/"]
      WEATHER: ["ignored"]
  - name: AIF_RU
    enabled: false
    categories:
      SPORT: ["sport/football"]
  - name: UNKNOWN
    categories:
      SPORT: ["x"]
  - name: SVPRESSA_RU
    rate_limit_per_second: 0
    categories:
      SPORT: ["sport"]
"""


@pytest.fixture
def config_file(tmp_path):
    def _write(content):
        path = tmp_path / "sources.yaml"
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write


class TestSettingsLoader:

    @pytest.mark.unit
    def test_loads_valid_entries(self, config_file):
        settings = SettingsLoader.load_from_yaml(config_file(VALID_YAML))

        assert settings.max_concurrent_requests == 10
        assert settings.request_timeout_seconds == 5.0
        assert settings.parse_workers == 2
        assert settings.auto_crawl_enabled is True
        assert settings.auto_crawl_interval == timedelta(days=1, hours=12)

        assert set(settings.sources) == {Source.RT_RU, Source.AIF_RU}
        rt = settings.sources[Source.RT_RU]
        assert rt.categories == {Category.POLITICS: {"abc", "def"}}
        assert rt.rate_limit_per_second == 5.0
        assert settings.sources[Source.AIF_RU].enabled is False

    @pytest.mark.unit
    def test_invalid_interval_disables_auto_crawl(self):
        settings = SettingsLoader.from_dict({"auto_crawl": {"enabled": True, "interval": "0m"}})
        assert settings.auto_crawl_enabled is False
        assert settings.auto_crawl_interval is None

    @pytest.mark.unit
    def test_invalid_crawler_section(self):
        with pytest.raises(ConfigurationError):
            SettingsLoader.from_dict({"crawler": {"max_concurrent_requests": 0}})

    @pytest.mark.unit
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            SettingsLoader.load_from_yaml(str(tmp_path / "absent.yaml"))

    @pytest.mark.unit
    def test_env_override(self, config_file, monkeypatch):
        monkeypatch.setenv("HARVESTER_CONFIG", config_file("sources: []\n"))
        assert SettingsLoader.load_from_yaml().sources == {}

    @pytest.mark.unit
    def test_bundled_config(self, monkeypatch):
        monkeypatch.delenv("HARVESTER_CONFIG", raising=False)
        settings = SettingsLoader.load_from_yaml(DEFAULT_CONFIG_PATH)
        assert set(settings.sources) == set(Source)
        assert all(config.paths() for config in settings.sources.values())
