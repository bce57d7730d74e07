# harvester/factories/config_loader.py
"""
Configuration loader.
Loads crawler and source settings from YAML into CrawlerSettings.
"""
import os
from typing import Any, Dict, Optional

import yaml
from loguru import logger

from harvester.interfaces import (
    Category, ConfigurationError, HarvesterError, Source
)
from harvester.models import CrawlerSettings, SourceConfig
from harvester.utils import parse_interval

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
    'config', 'sources.yaml'
)


def resolve_config_path(config_path: Optional[str] = None) -> str:
    return config_path or os.getenv('HARVESTER_CONFIG') or DEFAULT_CONFIG_PATH


class SettingsLoader:
    """Builds CrawlerSettings from YAML; bad entries are logged and skipped."""

    @classmethod
    def load_from_yaml(cls, config_path: Optional[str] = None) -> CrawlerSettings:
        """
        Load settings from a YAML file.

        Args:
            config_path: Path to the YAML file; ``HARVESTER_CONFIG`` or the bundled default when omitted

        Returns:
            CrawlerSettings

        Raises:
            ConfigurationError: If the file cannot be read or the crawler section is invalid
        """
        path = resolve_config_path(config_path)
        try:
            with open(path, 'r', encoding='utf-8') as file:
                data = yaml.safe_load(file) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to load configuration from {path}: {e}", cause=e)

        settings = cls.from_dict(data)
        logger.info(f"Loaded {len(settings.sources)} source configurations from {path}")
        return settings

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CrawlerSettings:
        crawler = data.get('crawler') or {}
        settings = CrawlerSettings(
            max_concurrent_requests=int(crawler.get('max_concurrent_requests', 50)),
            request_timeout_seconds=float(crawler.get('request_timeout_seconds', 45)),
            parse_workers=int(crawler.get('parse_workers', 4)),
        )

        errors = settings.validate()
        if errors:
            raise ConfigurationError(f"Invalid crawler settings: {'; '.join(errors)}")

        cls._apply_auto_crawl(settings, data.get('auto_crawl') or {})

        for source_data in data.get('sources') or []:
            config = cls._convert_source(source_data)
            if config is None:
                continue
            if config.source in settings.sources:
                logger.warning(f"Duplicate configuration for {config.source.value}, keeping the first one")
                continue
            settings.sources[config.source] = config

        return settings

    @classmethod
    def _apply_auto_crawl(cls, settings: CrawlerSettings, auto_crawl: Dict[str, Any]) -> None:
        interval = auto_crawl.get('interval')
        if interval:
            try:
                settings.auto_crawl_interval = parse_interval(str(interval))
            except HarvesterError as e:
                logger.warning(f"Ignoring auto-crawl interval: {e}")

        enabled = bool(auto_crawl.get('enabled', False))
        if enabled and settings.auto_crawl_interval is None:
            logger.warning("Auto-crawl is enabled without a valid interval, keeping it disabled")
            enabled = False
        settings.auto_crawl_enabled = enabled

    @classmethod
    def _convert_source(cls, source_data: Dict[str, Any]) -> Optional[SourceConfig]:
        name = str(source_data.get('name', '')).upper()
        try:
            source = Source[name]
        except KeyError:
            logger.warning(f"Unknown source {name!r}, skipping")
            return None

        categories = {}
        for category_name, paths in (source_data.get('categories') or {}).items():
            try:
                category = Category[str(category_name).upper()]
            except KeyError:
                logger.warning(f"[{name}] Unknown category {category_name!r}, skipping")
                continue
            clean_paths = {str(p).strip().strip('/') for p in (paths or []) if str(p).strip()}
            if clean_paths:
                categories[category] = clean_paths

        try:
            return SourceConfig(
                source=source,
                categories=categories,
                rate_limit_per_second=float(source_data.get('rate_limit_per_second', 1.0)),
                enabled=bool(source_data.get('enabled', True)),
            )
        except (TypeError, ValueError) as e:
            logger.error(f"[{name}] Invalid source configuration: {e}")
            return None
