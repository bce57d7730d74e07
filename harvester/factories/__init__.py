# harvester/factories/__init__.py
"""
Factories for settings, extractors and the application object graph.
"""
from .config_loader import SettingsLoader, resolve_config_path
from .extractor_factory import ExtractorFactory
from .app_factory import HarvesterApp, build_application

__all__ = [
    'SettingsLoader',
    'resolve_config_path',
    'ExtractorFactory',
    'HarvesterApp',
    'build_application'
]
