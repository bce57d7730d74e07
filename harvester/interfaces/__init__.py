# harvester/interfaces/__init__.py
"""
Interfaces package for the harvester.
Contains enums, the page extractor contract and the exception taxonomy.
"""

from .news_source_interface import (
    # Core interface
    IPageExtractor,

    # Enums
    Source,
    Category,
    ArticleStatus,

    # Exceptions
    HarvesterError,
    RunAlreadyInProgressError,
    RunNotInProgressError,
    InvalidIntervalFormatError,
    IntervalIsZeroError,
    ConfigurationError,
)

__all__ = [
    'IPageExtractor',

    'Source',
    'Category',
    'ArticleStatus',

    'HarvesterError',
    'RunAlreadyInProgressError',
    'RunNotInProgressError',
    'InvalidIntervalFormatError',
    'IntervalIsZeroError',
    'ConfigurationError',
]
