"""
Utility modules for the harvester.
"""
from .rate_limiter import RateLimiter
from .user_agents import UserAgentProvider
from .duration import parse_interval, format_interval
from .text import first_sentence, normalize_keywords, join_paragraphs
from .logging_config import setup_logging

__all__ = [
    'RateLimiter',
    'UserAgentProvider',
    'parse_interval',
    'format_interval',
    'first_sentence',
    'normalize_keywords',
    'join_paragraphs',
    'setup_logging'
]
