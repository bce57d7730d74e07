"""
News harvester: resumable, rate-limited crawling of news sites into an
idempotent article store.
"""

__version__ = "1.0.0"
