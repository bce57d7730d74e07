"""
Monitoring for the news harvester.
"""
from monitoring.metrics import CrawlMetrics

__all__ = ['CrawlMetrics']
