# harvester/factories/extractor_factory.py
"""
Factory for page extractors, keyed by source.
"""
from harvester.extractors import EXTRACTOR_REGISTRY
from harvester.interfaces import ConfigurationError, IPageExtractor, Source


class ExtractorFactory:
    """Creates the extraction rules for a configured source."""

    @classmethod
    def create_extractor(cls, source: Source) -> IPageExtractor:
        """
        Args:
            source: Configured source

        Raises:
            ConfigurationError: If no extractor is registered for the source
        """
        extractor_class = EXTRACTOR_REGISTRY.get(source)
        if extractor_class is None:
            raise ConfigurationError(f"No extractor registered for {source}", source.value)
        return extractor_class()
