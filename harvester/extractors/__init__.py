# harvester/extractors/__init__.py
"""
Per-source page extractors.
"""
from typing import Dict, Type

from harvester.interfaces import IPageExtractor, Source

from .base_extractor import BasePageExtractor
from .rt_ru import RtRuExtractor
from .aif_ru import AifRuExtractor
from .svpressa_ru import SvpressaRuExtractor

EXTRACTOR_REGISTRY: Dict[Source, Type[IPageExtractor]] = {
    Source.RT_RU: RtRuExtractor,
    Source.AIF_RU: AifRuExtractor,
    Source.SVPRESSA_RU: SvpressaRuExtractor,
}

__all__ = [
    'BasePageExtractor',
    'RtRuExtractor',
    'AifRuExtractor',
    'SvpressaRuExtractor',
    'EXTRACTOR_REGISTRY'
]
