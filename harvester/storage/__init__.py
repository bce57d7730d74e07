"""
Article persistence.
"""
from .article_repository import ArticleRepository, create_engine_from_env

__all__ = ['ArticleRepository', 'create_engine_from_env']
