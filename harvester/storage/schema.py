"""
Table definitions for the article store.
"""
from sqlalchemy import (
    Column, DateTime, ForeignKey, Index, MetaData, String, Table, Text, text,
)

metadata = MetaData()

# URL uniqueness only binds live rows; a deleted article may be re-crawled
LIVE_ROWS_CLAUSE = "status <> 'DELETED'"

news_articles = Table(
    "news_articles",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("title", Text, nullable=False),
    Column("summary", Text, nullable=False),
    Column("content", Text, nullable=False),
    Column("category", String(32), nullable=False),
    Column("url", Text, nullable=False),
    Column("status", String(16), nullable=False),
    Column("published_at", DateTime, nullable=False),
    Column("source", String(32), nullable=False),
    Index(
        "uq_news_articles_live_url",
        "url",
        unique=True,
        sqlite_where=text(LIVE_ROWS_CLAUSE),
        postgresql_where=text(LIVE_ROWS_CLAUSE),
    ),
    Index("ix_news_articles_source_category", "source", "category"),
)

news_keywords = Table(
    "news_keywords",
    metadata,
    Column("article_id", String(36), ForeignKey("news_articles.id", ondelete="CASCADE"), primary_key=True),
    Column("keyword", Text, primary_key=True),
)

news_media_urls = Table(
    "news_media_urls",
    metadata,
    Column("article_id", String(36), ForeignKey("news_articles.id", ondelete="CASCADE"), primary_key=True),
    Column("media_url", Text, primary_key=True),
)
