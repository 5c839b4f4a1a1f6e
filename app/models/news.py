from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NewsSource(_CamelModel):
    id: Optional[str] = None
    name: str = ""


class NewsArticle(_CamelModel):
    """Uniform article shape shared by the keyword search and the regional feed."""

    source: NewsSource
    author: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    url: str = ""
    url_to_image: Optional[str] = None
    published_at: str
    content: Optional[str] = None
    # Untranslated English text, kept for sentiment analysis of regional-feed items.
    original_title: Optional[str] = None
    original_description: Optional[str] = None

    @field_validator("title", "url", "published_at", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value


class NewsListResponse(_CamelModel):
    status: str = "ok"
    total_results: int = 0
    articles: List[NewsArticle] = Field(default_factory=list)
    is_translating: bool = False
    translation_message: str = ""

    def to_payload(self) -> dict:
        payload = self.model_dump(by_alias=True)
        for article in payload["articles"]:
            for key in ("originalTitle", "originalDescription"):
                if article.get(key) is None:
                    article.pop(key, None)
        return payload


class RegionalFeedPost(BaseModel):
    """One entry of the regional JSON feed."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    headline: str = ""
    link: str = ""
    image: Optional[str] = None
    # The feed spells this key "pusblised_at".
    published_at: str = Field(
        default="",
        validation_alias=AliasChoices("pusblised_at", "published_at"),
    )

    @field_validator("title", "headline", "link", "published_at", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value


class RegionalFeed(BaseModel):
    featured_post: Optional[RegionalFeedPost] = None
    posts: List[RegionalFeedPost] = Field(default_factory=list)

    @field_validator("posts", mode="before")
    @classmethod
    def _posts_list(cls, value):
        return value if isinstance(value, list) else []

    def items(self) -> List[RegionalFeedPost]:
        """Feed entries in display order: the featured post first, if any."""
        head = [self.featured_post] if self.featured_post is not None else []
        return head + list(self.posts)
