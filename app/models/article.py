from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ExtractedArticle(BaseModel):
    """Article recovered from a scraped HTML page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    author: str = ""
    published_date: str
    summary: str = ""
    image_url: Optional[str] = None
    content: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list, max_length=5)
    source_url: str
    read_more_url: str

    @property
    def is_usable(self) -> bool:
        return bool(self.title.strip()) and any(p.strip() for p in self.content)
