"""Pages of content items and home page shelves."""

from __future__ import annotations

from typing import Annotated, List, Union

from pydantic import Field

from tubeweb.models.base import TubeBaseModel
from tubeweb.models.video import Playlist, Video


ContentItem = Annotated[Union[Video, Playlist], Field(discriminator="kind")]
"""Either a :class:`Video` or a :class:`Playlist`, discriminated by ``kind``."""


class Page(TubeBaseModel):
    """One page of results, numbered from 1 in fetch order."""

    page_number: int = Field(ge=1)
    content_items: List[ContentItem] = Field(default_factory=list)

    @property
    def videos(self) -> List[Video]:
        return [item for item in self.content_items if isinstance(item, Video)]

    @property
    def playlists(self) -> List[Playlist]:
        return [item for item in self.content_items if isinstance(item, Playlist)]


class HomePageSection(TubeBaseModel):
    """One shelf of curated content from the music channel home page."""

    section_name: str = Field(min_length=1)
    content_items: List[ContentItem] = Field(default_factory=list)


__all__ = ["ContentItem", "HomePageSection", "Page"]
