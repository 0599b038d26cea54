"""Pydantic models describing YouTube videos and playlists."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Literal, Optional

from pydantic import Field, PositiveInt, field_validator, model_validator

from tubeweb.models.base import TubeBaseModel
from tubeweb.models.thumbnails import Thumbnails


class Video(TubeBaseModel):
    """A single video as listed by search, related, playlist or music endpoints.

    Instances are only created by the entity builders in :mod:`tubeweb.parsing.builders`
    once every required field has been found. The thumbnail set is derived from
    ``video_id`` when not given explicitly.
    """

    kind: Literal["video"] = "video"
    video_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    duration: timedelta
    thumbnails: Thumbnails = Field(default_factory=Thumbnails)

    @model_validator(mode="before")
    @classmethod
    def _derive_thumbnails(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("thumbnails") is None:
            data = {**data, "thumbnails": Thumbnails(video_id=data.get("video_id"))}
        return data

    @field_validator("duration")
    @classmethod
    def _positive_duration(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("duration must be positive")
        return value

    @field_validator("thumbnails")
    @classmethod
    def _resolvable_thumbnails(cls, value: Thumbnails) -> Thumbnails:
        if not value.is_resolvable:
            raise ValueError("at least one thumbnail URL must resolve")
        return value

    @property
    def url(self) -> str:
        """The video's watch page URL."""

        return f"https://www.youtube.com/watch?v={self.video_id}"


class Playlist(TubeBaseModel):
    """A playlist, album or radio station.

    ``author``, ``description`` and ``video_count`` are optional because several upstream
    shapes never carry them; when present they must be non-empty / positive.
    """

    kind: Literal["playlist"] = "playlist"
    playlist_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    author: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    video_count: Optional[PositiveInt] = None
    thumbnails: Thumbnails

    @field_validator("thumbnails")
    @classmethod
    def _resolvable_thumbnails(cls, value: Thumbnails) -> Thumbnails:
        if not value.is_resolvable:
            raise ValueError("at least one thumbnail URL must resolve")
        return value

    @property
    def url(self) -> str:
        return f"https://www.youtube.com/playlist?list={self.playlist_id}"


__all__ = ["Playlist", "Video"]
