"""Pydantic models for media stream renditions."""

from __future__ import annotations

from pydantic import Field, PositiveInt

from tubeweb.models.base import TubeBaseModel


class StreamInfo(TubeBaseModel):
    """One available rendition (muxed or adaptive) of a single video."""

    url: str = Field(min_length=1)
    mime_type: str = Field(min_length=1)
    bit_rate: PositiveInt

    @property
    def is_audio(self) -> bool:
        return self.mime_type.startswith("audio/")

    @property
    def is_video(self) -> bool:
        return self.mime_type.startswith("video/")


__all__ = ["StreamInfo"]
