"""Thumbnail URL sets for videos and playlists."""

from __future__ import annotations

from typing import Optional

from tubeweb.models.base import TubeBaseModel


THUMBNAIL_URL_TEMPLATE = "https://img.youtube.com/vi/{video_id}/{name}.jpg"


class Thumbnails(TubeBaseModel):
    """Up to four resolution-tiered thumbnail URLs.

    When ``video_id`` is set every tier is derived from the fixed image templates and the
    explicit URLs are ignored. Explicit URLs are only used for items that carry no video id.
    """

    video_id: Optional[str] = None
    custom_low_res_url: Optional[str] = None
    custom_medium_res_url: Optional[str] = None
    custom_high_res_url: Optional[str] = None
    custom_standard_res_url: Optional[str] = None

    def _resolve(self, name: str, custom_url: Optional[str]) -> Optional[str]:
        if self.video_id:
            return THUMBNAIL_URL_TEMPLATE.format(video_id=self.video_id, name=name)
        return custom_url or None

    @property
    def low_res_url(self) -> Optional[str]:
        return self._resolve("default", self.custom_low_res_url)

    @property
    def medium_res_url(self) -> Optional[str]:
        return self._resolve("mqdefault", self.custom_medium_res_url)

    @property
    def high_res_url(self) -> Optional[str]:
        return self._resolve("hqdefault", self.custom_high_res_url)

    @property
    def standard_res_url(self) -> Optional[str]:
        return self._resolve("sddefault", self.custom_standard_res_url)

    @property
    def is_resolvable(self) -> bool:
        """True when at least one resolution tier yields a URL."""

        return any((self.low_res_url, self.medium_res_url, self.high_res_url, self.standard_res_url))


__all__ = ["THUMBNAIL_URL_TEMPLATE", "Thumbnails"]
