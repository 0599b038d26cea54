"""Shared base model definitions for tubeweb domain objects."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TubeBaseModel(BaseModel):
    """Base model configured for tubeweb-wide defaults.

    Entities are immutable once built; any invalid field rejects the whole entity.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


__all__ = ["TubeBaseModel"]
