"""Response envelopes shared by every endpoint."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """Successful response wrapper: ``{"success": true, "data": ...}``."""

    success: bool = True
    data: DataT


class DeletedResult(BaseModel):
    id: int
    deleted: bool = Field(default=True)
