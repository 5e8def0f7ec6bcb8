"""Result envelopes shared by the tier and temporal rule catalogs."""

from typing import Generic, TypeVar

from pydantic import BaseModel

ItemT = TypeVar("ItemT")


class BulkItemResult(BaseModel, Generic[ItemT]):
    id: int
    success: bool
    data: ItemT | None = None
    error: str | None = None


class BulkResult(BaseModel, Generic[ItemT]):
    """Outcome of a batch write; each item succeeds or fails on its own."""

    message: str
    results: list[BulkItemResult[ItemT]]
    successful: int
    failed: int


class SeedResult(BaseModel, Generic[ItemT]):
    message: str
    created: int
    errors: int
    items: list[ItemT]
    error_messages: list[str]
