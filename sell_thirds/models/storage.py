"""Storage health model reported by the JSON file store."""

from pydantic import BaseModel, Field


class StorageHealth(BaseModel):
    """
    Store availability and usage.

    Fields:
    -------
    - available: Whether the store can be written
    - space_used: Bytes currently held by the tracker's collections
    - space_remaining: Bytes left before the quota is reached
    - quota_exceeded: Whether space_used has reached the quota
    """

    available: bool
    space_used: int = Field(default=0, ge=0)
    space_remaining: int = Field(default=0, ge=0)
    quota_exceeded: bool = False
