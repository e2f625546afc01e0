"""Common API response schemas and shared literal types."""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

MergeField = Literal["identifier", "fact"]
ConflictResolution = Literal["keep_source", "keep_target", "keep_both"]


class ApiResponse(BaseModel, Generic[T]):
    """Consistent JSON envelope for API responses."""

    data: T
