"""
Base models and shared constants for GitHub Projects data models.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

EMPTY_STRING = ""
UNKNOWN = "Unknown"

T = TypeVar("T", bound="ApiModel")


class ApiModel(BaseModel):
    """
    Base model for all API response models.

    Subclasses build themselves from raw GraphQL/REST payloads with
    ``from_api_response`` and render the compact form handed back to the
    MCP client with ``to_simplified_dict``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @classmethod
    def from_api_response(cls: type[T], data: dict[str, Any], **kwargs: Any) -> T:
        raise NotImplementedError("Subclasses must implement from_api_response")

    def to_simplified_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
