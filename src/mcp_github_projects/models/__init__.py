"""
Pydantic models for GitHub Projects V2 API data structures.
"""

from .base import ApiModel
from .project import (
    FieldDataType,
    FieldOption,
    Iteration,
    Project,
    ProjectField,
    ProjectItem,
    ProjectView,
)

__all__ = [
    "ApiModel",
    "FieldDataType",
    "FieldOption",
    "Iteration",
    "Project",
    "ProjectField",
    "ProjectItem",
    "ProjectView",
]
