"""
Pydantic models for tasks.

``TaskCreate`` and ``TaskUpdate`` describe request bodies.  Both reject
unknown fields and do not coerce types, so ``{"completed": "yes"}`` or
``{"title": 5}`` are validation errors rather than silently converted
values.  ``TaskRead`` is the representation returned by the repository
and by the API; its JSON keys are camelCase (``createdAt``,
``updatedAt``) while Python code uses snake_case attributes.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskCreate(BaseModel):
    """Schema for creating a task."""

    title: str = Field(..., min_length=1, examples=["Complete project documentation"])
    description: Optional[str] = Field(
        None, examples=["Write comprehensive documentation for the API endpoints"]
    )

    model_config = ConfigDict(extra="forbid", strict=True)


class TaskUpdate(BaseModel):
    """Schema for updating a task.

    All fields are optional; only fields present in the request body are
    applied.  ``description`` may be set to ``null`` to clear it, while
    ``title`` and ``completed`` may be omitted but never nulled.
    """

    title: Optional[str] = Field(None, min_length=1, examples=["Updated task title"])
    description: Optional[str] = Field(None, examples=["Updated task description"])
    completed: Optional[bool] = Field(None, examples=[True])

    model_config = ConfigDict(extra="forbid", strict=True)

    @field_validator("title", "completed")
    @classmethod
    def reject_null(cls, value):
        # Only runs for values present in the payload.
        if value is None:
            raise ValueError("may not be null")
        return value

    def changes(self) -> dict:
        """Return only the fields supplied by the client."""
        return self.model_dump(exclude_unset=True)


@dataclass
class TaskFilters:
    """Optional predicates narrowing a list or count query."""

    completed: Optional[bool] = None
    search: Optional[str] = None


class TaskRead(BaseModel):
    """Schema for a task returned by the API."""

    id: str = Field(..., examples=["507f1f77bcf86cd799439011"])
    title: str
    description: Optional[str] = None
    completed: bool = False
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class TaskList(BaseModel):
    """A page of tasks together with the total number of matches."""

    tasks: List[TaskRead]
    total: int


class TaskDeleted(BaseModel):
    message: str = "Task deleted successfully"


class HealthStatus(BaseModel):
    status: str
    database: str
