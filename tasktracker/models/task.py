"""Task entity model and API schemas."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

import sqlalchemy as sa
from pydantic import BaseModel, ConfigDict, Field as PydanticField, field_validator
from sqlmodel import Column, Field, SQLModel

from tasktracker.db.types import UTCDateTime, utc_now
from tasktracker.models.ids import new_id

DESCRIPTION_MAX_LENGTH = 500


class Priority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(SQLModel, table=True):
    """Task database model. Every task belongs to exactly one user."""

    __tablename__ = "tasks"
    __table_args__ = (sa.Index("ix_tasks_owner_id_created_at", "owner_id", "created_at"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=24)
    description: str = Field(max_length=DESCRIPTION_MAX_LENGTH)
    completed: bool = Field(default=False)
    priority: Priority = Field(
        default=Priority.MEDIUM,
        sa_column=Column(
            sa.Enum(
                Priority,
                name="priority",
                values_callable=lambda enum: [member.value for member in enum],
            ),
            nullable=False,
            default=Priority.MEDIUM,
        ),
    )
    due_date: date | None = Field(default=None)
    owner_id: str = Field(foreign_key="users.id", index=True, max_length=24)
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(UTCDateTime(), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(UTCDateTime(), nullable=False)
    )


def _parse_due_date(value: Any) -> Any:
    # Empty string clears the date; full timestamps keep only their date part.
    if value == "":
        return None
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


class TaskCreate(BaseModel):
    """Schema for task creation. Description rules are checked by the endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    description: str | None = None
    priority: Priority = Priority.MEDIUM
    due_date: date | None = PydanticField(default=None, alias="dueDate")

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, value: Any) -> Any:
        return _parse_due_date(value)


class TaskUpdate(BaseModel):
    """Schema for task update. Only fields present in the body are applied."""

    model_config = ConfigDict(populate_by_name=True)

    description: str | None = None
    completed: bool | None = None
    priority: Priority | None = None
    due_date: date | None = PydanticField(default=None, alias="dueDate")

    @field_validator("due_date", mode="before")
    @classmethod
    def normalize_due_date(cls, value: Any) -> Any:
        return _parse_due_date(value)


@dataclass
class TaskChanges:
    """Fields to overwrite on an existing task.

    ``None`` means "leave unchanged" for every field except ``due_date``,
    which is only written when ``due_date_set`` is true so that it can be
    cleared.
    """

    description: str | None = None
    completed: bool | None = None
    priority: Priority | None = None
    due_date: date | None = None
    due_date_set: bool = False

    def as_values(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        if self.description is not None:
            values["description"] = self.description
        if self.completed is not None:
            values["completed"] = self.completed
        if self.priority is not None:
            values["priority"] = self.priority
        if self.due_date_set:
            values["due_date"] = self.due_date
        return values


class TaskResponse(BaseModel):
    """Task as returned to clients."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = PydanticField(alias="_id")
    description: str
    completed: bool
    priority: Priority
    due_date: date | None = PydanticField(alias="dueDate")
    owner_id: str = PydanticField(alias="owner")
    created_at: datetime = PydanticField(alias="createdAt")
    updated_at: datetime = PydanticField(alias="updatedAt")


class TaskEnvelope(BaseModel):
    """Single-task response body."""

    success: bool = True
    message: str | None = None
    task: TaskResponse


class TaskListEnvelope(BaseModel):
    """Task list response body."""

    success: bool = True
    count: int
    tasks: list[TaskResponse]
