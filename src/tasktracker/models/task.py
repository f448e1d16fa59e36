"""Task, epic and subtask data models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel


class Status(str, Enum):
    """Lifecycle status shared by every entity kind."""

    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskKind(str, Enum):
    """Discriminant used by serialization and by the store's indexes."""

    TASK = "TASK"
    EPIC = "EPIC"
    SUBTASK = "SUBTASK"


class Task(BaseModel):
    """Plain task.

    Attributes:
        id: Store-assigned identifier (0 until the task is added)
        name: Short task title
        description: Free-form description
        status: Lifecycle status
        duration: Planned length of the task, never negative
        start_time: Optional start; a task with a start time is time-bearing.
            Stored as naive UTC: aware values are converted, naive values are
            taken to be UTC already, so every stored start is comparable.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    KIND: ClassVar[TaskKind] = TaskKind.TASK

    id: int = Field(default=0, ge=0)
    name: str
    description: str = ""
    status: Status = Status.NEW
    duration: timedelta = Field(default_factory=timedelta)
    start_time: datetime | None = None

    @field_validator("duration")
    @classmethod
    def _duration_not_negative(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("duration must not be negative")
        return value

    @field_validator("start_time")
    @classmethod
    def _start_time_as_naive_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def kind(self) -> TaskKind:
        return self.KIND

    @property
    def has_start_time(self) -> bool:
        return self.start_time is not None

    @property
    def end_time(self) -> datetime:
        """Start time plus duration.

        Raises:
            ValueError: If the task has no start time
        """
        if self.start_time is None:
            raise ValueError(f"{self.KIND.value.lower()} id:{self.id} has no start time")
        return self.start_time + self.duration

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task) or type(self) is not type(other):
            return False
        return (
            self.name == other.name
            and self.description == other.description
            and self.id == other.id
            and self.status == other.status
        )


class Epic(Task):
    """Container of subtasks.

    Status, duration and start time are derived by the store from the epic's
    subtasks; values supplied by callers are overwritten.
    """

    KIND: ClassVar[TaskKind] = TaskKind.EPIC

    subtask_ids: list[int] = Field(default_factory=list)


class Subtask(Task):
    """Task owned by exactly one epic."""

    KIND: ClassVar[TaskKind] = TaskKind.SUBTASK

    epic_id: int = Field(default=0, ge=0)


def to_wire(tasks: Task | list[Task]) -> Any:
    """JSON-compatible form with camelCase names, shared by the API and CLI output."""
    if isinstance(tasks, list):
        return [task.model_dump(mode="json", by_alias=True) for task in tasks]
    return tasks.model_dump(mode="json", by_alias=True)
