from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator
from datetime import datetime, timezone
from typing import Optional


def _strip_description(v: Optional[str]) -> Optional[str]:
    if v:
        return v.strip()
    return v


class TaskCreate(BaseModel):
    """Schema for creating a task"""
    title: StrictStr = Field(..., min_length=1, description="Task title")
    description: Optional[StrictStr] = Field(None, description="Task description")
    done: StrictBool = Field(default=False, description="Whether the task is done")

    @field_validator('title')
    @classmethod
    def title_must_not_be_empty(cls, v: str) -> str:
        """Validate title is not just whitespace"""
        if not v.strip():
            raise ValueError('Title cannot be empty or just whitespace')
        return v.strip()

    @field_validator('description')
    @classmethod
    def description_strip_whitespace(cls, v: Optional[str]) -> Optional[str]:
        return _strip_description(v)


class TaskUpdate(BaseModel):
    """Schema for updating a task - all fields optional, only supplied ones change"""
    title: Optional[StrictStr] = Field(None, min_length=1)
    description: Optional[StrictStr] = Field(None)
    done: Optional[StrictBool] = None

    @field_validator('title')
    @classmethod
    def title_must_not_be_empty(cls, v: Optional[str]) -> str:
        # Only runs for supplied values, so None here means an explicit null
        if v is None:
            raise ValueError('Title cannot be null')
        if not v.strip():
            raise ValueError('Title cannot be empty or just whitespace')
        return v.strip()

    @field_validator('done')
    @classmethod
    def done_must_not_be_null(cls, v: Optional[bool]) -> bool:
        if v is None:
            raise ValueError('Done cannot be null')
        return v

    @field_validator('description')
    @classmethod
    def description_strip_whitespace(cls, v: Optional[str]) -> Optional[str]:
        return _strip_description(v)


class Task(BaseModel):
    """Schema for returning a task"""
    id: str
    title: str
    description: Optional[str] = None
    done: bool
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    model_config = ConfigDict(from_attributes=True)

    @field_validator('created_at', 'updated_at')
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        # Timestamps are stored in UTC; SQLite hands them back without an offset
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class ErrorResponse(BaseModel):
    """Error body returned for 4xx/5xx responses"""
    statusCode: int
    message: str | list[str]
    error: str
