"""Meeting minutes data models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Minutes(BaseModel):
    """Structured minutes extracted from a sales meeting transcript."""

    model_config = ConfigDict(populate_by_name=True)

    customer: str = ""
    contact: str = ""
    project: str = ""
    summary: str = ""
    decisions: list[str] = Field(default_factory=list)
    todos: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    next_schedule: str = Field(default="", alias="nextSchedule")

    @field_validator("customer", "contact", "project", "summary", "next_schedule", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("decisions", "todos", "keywords", mode="before")
    @classmethod
    def _coerce_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        return value


class MinutesRequest(BaseModel):
    """Request model for minutes generation."""

    transcript: str = Field(..., min_length=1, description="Meeting transcript text")


class MinutesExportRequest(BaseModel):
    """Request model for minutes export."""

    minutes: Minutes
    transcript: str | None = None
