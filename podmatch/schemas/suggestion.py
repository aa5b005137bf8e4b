from pydantic import BaseModel, Field


class ActivitySuggestion(BaseModel):
    """A short on-campus meetup idea."""

    title: str = Field(description="Short, catchy activity name")
    summary: str | None = Field(
        default=None, description="1-2 sentence description tailored to their interests"
    )
    duration_minutes: int | None = Field(default=None, description="Expected length in minutes")
    tags: list[str] = Field(default_factory=list, description="Keywords for the activity")
    primary_reason: str | None = Field(
        default=None, description="Why this fits their description or hobbies"
    )


class AgendaItem(BaseModel):
    label: str = Field(description="Agenda block name")
    duration_minutes: int | None = Field(default=None, description="Block length in minutes")
    detail: str | None = Field(default=None, description="What happens during the block")


class HangoutPlan(BaseModel):
    """A timed plan for a group meetup."""

    title: str
    summary: str
    agenda: list[AgendaItem] = Field(default_factory=list)
    conversation_starters: list[str] = Field(default_factory=list)
    shared_connections: list[str] = Field(default_factory=list)
    prep_reminders: list[str] = Field(default_factory=list)
    follow_up_ideas: list[str] = Field(default_factory=list)
    participants: list[str] = Field(default_factory=list)
