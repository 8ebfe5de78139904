from pydantic import BaseModel, ConfigDict, Field


class Team(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str | None = None


class TeamCreate(BaseModel):
    id: str = Field(..., min_length=1)
    name: str | None = None
