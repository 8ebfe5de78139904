from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.security import password_problem


class VolunteerOut(BaseModel):
    """Public view of a volunteer. Credentials are never part of it."""

    model_config = ConfigDict(from_attributes=True)

    email: str


class VolunteerLogin(BaseModel):
    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        problem = password_problem(v)
        if problem is not None:
            raise ValueError(problem)
        return v


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    volunteer: VolunteerOut
