from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Volunteer:
    """A person identified by email.

    ``password`` is credential material. Store read paths always return it
    as ``None``.
    """

    email: str
    password: str | None = None


@dataclass(slots=True)
class Team:
    """A group identified by an externally chosen id."""

    id: str
    name: str | None = None
