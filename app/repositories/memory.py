import logging
from contextlib import contextmanager
from dataclasses import replace

from app.core.context import OperationContext
from app.core.rwlock import ReadWriteLock
from app.core.security import (
    ensure_storable_password,
    get_password_hash,
    verify_password,
)
from app.domain.models import Team, Volunteer
from app.errors import (
    AlreadyExistsError,
    DomainValidationError,
    NotFoundError,
    OperationCancelledError,
    PasswordMismatchError,
)
from app.repositories.base import Store

logger = logging.getLogger(__name__)


class MemoryStore(Store):
    """Store keeping all data in process memory.

    The three maps form one unit guarded by a single reader/writer lock:
    membership checks look at teams and volunteers in the same critical
    section that mutates the member sets.
    """

    def __init__(self):
        self._volunteers: dict[str, Volunteer] = {}
        self._teams: dict[str, Team] = {}
        self._team_members: dict[str, set[str]] = {}
        self._lock = ReadWriteLock()

    @contextmanager
    def _reading(self, ctx: OperationContext):
        ctx.check()
        try:
            with self._lock.read_locked(timeout=ctx.remaining()):
                yield
        except TimeoutError as exc:
            raise OperationCancelledError("Operation deadline exceeded") from exc

    @contextmanager
    def _writing(self, ctx: OperationContext):
        ctx.check()
        try:
            with self._lock.write_locked(timeout=ctx.remaining()):
                yield
        except TimeoutError as exc:
            raise OperationCancelledError("Operation deadline exceeded") from exc

    def authenticate_or_create(
        self, ctx: OperationContext, email: str, password: str
    ) -> None:
        ensure_storable_password(password)

        # Passwords are write-once, so a stored hash can be verified outside the lock.
        with self._reading(ctx):
            existing = self._volunteers.get(email)
            password_hash = existing.password if existing else None

        if password_hash is None:
            candidate_hash = self._hash(password)
            with self._writing(ctx):
                existing = self._volunteers.get(email)
                if existing is None:
                    self._volunteers[email] = Volunteer(email=email, password=candidate_hash)
                    logger.debug("Volunteer account created: %s", email)
                    return
                password_hash = existing.password

        ctx.check()
        try:
            matches = verify_password(password, password_hash)
        except ValueError as exc:
            raise DomainValidationError(str(exc)) from exc
        if not matches:
            raise PasswordMismatchError("Incorrect email or password")

    @staticmethod
    def _hash(password: str) -> str:
        # passlib refuses some inputs (e.g. NUL bytes) with a ValueError
        try:
            return get_password_hash(password)
        except ValueError as exc:
            raise DomainValidationError(str(exc)) from exc

    def get_volunteer_by_email(self, ctx: OperationContext, email: str) -> Volunteer:
        with self._reading(ctx):
            volunteer = self._volunteers.get(email)
            if volunteer is None:
                raise NotFoundError("Volunteer not found")
            return replace(volunteer, password=None)

    def create_team(self, ctx: OperationContext, team: Team) -> None:
        with self._writing(ctx):
            if team.id in self._teams:
                raise AlreadyExistsError(f"Team with id {team.id} already exists")
            self._teams[team.id] = replace(team)

    def get_team_by_id(self, ctx: OperationContext, team_id: str) -> Team:
        with self._reading(ctx):
            team = self._teams.get(team_id)
            if team is None:
                raise NotFoundError("Team not found")
            return replace(team)

    def add_team_member(self, ctx: OperationContext, team_id: str, email: str) -> None:
        with self._writing(ctx):
            if team_id not in self._teams:
                raise NotFoundError("Team not found")
            if email not in self._volunteers:
                raise NotFoundError("Volunteer not found")

            members = self._team_members.setdefault(team_id, set())
            if email in members:
                raise AlreadyExistsError("Volunteer is already a team member")
            members.add(email)

    def list_team_members(self, ctx: OperationContext, team_id: str) -> list[Volunteer]:
        with self._reading(ctx):
            if team_id not in self._teams:
                raise NotFoundError("Team not found")

            return [
                replace(self._volunteers[email], password=None)
                for email in self._team_members.get(team_id, ())
            ]

    def remove_team_member(self, ctx: OperationContext, team_id: str, email: str) -> None:
        with self._writing(ctx):
            if team_id not in self._teams:
                raise NotFoundError("Team not found")

            members = self._team_members.get(team_id)
            if not members or email not in members:
                raise NotFoundError("Team member not found")

            members.remove(email)
            if not members:
                del self._team_members[team_id]

    def count_team_members(self, ctx: OperationContext) -> dict[str, int]:
        with self._reading(ctx):
            return {
                team_id: len(members)
                for team_id, members in self._team_members.items()
                if members
            }

    def healthcheck(self, ctx: OperationContext) -> None:
        ctx.check()
