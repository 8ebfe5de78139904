"""Store capability every persistence backend implements."""

from abc import ABC, abstractmethod

from app.core.context import OperationContext
from app.domain.models import Team, Volunteer


class Store(ABC):
    """Persistence operations used by the API.

    Implementations translate backend-specific failures into the error
    taxonomy in ``app.errors`` before they leave the store. Every operation
    observes ``ctx`` and raises ``OperationCancelledError`` instead of
    completing once it is cancelled or past its deadline.

    Cancellation is cooperative: the cancel flag is checked before work
    starts and between steps, not while a database statement runs. Only the
    deadline bounds a statement already in flight, through PostgreSQL's
    ``statement_timeout``. Requests get a deadline-only context, so a client
    disconnect does not cancel the operation serving it.
    """

    @abstractmethod
    def authenticate_or_create(
        self, ctx: OperationContext, email: str, password: str
    ) -> None:
        """Authenticate the given account, creating it when it does not exist yet.

        Raises:
            PasswordMismatchError: If the account exists with another password.
            DomainValidationError: If the password contains NUL characters or
                is longer than 72 UTF-8 bytes. Nothing is stored.
        """

    @abstractmethod
    def get_volunteer_by_email(self, ctx: OperationContext, email: str) -> Volunteer:
        """Find a volunteer by email. The returned password is always None.

        Raises:
            NotFoundError: If there is no such volunteer.
        """

    @abstractmethod
    def create_team(self, ctx: OperationContext, team: Team) -> None:
        """Store a new team verbatim.

        Raises:
            AlreadyExistsError: If a team with the same id exists.
        """

    @abstractmethod
    def get_team_by_id(self, ctx: OperationContext, team_id: str) -> Team:
        """
        Raises:
            NotFoundError: If there is no such team.
        """

    @abstractmethod
    def add_team_member(self, ctx: OperationContext, team_id: str, email: str) -> None:
        """
        Raises:
            NotFoundError: If the team or the volunteer does not exist.
            AlreadyExistsError: If the volunteer is already a member.
        """

    @abstractmethod
    def list_team_members(self, ctx: OperationContext, team_id: str) -> list[Volunteer]:
        """Return all members of a team, passwords redacted, in no particular order.

        Raises:
            NotFoundError: If there is no such team.
        """

    @abstractmethod
    def remove_team_member(self, ctx: OperationContext, team_id: str, email: str) -> None:
        """
        Raises:
            NotFoundError: If there is no such team or no such membership.
        """

    @abstractmethod
    def count_team_members(self, ctx: OperationContext) -> dict[str, int]:
        """Return team id -> member count.

        Only teams with at least one member appear in the mapping.
        """

    @abstractmethod
    def healthcheck(self, ctx: OperationContext) -> None:
        """Raise when the backend is not usable. Has no side effects."""

    def close(self) -> None:
        """Release backend resources. No-op by default."""
