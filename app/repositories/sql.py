import logging
from contextlib import contextmanager

from sqlalchemy import delete, func, insert, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, NoResultFound, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.context import OperationContext
from app.core.security import ensure_storable_password
from app.db.models.team import Team as TeamModel
from app.db.models.team_member import TeamMember as TeamMemberModel
from app.db.models.volunteer import Volunteer as VolunteerModel
from app.domain.models import Team, Volunteer
from app.errors import (
    AlreadyExistsError,
    InternalStoreError,
    NotFoundError,
    OperationCancelledError,
    PasswordMismatchError,
)
from app.repositories.base import Store

logger = logging.getLogger(__name__)

# SQLSTATE codes, also used as the normalized classification for SQLite errors.
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
QUERY_CANCELED = "57014"

# Create the account unless it exists, then compare the stored hash against
# the supplied password. Both happen in one statement, so concurrent logins
# for a new email cannot race and the plaintext never leaves crypt().
AUTHENTICATE_OR_CREATE = text(
    """
    INSERT INTO volunteers (email, password)
    VALUES (:email, crypt(:password, gen_salt('bf')))
    ON CONFLICT (email) DO UPDATE SET email = excluded.email
    RETURNING password = crypt(:password, password)
    """
)


def classify_db_error(orig: BaseException | None) -> str | None:
    """Return the SQLSTATE-style code for a driver exception, if known."""
    if orig is None:
        return None

    # psycopg 3 exposes ``sqlstate``, psycopg2 ``pgcode``
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code

    # SQLite only reports constraint failures through names and messages
    error_name = getattr(orig, "sqlite_errorname", "") or ""
    message = str(orig)
    if error_name == "SQLITE_CONSTRAINT_FOREIGNKEY" or "FOREIGN KEY constraint failed" in message:
        return FOREIGN_KEY_VIOLATION
    if error_name in ("SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY") or (
        "UNIQUE constraint failed" in message
    ):
        return UNIQUE_VIOLATION
    return None


def translate_error(
    exc: SQLAlchemyError,
    *,
    not_found: str = "Resource not found",
    already_exists: str = "Resource already exists",
) -> Exception:
    """Map a SQLAlchemy exception onto the domain error taxonomy."""
    if isinstance(exc, NoResultFound):
        return NotFoundError(not_found)

    if isinstance(exc, DBAPIError):
        code = classify_db_error(exc.orig)
        if code == UNIQUE_VIOLATION:
            return AlreadyExistsError(already_exists)
        if code == FOREIGN_KEY_VIOLATION:
            return NotFoundError(not_found)
        if code == QUERY_CANCELED:
            return OperationCancelledError("Operation deadline exceeded")

    return InternalStoreError(f"failed to execute database query: {exc}")


class SQLStore(Store):
    """Store keeping all data in a relational database.

    Every operation runs as one short transaction on its own session.
    PostgreSQL databases must have the pgcrypto extension enabled.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    @contextmanager
    def _transaction(self, ctx: OperationContext, **messages):
        ctx.check()
        session = self._session_factory()
        try:
            with session.begin():
                self._apply_deadline(session, ctx)
                yield session
        except SQLAlchemyError as exc:
            raise translate_error(exc, **messages) from exc
        finally:
            session.close()

    def _apply_deadline(self, session: Session, ctx: OperationContext) -> None:
        remaining = ctx.remaining()
        if remaining is None or self.engine.dialect.name != "postgresql":
            return
        timeout_ms = max(1, int(remaining * 1000))
        session.execute(
            text("SELECT set_config('statement_timeout', :timeout, true)"),
            {"timeout": str(timeout_ms)},
        )

    def authenticate_or_create(
        self, ctx: OperationContext, email: str, password: str
    ) -> None:
        ensure_storable_password(password)

        with self._transaction(ctx) as session:
            authenticated = session.execute(
                AUTHENTICATE_OR_CREATE, {"email": email, "password": password}
            ).scalar_one()

        if not authenticated:
            raise PasswordMismatchError("Incorrect email or password")

    def get_volunteer_by_email(self, ctx: OperationContext, email: str) -> Volunteer:
        with self._transaction(ctx, not_found="Volunteer not found") as session:
            stored_email = session.scalars(
                select(VolunteerModel.email).where(VolunteerModel.email == email)
            ).one()

        return Volunteer(email=stored_email)

    def create_team(self, ctx: OperationContext, team: Team) -> None:
        with self._transaction(
            ctx, already_exists=f"Team with id {team.id} already exists"
        ) as session:
            session.execute(insert(TeamModel).values(id=team.id, name=team.name))

    def get_team_by_id(self, ctx: OperationContext, team_id: str) -> Team:
        with self._transaction(ctx, not_found="Team not found") as session:
            row = session.execute(
                select(TeamModel.id, TeamModel.name).where(TeamModel.id == team_id)
            ).one()

        return Team(id=row.id, name=row.name)

    def add_team_member(self, ctx: OperationContext, team_id: str, email: str) -> None:
        with self._transaction(
            ctx,
            not_found="Team or volunteer not found",
            already_exists="Volunteer is already a team member",
        ) as session:
            session.execute(
                insert(TeamMemberModel).values(team_id=team_id, volunteer_email=email)
            )

    def list_team_members(self, ctx: OperationContext, team_id: str) -> list[Volunteer]:
        with self._transaction(ctx) as session:
            team_exists = session.scalar(select(TeamModel.id).where(TeamModel.id == team_id))
            if team_exists is None:
                raise NotFoundError("Team not found")

            emails = session.scalars(
                select(VolunteerModel.email)
                .join(TeamMemberModel, VolunteerModel.email == TeamMemberModel.volunteer_email)
                .where(TeamMemberModel.team_id == team_id)
            ).all()

        return [Volunteer(email=email) for email in emails]

    def remove_team_member(self, ctx: OperationContext, team_id: str, email: str) -> None:
        with self._transaction(ctx) as session:
            result = session.execute(
                delete(TeamMemberModel).where(
                    TeamMemberModel.team_id == team_id,
                    TeamMemberModel.volunteer_email == email,
                )
            )
            if result.rowcount == 0:
                raise NotFoundError("Team member not found")

    def count_team_members(self, ctx: OperationContext) -> dict[str, int]:
        # Aggregates existing membership rows only: teams without members are absent.
        with self._transaction(ctx) as session:
            rows = session.execute(
                select(TeamMemberModel.team_id, func.count()).group_by(TeamMemberModel.team_id)
            ).all()

        return {team_id: count for team_id, count in rows}

    def healthcheck(self, ctx: OperationContext) -> None:
        with self._transaction(ctx) as session:
            session.execute(text("SELECT 1"))

    def close(self) -> None:
        logger.debug("Disposing database engine")
        self.engine.dispose()
