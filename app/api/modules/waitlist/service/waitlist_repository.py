import logging
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.api.core.exceptions import ConflictError, PersistenceError
from app.api.modules.waitlist.models.waitlist_model import Waitlist

logger = logging.getLogger("app")

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    Tell a unique-constraint violation apart from other integrity errors.

    asyncpg and psycopg expose the SQLSTATE on the driver exception; SQLite only
    reports it in the message ("UNIQUE constraint failed: waitlist.email").

    Args:
        exc: The IntegrityError raised by SQLAlchemy.

    Returns:
        True if the datastore refused a duplicate value.
    """
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == UNIQUE_VIOLATION
    return "unique constraint" in str(orig or exc).lower()


class WaitlistCRUD:
    """CRUD operations for the Waitlist model."""

    @staticmethod
    async def create(db: AsyncSession, email: str) -> Waitlist:
        """
        Insert a waitlist entry and commit it.

        The caller is expected to pass an already validated, lowercased email.
        Uniqueness is left to the datastore; no lookup precedes the insert.

        Args:
            db: Async database session
            email: Normalized email address

        Returns:
            Waitlist: The persisted entry

        Raises:
            ConflictError: If the email is already registered
            PersistenceError: If the datastore fails for any other reason
        """
        entry = Waitlist(email=email, created_at=datetime.now(timezone.utc))

        try:
            db.add(entry)
            await db.commit()
            await db.refresh(entry)
        except IntegrityError as e:
            await db.rollback()
            if is_unique_violation(e):
                raise ConflictError() from e
            raise PersistenceError(f"Integrity error inserting {email}: {e.orig}") from e
        except SQLAlchemyError as e:
            await db.rollback()
            raise PersistenceError(f"Failed to insert {email}: {e}") from e
        except Exception as e:
            # driver errors not wrapped by SQLAlchemy
            await db.rollback()
            raise PersistenceError(f"Datastore failure inserting {email}: {e!r}") from e

        logger.info("Created waitlist entry: id=%s, email=%s", entry.id, entry.email)

        return entry

    @staticmethod
    async def count_by_email(db: AsyncSession, email: str) -> int:
        """
        Count entries for an email address.

        Args:
            db: Database session
            email: Normalized email address

        Returns:
            Number of stored rows, 0 or 1 while the unique constraint holds
        """
        result = await db.execute(
            select(func.count()).select_from(Waitlist).where(Waitlist.email == email)
        )
        return result.scalar_one()
