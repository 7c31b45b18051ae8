"""
Name: PostgreSQL User Repository

Responsibilities:
  - Persist and load user records
  - Map database rows into UserRecord entities
  - Translate unique-constraint violations into UniqueConstraintError

Collaborators:
  - infrastructure.db.pool: AsyncConnectionPool singleton
  - domain.repositories.UserRepository: contract implemented here

Constraints:
  - Table users with constraints uq_users_username / uq_users_email
    (see alembic/versions/001_create_users.py)
  - Any other failure surfaces as DatabaseError
"""

from typing import Callable, List, Optional
from uuid import UUID

from psycopg import errors as pg_errors
from psycopg_pool import AsyncConnectionPool

from ...domain.entities import UserRecord, UserRole
from ...exceptions import DatabaseError, UniqueConstraintError
from ...logger import logger

_COLUMNS = (
    "id, username, email, credential_secret, roles, first_name, last_name, "
    "is_active, created_at, updated_at"
)

# R: Constraint name -> domain field
_UNIQUE_CONSTRAINT_FIELDS = {
    "uq_users_username": "username",
    "uq_users_email": "email",
}


def _default_pool() -> AsyncConnectionPool:
    from ..db.pool import get_pool

    return get_pool()


def _row_to_user(row) -> UserRecord:
    try:
        roles = tuple(UserRole(role) for role in (row[4] or ()))
    except ValueError as exc:
        raise DatabaseError(f"Invalid user role in database: {row[4]}") from exc
    if not roles:
        raise DatabaseError(f"User {row[0]} has no roles")

    return UserRecord(
        id=row[0],
        username=row[1],
        email=row[2],
        credential_secret=row[3],
        roles=roles,
        first_name=row[5],
        last_name=row[6],
        is_active=row[7],
        created_at=row[8],
        updated_at=row[9],
    )


def _unique_violation(exc: pg_errors.UniqueViolation) -> UniqueConstraintError:
    constraint = getattr(exc.diag, "constraint_name", None) or ""
    field = _UNIQUE_CONSTRAINT_FIELDS.get(constraint)
    if field is None:
        # R: Fall back to the column named in the server message
        field = "email" if "email" in str(exc) else "username"
    return UniqueConstraintError(field, original_error=exc)


class PostgresUserRepository:
    """R: PostgreSQL implementation of UserRepository."""

    def __init__(self, pool_provider: Callable[[], AsyncConnectionPool] | None = None):
        self._pool_provider = pool_provider or _default_pool

    async def _fetch_one(self, sql: str, params: tuple, action: str):
        try:
            pool = self._pool_provider()
            async with pool.connection() as conn:
                cur = await conn.execute(sql, params)
                return await cur.fetchone()
        except pg_errors.UniqueViolation as exc:
            logger.info(
                "PostgresUserRepository: unique violation",
                extra={"action": action},
            )
            raise _unique_violation(exc) from exc
        except Exception as e:
            logger.error(f"PostgresUserRepository: {action} failed: {e}")
            raise DatabaseError(f"User {action} failed: {e}", original_error=e) from e

    async def get_user(
        self, user_id: UUID, *, active_only: bool = False
    ) -> Optional[UserRecord]:
        """R: Fetch user by ID, optionally only if active."""
        sql = f"SELECT {_COLUMNS} FROM users WHERE id = %s"
        if active_only:
            sql += " AND is_active = TRUE"
        row = await self._fetch_one(sql, (user_id,), "lookup")
        return _row_to_user(row) if row else None

    async def get_user_by_username(self, username: str) -> Optional[UserRecord]:
        row = await self._fetch_one(
            f"SELECT {_COLUMNS} FROM users WHERE username = %s",
            (username,),
            "lookup",
        )
        return _row_to_user(row) if row else None

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        row = await self._fetch_one(
            f"SELECT {_COLUMNS} FROM users WHERE email = %s",
            (email,),
            "lookup",
        )
        return _row_to_user(row) if row else None

    async def find_user_by_username_or_email(
        self, username: str, email: str
    ) -> Optional[UserRecord]:
        """R: Any user matching either field; username matches first."""
        row = await self._fetch_one(
            f"""
            SELECT {_COLUMNS}
            FROM users
            WHERE username = %s OR email = %s
            ORDER BY (username = %s) DESC
            LIMIT 1
            """,
            (username, email, username),
            "lookup",
        )
        return _row_to_user(row) if row else None

    async def list_users(self) -> List[UserRecord]:
        """R: Fetch all users (oldest first)."""
        try:
            pool = self._pool_provider()
            async with pool.connection() as conn:
                cur = await conn.execute(
                    f"SELECT {_COLUMNS} FROM users ORDER BY created_at ASC"
                )
                rows = await cur.fetchall()
        except Exception as e:
            logger.error(f"PostgresUserRepository: List users failed: {e}")
            raise DatabaseError(f"User listing failed: {e}", original_error=e) from e

        return [_row_to_user(row) for row in rows]

    async def create_user(self, user: UserRecord) -> UserRecord:
        """R: Insert a new user and return the stored row."""
        row = await self._fetch_one(
            f"""
            INSERT INTO users (
                id, username, email, credential_secret, roles,
                first_name, last_name, is_active, created_at, updated_at
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {_COLUMNS}
            """,
            (
                user.id,
                user.username,
                user.email,
                user.credential_secret,
                [role.value for role in user.roles],
                user.first_name,
                user.last_name,
                user.is_active,
                user.created_at,
                user.updated_at,
            ),
            "creation",
        )
        if not row:
            raise DatabaseError("User creation failed: no row returned")
        return _row_to_user(row)

    async def update_user(self, user: UserRecord) -> Optional[UserRecord]:
        """R: Overwrite mutable columns; id, roles and created_at stay."""
        row = await self._fetch_one(
            f"""
            UPDATE users
            SET username = %s,
                email = %s,
                credential_secret = %s,
                first_name = %s,
                last_name = %s,
                is_active = %s,
                updated_at = %s
            WHERE id = %s
            RETURNING {_COLUMNS}
            """,
            (
                user.username,
                user.email,
                user.credential_secret,
                user.first_name,
                user.last_name,
                user.is_active,
                user.updated_at,
                user.id,
            ),
            "update",
        )
        return _row_to_user(row) if row else None

    async def delete_user(self, user_id: UUID) -> bool:
        try:
            pool = self._pool_provider()
            async with pool.connection() as conn:
                cur = await conn.execute("DELETE FROM users WHERE id = %s", (user_id,))
                return cur.rowcount > 0
        except Exception as e:
            logger.error(f"PostgresUserRepository: Delete failed: {e}")
            raise DatabaseError(f"User deletion failed: {e}", original_error=e) from e

    async def ping(self) -> bool:
        try:
            pool = self._pool_provider()
            async with pool.connection() as conn:
                await conn.execute("SELECT 1")
            return True
        except Exception as e:
            logger.warning("PostgresUserRepository: ping failed", extra={"error": str(e)})
            return False
