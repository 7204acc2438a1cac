"""Database transactions with savepoint support over a DB-API connection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional


class IsolationLevel(IntEnum):
    """Transaction isolation level."""

    READ_UNCOMMITTED = 0
    READ_COMMITTED = 1
    REPEATABLE_READ = 2
    SERIALIZABLE = 3

    def to_sql(self) -> str:
        """Return the SQL spelling of this isolation level."""
        return self.name.replace("_", " ")


@dataclass(frozen=True)
class TxOptions:
    """Options for starting a transaction; timeout is in seconds."""

    isolation: IsolationLevel = IsolationLevel.READ_UNCOMMITTED
    read_only: bool = False
    deferrable: bool = False
    timeout: float = 0.0


class TransactionError(Exception):
    """Raised when a transaction operation cannot be carried out."""


class Tx:
    """A transaction on a DB-API connection, tracking its savepoints.

    Used as a context manager it commits on normal exit and rolls back
    when the block raises.
    """

    def __init__(self, connection: Any) -> None:
        self._connection = connection
        self._savepoints: set[str] = set()

    @property
    def connection(self) -> Any:
        """The underlying connection."""
        return self._connection

    @property
    def savepoints(self) -> frozenset[str]:
        """Names of the savepoints currently held."""
        return frozenset(self._savepoints)

    def _require_connection(self) -> Any:
        if self._connection is None:
            raise TransactionError("transaction is nil")
        return self._connection

    def _execute(self, query: str) -> None:
        cursor = self._require_connection().cursor()
        try:
            cursor.execute(query)
        finally:
            cursor.close()

    def _require_savepoint(self, name: str) -> None:
        if name not in self._savepoints:
            raise TransactionError(f"savepoint {name} does not exist")

    def commit(self) -> None:
        """Commit the transaction."""
        self._require_connection().commit()

    def rollback(self) -> None:
        """Roll the transaction back."""
        self._require_connection().rollback()

    def savepoint(self, name: str) -> None:
        """Create a savepoint with the given name."""
        self._require_connection()
        try:
            self._execute(f"SAVEPOINT {name}")
        except Exception as exc:
            raise TransactionError(f"failed to create savepoint {name}: {exc}") from exc
        self._savepoints.add(name)

    def rollback_to(self, name: str) -> None:
        """Roll back to a savepoint created earlier."""
        self._require_connection()
        self._require_savepoint(name)
        try:
            self._execute(f"ROLLBACK TO SAVEPOINT {name}")
        except Exception as exc:
            raise TransactionError(
                f"failed to rollback to savepoint {name}: {exc}"
            ) from exc

    def release_savepoint(self, name: str) -> None:
        """Release a savepoint created earlier."""
        self._require_connection()
        self._require_savepoint(name)
        try:
            self._execute(f"RELEASE SAVEPOINT {name}")
        except Exception as exc:
            raise TransactionError(f"failed to release savepoint {name}: {exc}") from exc
        self._savepoints.discard(name)

    def __enter__(self) -> Tx:
        self._require_connection()
        return self

    def __exit__(self, exc_type: Optional[type], exc: Optional[BaseException], tb: Any) -> bool:
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        return False