"""
Owner-scoped, DB-backed stores for every tracked entity.

Every read and write is filtered by the owning user's id. A record owned by
someone else behaves exactly like a record that does not exist, so callers
can never tell the two apart.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Generic, Optional, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from database import get_db
from schemas import PatchModel, UserRecord, field_errors

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)
CreateT = TypeVar("CreateT", bound=BaseModel)
PatchT = TypeVar("PatchT", bound=PatchModel)


# ── Errors ───────────────────────────────────────────────────────────


class StoreError(Exception):
    """Base class for errors the API turns into client responses."""


class ValidationFailed(StoreError):
    """Payload failed schema rules. ``errors`` is ``[{"field", "message"}]``."""

    def __init__(self, errors: list[dict[str, str]]):
        super().__init__("Validation failed")
        self.errors = errors


class NotFoundError(StoreError):
    """Target record does not exist or is not owned by the caller."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message)
        self.message = message


class OperationNotSupported(StoreError):
    """The entity type does not offer this operation."""


def validate(model: type[BaseModel], payload: Any) -> BaseModel:
    """Validate a raw payload (or pass through an already-built model)."""
    if isinstance(payload, model):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailed(field_errors(exc)) from exc


def _to_db(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


# ── Store contract ───────────────────────────────────────────────────


class ScopedStore(Protocol[RecordT, CreateT, PatchT]):
    """CRUD over one entity type, always restricted to one owner."""

    def list(self, owner_id: int) -> list[RecordT]: ...
    def create(self, owner_id: int, payload: CreateT | Mapping[str, Any]) -> RecordT: ...
    def update(self, record_id: int, owner_id: int, patch: PatchT | Mapping[str, Any]) -> RecordT: ...
    def delete(self, record_id: int, owner_id: int) -> None: ...


@dataclass(frozen=True)
class EntitySpec(Generic[RecordT, CreateT, PatchT]):
    """Everything the SQL store needs to know about one entity type.

    Model field names double as column names.
    """

    table: str
    record: type[RecordT]
    create: type[CreateT]
    patch: type[PatchT]
    order_by: str = "id"
    deletable: bool = False


class SqlScopedStore(Generic[RecordT, CreateT, PatchT]):
    """The single SQL implementation of ScopedStore shared by all entities."""

    def __init__(self, spec: EntitySpec[RecordT, CreateT, PatchT]):
        self.spec = spec

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.spec.table!r})"

    def _row_to_record(self, row) -> RecordT:
        return self.spec.record.model_validate({k: row[k] for k in row.keys()})

    def _fetch(self, record_id: int, owner_id: int) -> Optional[RecordT]:
        row = get_db().execute(
            f"SELECT * FROM {self.spec.table} WHERE id = ? AND user_id = ?",
            (record_id, owner_id),
        ).fetchone()
        return self._row_to_record(row) if row else None

    def list(self, owner_id: int) -> list[RecordT]:
        rows = get_db().execute(
            f"SELECT * FROM {self.spec.table} WHERE user_id = ? ORDER BY {self.spec.order_by}",
            (owner_id,),
        ).fetchall()
        return [self._row_to_record(r) for r in rows]

    def create(self, owner_id: int, payload: CreateT | Mapping[str, Any]) -> RecordT:
        data = validate(self.spec.create, payload).model_dump()
        data["user_id"] = owner_id
        columns = list(data)
        db = get_db()
        cur = db.execute(
            f"INSERT INTO {self.spec.table} ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})",
            [_to_db(data[c]) for c in columns],
        )
        db.commit()
        logger.debug("created %s id=%s user_id=%s", self.spec.table, cur.lastrowid, owner_id)
        return self._fetch(cur.lastrowid, owner_id)

    def update(self, record_id: int, owner_id: int, patch: PatchT | Mapping[str, Any]) -> RecordT:
        changes = validate(self.spec.patch, patch).changes()
        if changes:
            db = get_db()
            assignments = ", ".join(f"{c}=?" for c in changes)
            cur = db.execute(
                f"UPDATE {self.spec.table} SET {assignments} WHERE id = ? AND user_id = ?",
                [_to_db(v) for v in changes.values()] + [record_id, owner_id],
            )
            db.commit()
            if cur.rowcount == 0:
                raise NotFoundError()
        record = self._fetch(record_id, owner_id)
        if record is None:
            raise NotFoundError()
        return record

    def delete(self, record_id: int, owner_id: int) -> None:
        if not self.spec.deletable:
            raise OperationNotSupported(f"{self.spec.table} records cannot be deleted")
        db = get_db()
        db.execute(
            f"DELETE FROM {self.spec.table} WHERE id = ? AND user_id = ?",
            (record_id, owner_id),
        )
        db.commit()


class CustomTopicStore(SqlScopedStore[RecordT, CreateT, PatchT]):
    """Custom topics must point at a section owned by the same user."""

    @staticmethod
    def _require_section(owner_id: int, section_id: int) -> None:
        section = get_db().execute(
            "SELECT 1 FROM custom_sections WHERE id = ? AND user_id = ?",
            (section_id, owner_id),
        ).fetchone()
        if section is None:
            raise NotFoundError("Section not found")

    def create(self, owner_id: int, payload: CreateT | Mapping[str, Any]) -> RecordT:
        model = validate(self.spec.create, payload)
        self._require_section(owner_id, model.section_id)
        return super().create(owner_id, model)

    def list_for_section(self, owner_id: int, section_id: int) -> list[RecordT]:
        self._require_section(owner_id, section_id)
        rows = get_db().execute(
            f"SELECT * FROM {self.spec.table} WHERE user_id = ? AND section_id = ? "
            f"ORDER BY {self.spec.order_by}",
            (owner_id, section_id),
        ).fetchall()
        return [self._row_to_record(r) for r in rows]


# ── Users ────────────────────────────────────────────────────────────


class UserStore:
    """Accounts. Password hashes never leave this class except for login checks."""

    @staticmethod
    def get(user_id: int) -> Optional[UserRecord]:
        row = get_db().execute("SELECT id, username FROM users WHERE id = ?", (user_id,)).fetchone()
        return UserRecord(id=row["id"], username=row["username"]) if row else None

    @staticmethod
    def get_by_username(username: str):
        """Return the raw row (including password_hash) or None."""
        return get_db().execute(
            "SELECT id, username, password_hash FROM users WHERE username = ?", (username,),
        ).fetchone()

    @staticmethod
    def create(username: str, password_hash: str) -> UserRecord:
        db = get_db()
        cur = db.execute(
            "INSERT INTO users (username, password_hash, created_at) VALUES (?, ?, ?)",
            (username, password_hash, datetime.now().isoformat()),
        )
        db.commit()
        return UserRecord(id=cur.lastrowid, username=username)
