"""PostgreSQL implementation of IDocumentStore over a single JSONB document table."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

import structlog
from sqlalchemy import Numeric, and_, case, cast, false, func, not_, or_
from sqlmodel import select

from jobportal.database.error_handling import store_operation
from jobportal.database.sqlmodel_engine import SQLModelDatabaseManager
from jobportal.domain.interfaces import IDocumentStore
from jobportal.domain.query import FilterClause, FilterOperator, SortField, TextPattern
from jobportal.domain.value_objects import new_record_id, utc_timestamp
from jobportal.models.document import DocumentTable

logger = structlog.get_logger(__name__)


def _nested(path: Sequence[str], value: Any) -> Dict[str, Any]:
    """Build ``{"a": {"b": value}}`` for JSONB containment."""
    document: Any = value
    for key in reversed(path):
        document = {key: document}
    return document


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _equals(path: Sequence[str], value: Any):
    if value is None:
        # Missing keys and JSON null both read as SQL NULL
        return DocumentTable.body[tuple(path)].astext.is_(None)
    return DocumentTable.body.contains(_nested(path, value))


def compile_clause(clause: FilterClause):
    """Compile one tagged clause into a SQLAlchemy boolean expression."""
    path = clause.path
    element = DocumentTable.body[tuple(path)]
    op = clause.operator
    value = clause.value

    if op is FilterOperator.EQ:
        return _equals(path, value)
    if op is FilterOperator.NE:
        return not_(_equals(path, value))
    if op is FilterOperator.IN:
        if not value:
            return false()
        return or_(*[_equals(path, candidate) for candidate in value])
    if op is FilterOperator.REGEX:
        pattern: TextPattern = value
        like = _escape_like(pattern.text) + "%"
        if not pattern.anchored:
            like = "%" + like
        text_value = element.astext
        matcher = text_value.ilike(like, escape="\\") if pattern.case_insensitive else text_value.like(like, escape="\\")
        return and_(func.jsonb_typeof(element) == "string", matcher)

    if _is_number(value):
        # Cast only JSON numbers; other types never compare
        operand = case(
            (func.jsonb_typeof(element) == "number", cast(element.astext, Numeric)),
            else_=None,
        )
    elif isinstance(value, str):
        operand = case(
            (func.jsonb_typeof(element) == "string", element.astext),
            else_=None,
        )
    else:
        return false()

    if op is FilterOperator.GT:
        return operand > value
    if op is FilterOperator.GTE:
        return operand >= value
    if op is FilterOperator.LT:
        return operand < value
    if op is FilterOperator.LTE:
        return operand <= value
    raise ValueError(f"Unsupported operator: {op}")


class PostgresDocumentStore(IDocumentStore):
    """Document store backed by the ``documents`` JSONB table."""

    def __init__(self, db_manager: SQLModelDatabaseManager):
        self.db_manager = db_manager

    async def check_health(self) -> Dict[str, Any]:
        health = await self.db_manager.health_check()
        return {"service": "PostgresDocumentStore", **health}

    def _prepare(self, document: Dict[str, Any]) -> Dict[str, Any]:
        body = dict(document)
        body.setdefault("id", new_record_id())
        now = utc_timestamp()
        body.setdefault("createdAt", now)
        body.setdefault("updatedAt", now)
        return body

    @store_operation("insert_one")
    async def insert_one(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        body = self._prepare(document)
        async with self.db_manager.get_session() as session:
            session.add(DocumentTable(id=body["id"], collection=collection, body=body))
            await session.flush()
        return body

    @store_operation("insert_many")
    async def insert_many(self, collection: str, documents: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        bodies = [self._prepare(document) for document in documents]
        async with self.db_manager.get_session() as session:
            session.add_all(
                [DocumentTable(id=body["id"], collection=collection, body=body) for body in bodies]
            )
            await session.flush()
        return bodies

    def _conditions(self, collection: str, clauses: Sequence[FilterClause]) -> list:
        return [DocumentTable.collection == collection, *[compile_clause(c) for c in clauses]]

    @store_operation("find")
    async def find(
        self,
        collection: str,
        clauses: Sequence[FilterClause] = (),
        *,
        sort: Optional[Sequence[SortField]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        stmt = select(DocumentTable).where(*self._conditions(collection, clauses))
        ordering = []
        for sort_field in sort or []:
            element = DocumentTable.body[tuple(sort_field.field.split("."))]
            ordering.append(element.desc() if sort_field.descending else element.asc())
        # Deterministic paging when no sort or ties
        ordering.append(DocumentTable.body["createdAt"].astext.asc())
        ordering.append(DocumentTable.id.asc())
        stmt = stmt.order_by(*ordering).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self.db_manager.get_session() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()
        return [dict(row.body) for row in rows]

    @store_operation("count")
    async def count(self, collection: str, clauses: Sequence[FilterClause] = ()) -> int:
        stmt = (
            select(func.count())
            .select_from(DocumentTable)
            .where(*self._conditions(collection, clauses))
        )
        async with self.db_manager.get_session() as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    @store_operation("find_by_ids")
    async def find_by_ids(self, collection: str, ids: Sequence[str]) -> List[Dict[str, Any]]:
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return []
        stmt = select(DocumentTable).where(
            DocumentTable.collection == collection,
            DocumentTable.id.in_(unique_ids),
        )
        async with self.db_manager.get_session() as session:
            result = await session.execute(stmt)
            by_id = {row.id: dict(row.body) for row in result.scalars().all()}
        return [by_id[i] for i in unique_ids if i in by_id]

    @store_operation("update_one")
    async def update_one(self, collection: str, record_id: str, changes: Dict[str, Any]) -> int:
        async with self.db_manager.get_session() as session:
            stmt = (
                select(DocumentTable)
                .where(DocumentTable.collection == collection, DocumentTable.id == record_id)
                .with_for_update()
            )
            result = await session.execute(stmt)
            row = result.scalars().first()
            if row is None:
                logger.debug("Update target missing", collection=collection, id=record_id)
                return 0
            row.body = {**row.body, **changes, "id": row.id, "updatedAt": utc_timestamp()}
            await session.flush()
        return 1


__all__ = ["PostgresDocumentStore", "compile_clause"]
