"""
Generic audited CRUD over one collection.

Every collection service reads through the soft-delete policy, stamps writes
through the audit envelope, paginates listings and expands references on
request with a second keyed lookup against the referenced collection.
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple, Type

import structlog

from jobportal.application.audit import AuditEnvelope
from jobportal.application.pagination import effective_limit, page_envelope, page_offset, paginate
from jobportal.application.query_translator import RawQuery, translate
from jobportal.application.soft_delete import SoftDeletePolicy
from jobportal.core.system_constants import UNIQUE_FIELDS
from jobportal.database.error_handling import IntegrityViolationError
from jobportal.domain.exceptions import DuplicateValueError, NotFoundError, ValidationError
from jobportal.domain.interfaces import IDocumentStore
from jobportal.domain.query import FilterClause, FilterOperator, Projection, QueryDescriptor
from jobportal.domain.value_objects import Actor, is_valid_record_id

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Reference:
    """A populatable field: which collection it points at and what to expose."""

    collection: str
    fields: Tuple[str, ...]


def _reference_id(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        value = value.get("id")
    if isinstance(value, str) and is_valid_record_id(value):
        return value
    return None


async def populate(
    store: IDocumentStore,
    documents: List[Dict[str, Any]],
    names: Sequence[str],
    references: Dict[str, Reference],
) -> None:
    """
    Expand reference fields in place.

    Single references become the referenced record restricted to the
    reference fields; lists keep their order and drop ids that no longer
    resolve. Soft-deleted targets still resolve by id.
    """
    for name in names:
        reference = references.get(name)
        if reference is None:
            logger.warning("Ignoring unknown populate field", field=name)
            continue

        wanted: List[str] = []
        for document in documents:
            value = document.get(name)
            values = value if isinstance(value, list) else [value]
            wanted.extend(i for i in map(_reference_id, values) if i)
        if not wanted:
            continue

        found = await store.find_by_ids(reference.collection, wanted)
        by_id = {
            target["id"]: {k: target.get(k) for k in reference.fields}
            for target in found
        }
        for document in documents:
            if name not in document:
                continue
            value = document[name]
            if isinstance(value, list):
                document[name] = [by_id[i] for i in map(_reference_id, value) if i in by_id]
            else:
                ref_id = _reference_id(value)
                if ref_id in by_id:
                    document[name] = by_id[ref_id]


class CollectionService:
    """Audited CRUD for one collection."""

    collection: str = ""
    kind: str = "record"
    not_found_error: Type[NotFoundError] = NotFoundError
    references: Dict[str, Reference] = {}
    hidden_fields: FrozenSet[str] = frozenset()
    default_population: Tuple[str, ...] = ()

    def __init__(self, store: IDocumentStore, default_page_size: int = 10):
        self.store = store
        self.default_page_size = default_page_size
        self.records = SoftDeletePolicy(
            store, self.collection, kind=self.kind, not_found=self.not_found_error
        )
        self._logger = structlog.get_logger(__name__).bind(collection=self.collection)

    # Presentation

    def _projection(self, requested: Optional[Projection]) -> Optional[Projection]:
        """Client projection with the hidden fields always removed."""
        if requested is None:
            return Projection(fields=self.hidden_fields, exclude=True) if self.hidden_fields else None
        for hidden in self.hidden_fields:
            requested = requested.without(hidden)
        return requested

    async def present(
        self,
        documents: List[Dict[str, Any]],
        projection: Optional[Projection] = None,
        population: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        # Populate first so dot paths such as ``role.name`` trim the expanded record
        if population:
            await populate(self.store, documents, population, self.references)
        effective = self._projection(projection)
        return [effective.apply(doc) if effective else doc for doc in documents]

    def _check_searchable(self, query: QueryDescriptor) -> None:
        """Hidden fields may not be filtered or sorted on."""
        names = [clause.field for clause in query.filter]
        names.extend(sort_field.field for sort_field in query.sort or ())
        for name in names:
            if name.split(".", 1)[0] in self.hidden_fields:
                raise ValidationError(f"Field {name!r} cannot be queried")

    # Uniqueness

    async def _ensure_unique(self, payload: Dict[str, Any], exclude_id: Optional[str] = None) -> None:
        """Fast user-facing duplicate check; the store index is the real guard."""
        for field_name in UNIQUE_FIELDS.get(self.collection, ()):
            if payload.get(field_name) is None:
                continue
            clauses = [FilterClause(field_name, FilterOperator.EQ, payload[field_name])]
            if exclude_id:
                clauses.append(FilterClause("id", FilterOperator.NE, exclude_id))
            if await self.records.count(clauses) > 0:
                raise DuplicateValueError(field_name, str(payload[field_name]))

    def _duplicate(self, error: IntegrityViolationError, payload: Dict[str, Any]) -> DuplicateValueError:
        field_name = error.field or "value"
        return DuplicateValueError(field_name, str(payload.get(field_name, "")))

    async def _insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return await self.store.insert_one(self.collection, document)
        except IntegrityViolationError as e:
            raise self._duplicate(e, document)

    async def _update(self, record_id: str, changes: Dict[str, Any]) -> int:
        try:
            return await self.store.update_one(self.collection, record_id, changes)
        except IntegrityViolationError as e:
            raise self._duplicate(e, changes)

    # Hooks

    async def prepare_create(self, payload: Dict[str, Any], actor: Optional[Actor]) -> Dict[str, Any]:
        return payload

    async def prepare_update(
        self, current: Dict[str, Any], changes: Dict[str, Any], actor: Optional[Actor]
    ) -> Dict[str, Any]:
        return changes

    async def check_removable(self, document: Dict[str, Any]) -> None:
        pass

    # Operations

    async def create(self, payload: Dict[str, Any], actor: Optional[Actor]) -> Dict[str, Any]:
        """
        Create a record stamped with ``createdBy``.

        Returns:
            ``{"id", "createdAt"}`` of the stored record
        """
        document = AuditEnvelope.stamp_create(payload, actor)
        document = await self.prepare_create(document, actor)
        await self._ensure_unique(document)
        stored = await self._insert(document)
        self._logger.info("Record created", id=stored["id"])
        return {"id": stored["id"], "createdAt": stored["createdAt"]}

    async def find_all(
        self,
        current: Optional[int],
        page_size: Optional[int],
        raw_query: RawQuery = None,
    ) -> Dict[str, Any]:
        """
        Paginated listing of live records.

        Raises:
            ValidationError: If ``current`` is below 1, the query is malformed
                or it filters or sorts on a hidden field
        """
        query = translate(raw_query)
        self._check_searchable(query)
        page = current if current is not None else 1
        if page_offset(page, effective_limit(page_size, self.default_page_size)) < 0:
            raise ValidationError("current must be a page number of at least 1")

        # Count and fetch are separate passes over the same filter
        total = await self.records.count(query.filter)
        window = paginate(page, page_size, total, self.default_page_size)
        documents = await self.records.find(
            query.filter,
            sort=query.sort,
            skip=window.offset,
            limit=window.effective_limit,
        )
        result = await self.present(documents, query.projection, query.population)
        return page_envelope(current, page_size, window, total, result)

    async def find_one(self, record_id: Any) -> Dict[str, Any]:
        document = await self.records.get(record_id)
        presented = await self.present([document], population=self.default_population)
        return presented[0]

    async def update(self, record_id: Any, payload: Dict[str, Any], actor: Optional[Actor]) -> Dict[str, Any]:
        """Apply changes to a live record and stamp ``updatedBy``."""
        current = await self.records.get(record_id)
        changes = AuditEnvelope.stamp_update(payload, actor)
        changes = await self.prepare_update(current, changes, actor)
        await self._ensure_unique(changes, exclude_id=current["id"])
        matched = await self._update(current["id"], changes)
        self._logger.info("Record updated", id=current["id"], fields=sorted(changes))
        return {"updated": matched}

    async def remove(self, record_id: Any, actor: Optional[Actor]) -> Dict[str, int]:
        document = await self.records.get_including_deleted(record_id)
        await self.check_removable(document)
        return await self.records.remove(document["id"], actor)


__all__ = ["CollectionService", "Reference", "populate"]
