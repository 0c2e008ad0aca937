"""Permission catalog: (apiPath, method, module) capabilities."""

from typing import Any, Dict, Iterable, List, Optional

from jobportal.application.audit import AuditEnvelope
from jobportal.application.collection_service import CollectionService
from jobportal.application.query_translator import RawQuery, translate
from jobportal.core.system_constants import PERMISSIONS
from jobportal.domain.entities.permission import DISPLAY_FIELDS
from jobportal.domain.exceptions import DuplicateValueError, PermissionNotFoundError
from jobportal.domain.query import FilterClause, FilterOperator, Projection
from jobportal.domain.value_objects import Actor


def _normalize(payload: Dict[str, Any]) -> Dict[str, Any]:
    normalized = dict(payload)
    if "method" in normalized and normalized["method"] is not None:
        normalized["method"] = str(normalized["method"]).upper()
    return normalized


class PermissionService(CollectionService):
    """Permission catalog over the ``permissions`` collection."""

    collection = PERMISSIONS
    kind = "permission"
    not_found_error = PermissionNotFoundError

    async def _ensure_new_capability(self, api_path: str, method: str, exclude_id: Optional[str] = None) -> None:
        clauses = [
            FilterClause("apiPath", FilterOperator.EQ, api_path),
            FilterClause("method", FilterOperator.EQ, method),
        ]
        if exclude_id:
            clauses.append(FilterClause("id", FilterOperator.NE, exclude_id))
        if await self.records.count(clauses) > 0:
            raise DuplicateValueError(
                "apiPath",
                api_path,
                f"Permission with apiPath={api_path}, method={method} already exists",
            )

    async def prepare_create(self, payload: Dict[str, Any], actor: Optional[Actor]) -> Dict[str, Any]:
        payload = _normalize(payload)
        await self._ensure_new_capability(payload.get("apiPath"), payload.get("method"))
        return payload

    async def prepare_update(
        self, current: Dict[str, Any], changes: Dict[str, Any], actor: Optional[Actor]
    ) -> Dict[str, Any]:
        changes = _normalize(changes)
        if "apiPath" in changes or "method" in changes:
            await self._ensure_new_capability(
                changes.get("apiPath", current.get("apiPath")),
                changes.get("method", current.get("method")),
                exclude_id=current["id"],
            )
        return changes

    async def register(
        self,
        batch: Iterable[Dict[str, str]],
        actor: Optional[Actor] = None,
    ) -> List[Dict[str, Any]]:
        """
        Bulk insert catalog entries when the catalog is empty.

        Returns the inserted records, or an empty list when any permission
        already exists, so repeated calls are no-ops.
        """
        if await self.records.count() > 0:
            self._logger.info("Permission catalog already populated")
            return []
        documents = [AuditEnvelope.stamp_create(_normalize(entry), actor) for entry in batch]
        inserted = await self.store.insert_many(self.collection, documents)
        self._logger.info("Permission catalog registered", count=len(inserted))
        return inserted

    async def list(self, raw_query: RawQuery = None) -> List[Dict[str, Any]]:
        """Live permissions matching a filter, in display projection."""
        query = translate(raw_query)
        documents = await self.records.find(query.filter, sort=query.sort)
        projection = query.projection or Projection(fields=frozenset(DISPLAY_FIELDS))
        return await self.present(documents, projection)


__all__ = ["PermissionService"]
