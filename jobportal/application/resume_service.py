"""Resumes submitted by users, with a status history."""

from typing import Any, Dict, List, Optional

from jobportal.application.collection_service import CollectionService, Reference
from jobportal.core.system_constants import COMPANIES, RESUME_STATUS_PENDING, RESUMES, USERS
from jobportal.domain.exceptions import ResumeNotFoundError, ValidationError
from jobportal.domain.query import FilterClause, FilterOperator, SortField
from jobportal.domain.value_objects import Actor, utc_timestamp


def history_entry(status: str, actor: Optional[Actor]) -> Dict[str, Any]:
    return {
        "status": status,
        "updatedAt": utc_timestamp(),
        "updatedBy": actor.stamp() if actor else None,
    }


class ResumeService(CollectionService):
    """
    Resume CRUD.

    A resume belongs to the user who submitted it; every status change is
    appended to ``history``.
    """

    collection = RESUMES
    kind = "resume"
    not_found_error = ResumeNotFoundError
    references = {
        "companyId": Reference(COMPANIES, ("id", "name", "logo")),
        "userId": Reference(USERS, ("id", "name", "email")),
    }

    async def prepare_create(self, payload: Dict[str, Any], actor: Optional[Actor]) -> Dict[str, Any]:
        if actor is None:
            raise ValidationError("A resume must be submitted by a user")
        payload["email"] = actor.email
        payload["userId"] = actor.id
        payload["status"] = RESUME_STATUS_PENDING
        payload["history"] = [history_entry(RESUME_STATUS_PENDING, actor)]
        return payload

    async def prepare_update(
        self, current: Dict[str, Any], changes: Dict[str, Any], actor: Optional[Actor]
    ) -> Dict[str, Any]:
        # Ownership fields are fixed at submission
        for fixed in ("email", "userId", "history"):
            changes.pop(fixed, None)
        status = changes.get("status")
        if status is not None and status != current.get("status"):
            changes["history"] = [*(current.get("history") or []), history_entry(status, actor)]
        return changes

    async def find_by_user(self, actor: Actor) -> List[Dict[str, Any]]:
        """The caller's resumes, newest first, with the company expanded."""
        documents = await self.records.find(
            [FilterClause("userId", FilterOperator.EQ, actor.id)],
            sort=[SortField("createdAt", descending=True)],
        )
        return await self.present(documents, population=["companyId"])


__all__ = ["ResumeService", "history_entry"]
