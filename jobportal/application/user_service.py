"""Users: admin CRUD, self-service registration and session token storage."""

from typing import Any, Dict, Optional

import structlog

from jobportal.application.collection_service import CollectionService, Reference, populate
from jobportal.application.company_service import CompanyService
from jobportal.application.role_service import RoleResolver
from jobportal.core.system_constants import COMPANIES, HR_ROLE, ROLES, ROOT_ADMIN_EMAIL, USER_ROLE, USERS
from jobportal.domain.exceptions import (
    ProtectedResourceError,
    RoleNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from jobportal.domain.interfaces import IDocumentStore
from jobportal.domain.query import FilterClause, FilterOperator
from jobportal.domain.value_objects import Actor, CompanySnapshot, parse_record_id
from jobportal.utils.security import PasswordManager, get_password_manager

logger = structlog.get_logger(__name__)

ROLE_REFERENCE = Reference(ROLES, ("id", "name"))


class UserService(CollectionService):
    """
    User accounts.

    Passwords are stored as bcrypt hashes and, like refresh tokens, are
    never returned by listing or lookup operations.
    """

    collection = USERS
    kind = "user"
    not_found_error = UserNotFoundError
    references = {
        "role": ROLE_REFERENCE,
        "company": Reference(COMPANIES, ("id", "name", "logo")),
    }
    hidden_fields = frozenset({"password", "refreshToken"})
    default_population = ("role",)

    def __init__(
        self,
        store: IDocumentStore,
        default_page_size: int = 10,
        password_manager: Optional[PasswordManager] = None,
        company_service: Optional[CompanyService] = None,
    ):
        super().__init__(store, default_page_size)
        self.password_manager = password_manager or get_password_manager()
        self.role_resolver = RoleResolver(store)
        self.company_service = company_service or CompanyService(store, default_page_size)

    async def _role_reference(self, role_id: Any) -> str:
        normalized = parse_record_id(role_id, kind="role")
        await self.role_resolver.roles.get(normalized)
        return normalized

    async def _role_by_name(self, name: str) -> str:
        role = await self.role_resolver.find_by_name(name)
        if role is None:
            raise RoleNotFoundError(f"Role {name} does not exist")
        return role["id"]

    def hash_password(self, password: str) -> str:
        return self.password_manager.hash_password(password)

    def is_valid_password(self, password: str, hashed_password: Optional[str]) -> bool:
        return self.password_manager.verify_password(password, hashed_password)

    async def prepare_create(self, payload: Dict[str, Any], actor: Optional[Actor]) -> Dict[str, Any]:
        if not payload.get("password"):
            raise ValidationError("password is required")
        payload["password"] = self.hash_password(payload["password"])
        if payload.get("role") is not None:
            payload["role"] = await self._role_reference(payload["role"])
        return payload

    async def prepare_update(
        self, current: Dict[str, Any], changes: Dict[str, Any], actor: Optional[Actor]
    ) -> Dict[str, Any]:
        changes.pop("refreshToken", None)
        if changes.get("password"):
            changes["password"] = self.hash_password(changes["password"])
        else:
            changes.pop("password", None)
        if changes.get("role") is not None:
            changes["role"] = await self._role_reference(changes["role"])
        if current.get("email") == ROOT_ADMIN_EMAIL and changes.get("email", ROOT_ADMIN_EMAIL) != ROOT_ADMIN_EMAIL:
            raise ProtectedResourceError(f"Cannot change the email of {ROOT_ADMIN_EMAIL}")
        return changes

    async def check_removable(self, document: Dict[str, Any]) -> None:
        if document.get("email") == ROOT_ADMIN_EMAIL:
            raise ProtectedResourceError(f"Cannot delete the {ROOT_ADMIN_EMAIL} account")

    async def register(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Self-service registration with the default role.

        Raises:
            DuplicateValueError: If the email is taken
            RoleNotFoundError: If the default role has not been seeded
        """
        payload = {**payload, "role": await self._role_by_name(USER_ROLE)}
        payload.pop("company", None)
        return await self.create(payload, actor=None)

    async def register_recruiter(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Register an HR user together with the company it represents.

        Three writes without a transaction: the user, then the company
        created by that user, then the user's company snapshot. If a later
        write fails the user (and company, if created) are soft-deleted and
        the error is re-raised.

        Raises:
            RoleNotFoundError: If no HR role exists yet
            DuplicateValueError: If the email is taken
        """
        company_payload = dict(payload.get("company") or {})
        if not company_payload.get("name"):
            raise ValidationError("company.name is required")

        user_payload = {k: v for k, v in payload.items() if k != "company"}
        user_payload["role"] = await self._role_by_name(HR_ROLE)
        created = await self.create(user_payload, actor=None)

        actor = Actor(id=created["id"], email=user_payload["email"])
        company_id = None
        try:
            company = await self.company_service.create(company_payload, actor)
            company_id = company["id"]
            snapshot = CompanySnapshot(id=company_id, name=company_payload["name"])
            await self._update(created["id"], {"company": snapshot.to_document()})
        except Exception:
            logger.error(
                "Recruiter registration failed, rolling back",
                user_id=created["id"],
                company_id=company_id,
            )
            if company_id:
                await self.company_service.records.soft_delete(company_id)
            await self.records.soft_delete(created["id"])
            raise

        logger.info("Recruiter registered", user_id=created["id"], company_id=company_id)
        return {**created, "company": {"id": company_id, "name": company_payload["name"]}}

    async def _with_role(self, document: Dict[str, Any]) -> Dict[str, Any]:
        await populate(self.store, [document], ["role"], {"role": ROLE_REFERENCE})
        return document

    async def find_one_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        """Live user by email including its password hash, role as ``{id, name}``."""
        documents = await self.records.find([FilterClause("email", FilterOperator.EQ, username)], limit=1)
        if not documents:
            return None
        return await self._with_role(documents[0])

    async def find_user_by_token(self, refresh_token: str) -> Optional[Dict[str, Any]]:
        if not refresh_token:
            return None
        documents = await self.records.find(
            [FilterClause("refreshToken", FilterOperator.EQ, refresh_token)], limit=1
        )
        if not documents:
            return None
        return await self._with_role(documents[0])

    async def update_user_token(self, refresh_token: Optional[str], user_id: str) -> int:
        return await self.store.update_one(self.collection, user_id, {"refreshToken": refresh_token})

    async def find_identity(self, user_id: Any) -> Optional[Dict[str, Any]]:
        """Live user without secrets, role as ``{id, name}``; None when gone."""
        document = await self.records.find_one(user_id)
        if document is None:
            return None
        presented = await self.present([document], population=["role"])
        return presented[0]


__all__ = ["UserService"]
