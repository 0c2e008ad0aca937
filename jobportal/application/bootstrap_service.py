"""
Bootstrap Service

Seeds the store on first boot:
- Inserts the permission catalog
- Inserts the ADMIN (every permission) and USER (none) roles
- Inserts the initial accounts

Seeding only runs against an empty store; when any of the three
collections already holds records it is a no-op.
"""

from typing import Any, Dict, List

import structlog

from jobportal.core.system_constants import (
    ADMIN_ROLE,
    INIT_PERMISSIONS,
    PERMISSIONS,
    ROLES,
    ROOT_ADMIN_EMAIL,
    USER_ROLE,
    USERS,
)
from jobportal.domain.interfaces import IDocumentStore
from jobportal.utils.security import PasswordManager

logger = structlog.get_logger(__name__)


def initial_users(password_hash: str, admin_role_id: str, user_role_id: str) -> List[Dict[str, Any]]:
    return [
        {
            "name": "Luffy",
            "email": ROOT_ADMIN_EMAIL,
            "password": password_hash,
            "age": 20,
            "gender": "MALE",
            "address": "VietNam",
            "role": admin_role_id,
        },
        {
            "name": "Zoro",
            "email": "zoro@gmail.com",
            "password": password_hash,
            "age": 24,
            "gender": "MALE",
            "address": "VietNam",
            "role": admin_role_id,
        },
        {
            "name": "Black Beard",
            "email": "rauden@gmail.com",
            "password": password_hash,
            "age": 55,
            "gender": "MALE",
            "address": "VietNam",
            "role": user_role_id,
        },
    ]


class BootstrapService:
    """Handles first-run seeding of permissions, roles and users"""

    def __init__(self, store: IDocumentStore, password_manager: PasswordManager, init_password: str):
        self.store = store
        self.password_manager = password_manager
        self.init_password = init_password

    async def _count(self, collection: str) -> int:
        # Counts include soft-deleted records: a collection that was ever seeded stays seeded
        return await self.store.count(collection)

    async def seed(self) -> Dict[str, int]:
        """
        Seed an empty store.

        Returns:
            Number of records inserted per collection
        """
        inserted = {PERMISSIONS: 0, ROLES: 0, USERS: 0}

        count_permissions = await self._count(PERMISSIONS)
        count_roles = await self._count(ROLES)
        count_users = await self._count(USERS)

        if count_permissions or count_roles or count_users:
            logger.info(
                "Sample data already initialized",
                permissions=count_permissions,
                roles=count_roles,
                users=count_users,
            )
            return inserted

        documents = [dict(entry) for entry in INIT_PERMISSIONS]
        permissions = await self.store.insert_many(PERMISSIONS, documents)
        inserted[PERMISSIONS] = len(permissions)
        logger.info("Seeded permissions", count=len(permissions))

        roles = [
            {
                "name": ADMIN_ROLE,
                "description": "Admin has full permissions",
                "isActive": True,
                "permissions": [p["id"] for p in permissions],
            },
            {
                "name": USER_ROLE,
                "description": "User uses the system",
                "isActive": True,
                "permissions": [],
            },
        ]
        created = await self.store.insert_many(ROLES, roles)
        inserted[ROLES] = len(created)
        role_ids = {role["name"]: role["id"] for role in created}
        logger.info("Seeded roles", roles=[r["name"] for r in created])

        password_hash = self.password_manager.hash_password(self.init_password)
        users = initial_users(password_hash, role_ids[ADMIN_ROLE], role_ids[USER_ROLE])
        created = await self.store.insert_many(USERS, users)
        inserted[USERS] = len(created)
        logger.info("Seeded users", emails=[u["email"] for u in created])

        return inserted


__all__ = ["BootstrapService", "initial_users"]
