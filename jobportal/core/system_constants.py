"""
System Constants

Defines system-wide constants used throughout the application.
"""

from typing import Dict, List, Tuple

API_PREFIX = "/api/v1"

# Reserved roles
ADMIN_ROLE = "ADMIN"
USER_ROLE = "USER"
HR_ROLE = "HR"

# Root administrator account (cannot be deleted)
ROOT_ADMIN_EMAIL = "admin@gmail.com"

# Collections
PERMISSIONS = "permissions"
ROLES = "roles"
USERS = "users"
COMPANIES = "companies"
RESUMES = "resumes"

# Resume workflow
RESUME_STATUS_PENDING = "PENDING"


def _crud(module: str, collection: str, label: str) -> List[Dict[str, str]]:
    base = f"{API_PREFIX}/{collection}"
    return [
        {"name": f"Create {label}", "apiPath": base, "method": "POST", "module": module},
        {"name": f"Get {label} with paginate", "apiPath": base, "method": "GET", "module": module},
        {"name": f"Get {label} by id", "apiPath": f"{base}/:id", "method": "GET", "module": module},
        {"name": f"Update {label}", "apiPath": f"{base}/:id", "method": "PATCH", "module": module},
        {"name": f"Delete {label}", "apiPath": f"{base}/:id", "method": "DELETE", "module": module},
    ]


# Permission catalog inserted on first boot; keep in sync with the v1 routers.
INIT_PERMISSIONS = [
    *_crud("PERMISSIONS", PERMISSIONS, "permission"),
    *_crud("ROLES", ROLES, "role"),
    *_crud("USERS", USERS, "user"),
    *_crud("COMPANIES", COMPANIES, "company"),
    *_crud("RESUMES", RESUMES, "resume"),
    {
        "name": "Get resumes by user",
        "apiPath": f"{API_PREFIX}/{RESUMES}/by-user",
        "method": "POST",
        "module": "RESUMES",
    },
]

# Store-level uniqueness among live (non-deleted) records of a collection
UNIQUE_FIELDS: Dict[str, Tuple[str, ...]] = {
    USERS: ("email",),
    ROLES: ("name",),
}
