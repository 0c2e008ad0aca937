"""
Job Portal Backend - role/permission authorization and dynamic query layer.

This package provides a FastAPI-based backend for a job portal, exposing
audited, soft-deletable CRUD surfaces for permissions, roles, users,
companies and resumes on top of a pluggable document store.
"""

__version__ = "1.0.0"
