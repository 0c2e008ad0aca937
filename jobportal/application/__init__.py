"""Application layer entry points.

Holds the collection services and the cross-cutting query, pagination,
soft-delete, audit and authorization machinery they share.

Services are imported directly from their modules, e.g.:
    from jobportal.application.user_service import UserService
"""
