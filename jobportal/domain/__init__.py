"""Domain layer package exposing pure business abstractions."""

from . import interfaces
from . import entities
from .query import FilterClause, FilterOperator, QueryDescriptor
from .value_objects import Actor, CompanySnapshot

__all__ = [
    "entities",
    "interfaces",
    "FilterClause",
    "FilterOperator",
    "QueryDescriptor",
    "Actor",
    "CompanySnapshot",
]
