"""Companies."""

from jobportal.application.collection_service import CollectionService
from jobportal.core.system_constants import COMPANIES
from jobportal.domain.exceptions import CompanyNotFoundError


class CompanyService(CollectionService):
    collection = COMPANIES
    kind = "company"
    not_found_error = CompanyNotFoundError


__all__ = ["CompanyService"]
