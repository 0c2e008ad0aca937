"""
Shared SQLModel base for the identity and token models.
"""

from sqlmodel import SQLModel


class BaseModel(SQLModel):
    """Non-table model: assignments are validated and strings stripped."""

    model_config = {
        "validate_assignment": True,
        "populate_by_name": True,
        "str_strip_whitespace": True,
    }
