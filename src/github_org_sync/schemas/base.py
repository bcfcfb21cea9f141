"""Base schema class with ORM conversion."""

from pydantic import BaseModel, ConfigDict


class SchemaBase(BaseModel):
    """Base class for all Pydantic schemas, readable from SQLAlchemy models."""

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )
