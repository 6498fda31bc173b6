# school_admin/schemas/base.py
"""
Shared Pydantic bases for the REST API.
JSON bodies use camelCase keys; snake_case is accepted on input as well.
"""
import uuid

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CreatedResponse(CamelModel):
    success: bool = True
    id: uuid.UUID
