"""Shared pydantic building blocks."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CatalogItem(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str
