"""
Shared schema base: camelCase on the wire, snake_case in Python.

Request bodies accept either spelling (populate_by_name); responses are
serialised by alias because FastAPI dumps response models with by_alias=True.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def uuid_or_none(v):
    if v is None:
        return None
    return str(v)
