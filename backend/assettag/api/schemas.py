from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case fields in Python, camelCase on the wire (the mobile client's format)."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
