# app/schemas/base.py
# JSON bodies are camelCase (zoneId, isActive, ...); snake_case is accepted on input too
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
