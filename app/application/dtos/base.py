"""Shared DTO configuration"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialises camelCase keys; accepts camelCase or snake_case input"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
