"""Shared pydantic base for the JSON surface (camelCase keys)."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model serialized with camelCase keys, populated by either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
