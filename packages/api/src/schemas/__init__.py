# This project was developed with assistance from AI tools.
"""Shared schema components."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel, to_pascal


class CodatModel(BaseModel):
    """Base for Codat REST payloads (camelCase keys, unknown keys ignored)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class CodatWebhookModel(BaseModel):
    """Base for Codat webhook alerts (PascalCase keys, unknown keys ignored)."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, extra="ignore")
