"""
Shared base for protocol request/response models.

Wire names are camelCase; Python attributes are snake_case.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ProtocolModel(BaseModel):
    """Base model for CDP payloads.

    Unknown fields are kept so newer browser versions do not break decoding.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )
