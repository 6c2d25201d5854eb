"""Pydantic base models shared across the OPT package.

Two families live here:
- StrictBaseModel for internal values (error contexts, provider
  settings) where fail-fast validation is wanted.
- WireModel for records and payloads that cross the RPC boundary, which
  use camelCase aliases on the wire and snake_case attributes in Python.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StrictBaseModel(BaseModel):
    """Immutable model with strict validation.

    - strict=True: no type coercion
    - extra="forbid": unknown fields are rejected
    - frozen=True: instances cannot be mutated after creation
    """

    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        validate_assignment=True,
        frozen=True,
        validate_default=True,
        use_enum_values=False,
        arbitrary_types_allowed=False,
    )


class WireModel(BaseModel):
    """Base for models exchanged with callers.

    Accepts both the camelCase wire names and the python field names on
    input, ignores unknown keys, and validates assignments.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        validate_assignment=True,
        use_enum_values=False,
    )

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict using wire names.

        Fields holding None are omitted, so an unpopulated child collection
        is absent rather than null.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "StrictBaseModel",
    "WireModel",
]
