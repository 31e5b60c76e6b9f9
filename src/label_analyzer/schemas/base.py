"""Base schema configuration for all Pydantic models.

Every model serializes camelCase by alias and accepts snake_case by name.

Usage:
    - APIRequest: incoming request bodies
    - APIResponse: outgoing response bodies and parse results
    - DownstreamResponse: payloads read back from the classifier or cache
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _BaseSchema(BaseModel):
    """Private base schema with common configuration.

    Do not use directly - inherit from one of the public subclasses.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        validate_assignment=True,
        serialize_by_alias=True,
    )


class APIRequest(_BaseSchema):
    """Base class for incoming API request schemas.

    Extra fields are ignored so older clients keep working.
    """

    model_config = ConfigDict(
        extra="ignore",
    )


class APIResponse(_BaseSchema):
    """Base class for outgoing schemas.

    Extra fields are forbidden - we only return what is declared.
    """

    model_config = ConfigDict(
        extra="forbid",
    )


class DownstreamResponse(_BaseSchema):
    """Base class for data received from external services or storage.

    Extra fields are ignored so upstream additions don't break parsing.
    """

    model_config = ConfigDict(
        extra="ignore",
    )
