"""
Shared pydantic building blocks for request/response schemas.

The wire format is camelCase (``listingId``, ``baseNFT``) while attributes
stay snake_case; addresses are validated and lower-cased on the way in.
"""

import re
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, HttpUrl, StringConstraints, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")

_http_url = TypeAdapter(HttpUrl)


def is_valid_address(value: Optional[str]) -> bool:
    return isinstance(value, str) and ADDRESS_RE.match(value) is not None


def normalize_address(value: str) -> str:
    """Validate an EVM address and return it lower-cased."""
    if not is_valid_address(value):
        raise ValueError("Invalid address")
    return value.lower()


def check_http_url(value: str) -> str:
    # Validate only; keep the exact string the client sent
    try:
        _http_url.validate_python(value)
    except PydanticValidationError:
        raise ValueError("Invalid URL") from None
    return value


Address = Annotated[str, AfterValidator(normalize_address)]
UrlStr = Annotated[str, AfterValidator(check_http_url)]
# Surrounding whitespace is stripped; blank strings are rejected
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
WeiAmount = Annotated[str, Field(pattern=r"^\d+$")]


class CamelModel(BaseModel):
    """Base for API models: camelCase on the wire, ORM-friendly."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Any = None
