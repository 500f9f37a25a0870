# app/schemas/common.py
from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, StringConstraints
from pydantic.alias_generators import to_camel

# Money is stored as Numeric(10, 2) and sent to the client as a JSON number.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

# Numeric(10, 2) holds 8 whole digits and 2 decimals.
MONEY_MAX = Decimal("99999999.99")
MoneyAmount = Annotated[Money, Field(ge=0, le=MONEY_MAX, max_digits=10, decimal_places=2)]

# Upper bound of a 32-bit INTEGER column.
INT32_MAX = 2_147_483_647

NameStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=200),
]

RequiredText = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1),
]


class CamelModel(BaseModel):
    """
    Base for every request/response body.

    Python attributes stay snake_case; the wire format is camelCase.
    Either spelling is accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
        validate_default=True,
    )


def empty_str_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class MessageResponse(CamelModel):
    message: str
