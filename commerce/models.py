"""Commerce platform value types"""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with the platform's camelCase field names"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Money(CamelModel):
    """Amount of money in the smallest currency unit"""
    model_config = ConfigDict(frozen=True)

    cent_amount: int
    currency_code: str
    fraction_digits: int = 2

    @property
    def amount(self) -> Decimal:
        """Decimal amount, centAmount / 10**fractionDigits"""
        return Decimal(self.cent_amount).scaleb(-self.fraction_digits)

    @classmethod
    def zero(cls, currency_code: str, fraction_digits: int = 2) -> "Money":
        return cls(cent_amount=0, currency_code=currency_code, fraction_digits=fraction_digits)

    @classmethod
    def from_platform(cls, value: Optional[dict[str, Any]]) -> Optional["Money"]:
        """Build from a platform money object, None when it carries no centAmount"""
        if not value or not isinstance(value.get("centAmount"), int):
            return None
        return cls(
            cent_amount=value["centAmount"],
            currency_code=value.get("currencyCode", ""),
            fraction_digits=value.get("fractionDigits", 2),
        )

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            return NotImplemented
        if other.currency_code != self.currency_code:
            raise ValueError(
                f"Cannot add {other.currency_code} to {self.currency_code}"
            )
        return Money(
            cent_amount=self.cent_amount + other.cent_amount,
            currency_code=self.currency_code,
            fraction_digits=self.fraction_digits,
        )
