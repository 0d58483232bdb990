"""Debt and plan form definitions and validation helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping

from ...services.debts import STRATEGIES

NAME_MAX_LENGTH = 80


def _parse_decimal(
    errors: Dict[str, List[str]],
    field_name: str,
    value: Any,
    *,
    minimum: Decimal,
    inclusive: bool = True,
    required: bool = True,
) -> Decimal | None:
    """Parse numeric input, recording an error message when it is unusable."""

    if value is None or value == "":
        if required:
            errors.setdefault(field_name, []).append("This field is required.")
        return None

    # bool is an int subclass; reject it rather than reading True as 1
    if isinstance(value, bool):
        errors.setdefault(field_name, []).append("Enter a valid number.")
        return None

    if not isinstance(value, Decimal):
        try:
            value = Decimal(str(value))
        except (InvalidOperation, TypeError, ValueError):
            errors.setdefault(field_name, []).append("Enter a valid number.")
            return None

    if not value.is_finite():
        errors.setdefault(field_name, []).append("Enter a valid number.")
        return None

    too_small = value < minimum if inclusive else value <= minimum
    if too_small:
        message = (
            "Amount must be at least zero."
            if inclusive and minimum == 0
            else "Amount must be greater than zero."
        )
        errors.setdefault(field_name, []).append(message)
    return value


@dataclass(slots=True)
class DebtForm:
    """Debt payload plus validation errors.

    With ``partial=True`` only supplied fields are validated, matching PATCH
    semantics where absent values keep their stored state.
    """

    name: str | None = None
    balance: Any = None
    interest_rate: Any = None
    min_payment: Any = None
    partial: bool = False
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], *, partial: bool = False) -> "DebtForm":
        return cls(
            name=payload.get("name"),
            balance=payload.get("balance"),
            interest_rate=payload.get("interest_rate"),
            min_payment=payload.get("min_payment"),
            partial=partial,
        )

    def validate(self) -> bool:
        """Validate inputs returning True when all values are acceptable."""

        self.errors.clear()

        if self.name is not None or not self.partial:
            if not isinstance(self.name, str) or not self.name.strip():
                self.errors.setdefault("name", []).append("Enter the creditor or account name.")
            elif len(self.name.strip()) > NAME_MAX_LENGTH:
                self.errors.setdefault("name", []).append(
                    f"Name must be at most {NAME_MAX_LENGTH} characters."
                )
            else:
                self.name = self.name.strip()

        self.balance = _parse_decimal(
            self.errors,
            "balance",
            self.balance,
            minimum=Decimal("0"),
            required=not self.partial,
        )
        # Interest rate is optional on create and defaults to 0%.
        self.interest_rate = _parse_decimal(
            self.errors,
            "interest_rate",
            self.interest_rate,
            minimum=Decimal("0"),
            required=False,
        )
        self.min_payment = _parse_decimal(
            self.errors,
            "min_payment",
            self.min_payment,
            minimum=Decimal("0"),
            inclusive=False,
            required=not self.partial,
        )

        if isinstance(self.interest_rate, Decimal) and self.interest_rate > Decimal("100"):
            self.errors.setdefault("interest_rate", []).append(
                "Interest rate must be between 0 and 100 percent."
            )

        return not self.errors

    def cleaned_data(self) -> dict[str, Any]:
        """Return validated values as floats ready for storage."""

        data: dict[str, Any] = {}
        if self.name is not None:
            data["name"] = self.name
        for key in ("balance", "interest_rate", "min_payment"):
            value = getattr(self, key)
            if value is not None:
                data[key] = float(value)
        if not self.partial:
            data.setdefault("interest_rate", 0.0)
        return data

    @property
    def error_messages(self) -> Iterable[str]:
        """Flattened iterable of error strings for summaries."""

        for messages in self.errors.values():
            yield from messages


@dataclass(slots=True)
class PlanForm:
    """Repayment plan payload: strategy plus committed monthly payment."""

    strategy: Any = None
    monthly_payment: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()

        if self.strategy in (None, ""):
            self.errors.setdefault("strategy", []).append("This field is required.")
        elif self.strategy not in STRATEGIES:
            self.errors.setdefault("strategy", []).append(
                "Strategy must be avalanche or snowball."
            )

        self.monthly_payment = _parse_decimal(
            self.errors,
            "monthly_payment",
            self.monthly_payment,
            minimum=Decimal("0"),
            inclusive=False,
        )
        return not self.errors
