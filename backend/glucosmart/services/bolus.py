from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Union

from pydantic import ValidationError

from glucosmart.core.constants import (
    BOLUS_FIELD_MESSAGES,
    BOLUS_FIELDS,
    DEFAULT_CARB_RATIO,
    DEFAULT_SENSITIVITY_FACTOR,
    DEFAULT_TARGET_GLUCOSE,
)
from glucosmart.models.bolus import BolusSuggestRequest

Number = Union[int, float]


@dataclass(frozen=True)
class FieldError:
    field: str
    reason: str  # missing | not_a_number | not_finite | not_positive
    message: str


class BolusValidationError(ValueError):
    """Raised when one or more bolus inputs are absent, non-numeric, non-finite or not strictly positive."""

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.reason}" for e in self.errors))

    @property
    def first(self) -> FieldError:
        return self.errors[0]

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]


@dataclass(frozen=True)
class BolusResult:
    suggested_bolus: float
    carb_units: float
    correction_units: float
    # Echoed as the caller sent them
    carb_ratio: Number
    sensitivity_factor: Number
    target_glucose: Number
    # Unrounded components, kept for audit
    carb_units_raw: float = field(repr=False)
    correction_units_raw: float = field(repr=False)

    def to_payload(self) -> dict[str, Any]:
        return {
            "suggested_bolus": self.suggested_bolus,
            "details": {
                "carb_units": self.carb_units,
                "correction_units": self.correction_units,
                "parameters": {
                    "carb_ratio": self.carb_ratio,
                    "sensitivity_factor": self.sensitivity_factor,
                    "target_glucose": self.target_glucose,
                },
            },
        }


def round2(value: float) -> float:
    # Half-up at the hundredths, same as the mobile client.
    return math.floor(value * 100 + 0.5) / 100


# Pydantic error types -> reason, most specific first.
_REASON_BY_TYPE = (
    ("missing", "missing"),
    ("finite_number", "not_finite"),
    ("greater_than", "not_positive"),
)


def _reason(types: set[str]) -> str:
    for error_type, reason in _REASON_BY_TYPE:
        if error_type in types:
            return reason
    return "not_a_number"


def field_errors_from_pydantic(errors: Iterable[Mapping[str, Any]], loc_offset: int = 0) -> list[FieldError]:
    """
    Collapse pydantic errors into one FieldError per bolus field, in field order.

    A union field yields one error per member (int and float); they are merged
    and the most specific reason wins. `loc_offset` skips leading loc parts
    such as FastAPI's "body".
    """
    types_by_field: dict[str, set[str]] = {}
    for err in errors:
        loc = tuple(err.get("loc", ()))[loc_offset:]
        if loc and loc[0] in BOLUS_FIELD_MESSAGES:
            types_by_field.setdefault(loc[0], set()).add(err.get("type", ""))

    return [
        FieldError(name, _reason(types_by_field[name]), BOLUS_FIELD_MESSAGES[name])
        for name in BOLUS_FIELDS
        if name in types_by_field
    ]


def _parse_request(payload: Mapping[str, Any]) -> BolusSuggestRequest:
    try:
        return BolusSuggestRequest.model_validate(payload)
    except ValidationError as exc:
        raise BolusValidationError(field_errors_from_pydantic(exc.errors())) from exc


def _ensure_finite(value: float, *fields: str) -> None:
    # value * 100 must stay finite for round2
    if not math.isfinite(value * 100):
        raise BolusValidationError(
            [FieldError(name, "not_finite", BOLUS_FIELD_MESSAGES[name]) for name in fields]
        )


def calculate(request: BolusSuggestRequest) -> BolusResult:
    """
    Suggest a meal bolus: carb coverage plus a correction for glucose above target.

    carb_units       = carbs / carb_ratio
    correction_units = (current_glucose - target_glucose) / sensitivity_factor, floored at 0
    suggested_bolus  = round2(carb_units + correction_units)

    Glucose at or below target contributes no correction; the dose is never
    reduced to compensate for a low reading.
    """
    carb_units = float(request.carbs) / float(request.carb_ratio)
    _ensure_finite(carb_units, "carbs", "carb_ratio")

    glucose_diff = float(request.current_glucose) - float(request.target_glucose)
    correction_units = glucose_diff / float(request.sensitivity_factor) if glucose_diff > 0 else 0.0
    _ensure_finite(correction_units, "current_glucose", "sensitivity_factor")

    total_bolus = carb_units + correction_units
    _ensure_finite(total_bolus, "carbs", "current_glucose")

    return BolusResult(
        suggested_bolus=round2(total_bolus),
        carb_units=round2(carb_units),
        correction_units=round2(correction_units),
        carb_ratio=request.carb_ratio,
        sensitivity_factor=request.sensitivity_factor,
        target_glucose=request.target_glucose,
        carb_units_raw=carb_units,
        correction_units_raw=correction_units,
    )


def suggest_bolus(
    carbs: Any,
    current_glucose: Any,
    carb_ratio: Any = DEFAULT_CARB_RATIO,
    sensitivity_factor: Any = DEFAULT_SENSITIVITY_FACTOR,
    target_glucose: Any = DEFAULT_TARGET_GLUCOSE,
) -> BolusResult:
    """Library entry point. Raises BolusValidationError listing every invalid field before any arithmetic."""
    request = _parse_request(
        {
            "carbs": carbs,
            "current_glucose": current_glucose,
            "carb_ratio": carb_ratio,
            "sensitivity_factor": sensitivity_factor,
            "target_glucose": target_glucose,
        }
    )
    return calculate(request)


def suggest_bolus_from_payload(payload: Mapping[str, Any]) -> BolusResult:
    """Decode a request body; defaults fill only keys that are absent, never an explicit null."""
    return calculate(_parse_request(payload))
