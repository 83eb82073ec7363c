from __future__ import annotations

import math
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import confloat, conint
from pydantic_core import PydanticCustomError

from glucosmart.core.constants import (
    DEFAULT_CARB_RATIO,
    DEFAULT_SENSITIVITY_FACTOR,
    DEFAULT_TARGET_GLUCOSE,
)

# JSON numbers only: strings and booleans are rejected, ints are echoed back as ints.
PositiveNumber = Union[
    conint(strict=True, gt=0),
    confloat(strict=True, gt=0, allow_inf_nan=False),
]


class BolusSuggestRequest(BaseModel):
    carbs: PositiveNumber
    current_glucose: PositiveNumber
    carb_ratio: PositiveNumber = DEFAULT_CARB_RATIO
    sensitivity_factor: PositiveNumber = DEFAULT_SENSITIVITY_FACTOR
    target_glucose: PositiveNumber = DEFAULT_TARGET_GLUCOSE

    model_config = ConfigDict(extra="ignore")

    @field_validator("carbs", "current_glucose", "carb_ratio", "sensitivity_factor", "target_glucose")
    def ensure_float_range(cls, v: Any) -> Any:
        # Arbitrarily long JSON integers are valid ints but overflow float arithmetic.
        try:
            as_float = float(v)
        except OverflowError:
            as_float = math.inf
        if not math.isfinite(as_float):
            raise PydanticCustomError("finite_number", "Input should be a finite number")
        return v
