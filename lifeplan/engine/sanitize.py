# engine/sanitize.py
import logging
import math
from typing import Any

logger = logging.getLogger(__name__)

MAX_REASONABLE_VALUE = 1e12


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class NumberSanitizer:
    """Single place where NaN/inf/overflow in the projection get coerced.

    One instance per run; `coercions` counts every substituted value.
    """

    def __init__(self, ceiling: float = MAX_REASONABLE_VALUE) -> None:
        self.ceiling = ceiling
        self.coercions = 0

    def __call__(self, value: Any) -> float:
        if value is None or not _is_number(value) or not math.isfinite(value):
            if value is not None:
                self.coercions += 1
                logger.warning("Non-finite value %r replaced with 0", value)
            return 0.0
        if abs(value) > self.ceiling:
            self.coercions += 1
            logger.warning("Extreme value detected: %s. Capping at %s.", value, self.ceiling)
            return self.ceiling if value > 0 else -self.ceiling
        return float(value)

    def divide(self, numerator: float, denominator: float) -> float:
        if denominator == 0:
            self.coercions += 1
            logger.warning("Division by zero (%s / 0) replaced with 0", numerator)
            return 0.0
        return self(numerator / denominator)


def sanitize_json_compat(value: Any):
    """Replace NaN/inf with None so payloads stay valid JSON."""
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, dict):
        return {key: sanitize_json_compat(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_json_compat(item) for item in value]
    return value
