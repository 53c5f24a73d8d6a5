# engine/runner.py
from __future__ import annotations

import logging

from ..data_model import (
    ProjectionParameters,
    SimulationConfig,
    SimulationInputs,
    SimulationResult,
    get_parameters,
)
from .reports import summarize
from .sanitize import NumberSanitizer
from .simulator import simulate_yearly
from .validation import validate_inputs

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An error occurred during the calculation. Check your inputs."


def run_request(
    inputs: SimulationInputs,
    config: SimulationConfig | None = None,
    params: ProjectionParameters | None = None,
) -> SimulationResult:
    """Validate, project and summarise one scenario.

    Never raises: validation failures and unexpected errors come back as
    messages on the result, with no projections.
    """
    config = config or SimulationConfig()
    try:
        validation = validate_inputs(inputs, config)
        if not validation.is_valid:
            return SimulationResult(errors=validation.errors, warnings=validation.warnings)

        sanitizer = NumberSanitizer()
        projections = simulate_yearly(inputs, config, params or get_parameters(), sanitizer)
        if sanitizer.coercions:
            logger.warning("Projection finished with %s coerced values", sanitizer.coercions)
        return SimulationResult(
            projections=projections,
            summary=summarize(projections, inputs, config),
            warnings=validation.warnings,
            coercions=sanitizer.coercions,
        )
    except Exception:
        logger.exception("Simulation failed")
        return SimulationResult(errors=[GENERIC_ERROR])
