"""
Step-level debug output used across routes and services.
"""
import json
import logging
from typing import Any

logger = logging.getLogger("ogp_service")

_LEVELS = {
    "input": logging.INFO,
    "output": logging.INFO,
    "info": logging.DEBUG,
    "error": logging.ERROR,
}


def _format_data(data: Any) -> str:
    if isinstance(data, (dict, list, tuple)):
        try:
            return json.dumps(data, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return repr(data)
    return str(data)


def print_step(step: str, data: Any = None, step_type: str = "info") -> None:
    """
    Log a named processing step.

    Args:
        step: Human readable step name
        data: Payload describing the step (dicts are rendered as JSON)
        step_type: One of "input", "output", "info" or "error"
    """
    level = _LEVELS.get(step_type, logging.INFO)
    if data is None:
        logger.log(level, "[%s] %s", step_type.upper(), step)
    else:
        logger.log(level, "[%s] %s: %s", step_type.upper(), step, _format_data(data))
