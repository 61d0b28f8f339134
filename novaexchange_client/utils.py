"""Formatting helpers shared by the request builders."""

from __future__ import annotations

import json
import math
import urllib.parse
from typing import Any, Mapping

REDACTED_FIELDS = frozenset({"apikey", "signature"})


def format_parameters(params: Mapping[str, Any]) -> str:
    """Form-encode ``params`` as ``key=value`` pairs joined by ``&``, keys sorted."""

    return urllib.parse.urlencode(sorted(params.items()))


def format_units(value: float) -> str:
    """Format a float amount suitable for API submission."""

    formatted = f"{value:.8f}".rstrip("0").rstrip(".")
    return formatted or "0"


def format_amount(value: Any) -> Any:
    """Render floats with :func:`format_units`; anything else is sent unchanged.

    Raises :class:`ValueError` for non-finite floats and for non-zero floats
    too small to survive eight decimal places.
    """

    if not isinstance(value, float):
        return value
    if not math.isfinite(value):
        raise ValueError(f"amount {value!r} is not a finite number")
    formatted = format_units(value)
    if value != 0 and formatted.lstrip("-") == "0":
        raise ValueError(f"amount {value!r} is below the 0.00000001 resolution")
    return formatted


def describe_request(http_method: str, url: str, method: str, params: Mapping[str, Any]) -> str:
    """Human readable summary of a request, with credentials masked."""

    visible = {
        key: ("***" if key in REDACTED_FIELDS else value) for key, value in params.items()
    }
    return (
        f"{http_method} request to url {url} with method {method} "
        f"and params {json.dumps(visible, default=str)}"
    )


__all__ = ["describe_request", "format_amount", "format_parameters", "format_units"]
