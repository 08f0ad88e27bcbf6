from __future__ import annotations

import difflib

import cappa

from circuit_racer.core.circuit import CIRCUIT_DEFINITIONS
from circuit_racer.core.types import CircuitName


def _normalize(s: str) -> str:
    """Normalize string: remove whitespace, dots, dashes and convert to lowercase."""
    return s.strip().replace(" ", "").replace(".", "").replace("-", "").lower()


def validate_circuit_name(value: str) -> CircuitName:
    """Validate and resolve a circuit name."""
    normalized_input = _normalize(value)
    lookup_map: dict[str, CircuitName] = {
        _normalize(k): k for k in CIRCUIT_DEFINITIONS
    }

    if normalized_input in lookup_map:
        return lookup_map[normalized_input]

    canonical_names = list(CIRCUIT_DEFINITIONS.keys())
    matches = difflib.get_close_matches(value, canonical_names, n=3, cutoff=0.6)

    msg = f"Circuit '{value}' not found."
    if matches:
        msg += f" Did you mean: {', '.join(matches)}?"

    raise cappa.Exit(msg, code=1)


def parse_house_rules(value: list[str]) -> dict[str, str | int | float | bool]:
    """
    Parse a list of key=value strings into a dictionary.
    Supports basic type inference (int/float/bool).
    """
    rules: dict[str, str | int | float | bool] = {}
    for item in value:
        if "=" not in item:
            msg = f"Invalid house rule format '{item}'. Expected 'key=value'."
            raise cappa.Exit(
                msg,
                code=1,
            )

        k, v = item.split("=", 1)
        k = k.strip()
        v = v.strip()

        # Basic type inference
        if v.lower() in {"true", "false"}:
            rules[k] = v.lower() == "true"
        elif v.lstrip("-").isdigit():
            rules[k] = int(v)
        else:
            try:
                rules[k] = float(v)
            except ValueError:
                rules[k] = v

    return rules
