from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

# Attribute name -> key used in JSON payloads and evaluator prompts.
WIRE_KEYS = {
    "nested_loops": "nestedLoops",
    "console_logs": "consoleLogs",
    "long_functions": "longFunctions",
    "security_risks": "securityRisks",
    "poor_naming": "poorNaming",
    "missing_error_handling": "missingErrorHandling",
}


@dataclass(frozen=True)
class StaticMetrics:
    nested_loops: int = 0
    console_logs: int = 0
    long_functions: int = 0
    security_risks: int = 0
    poor_naming: int = 0
    missing_error_handling: int = 0

    @classmethod
    def zero(cls) -> StaticMetrics:
        return cls()

    @property
    def is_clean(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))

    def to_dict(self) -> dict[str, int]:
        return {wire: int(getattr(self, attr)) for attr, wire in WIRE_KEYS.items()}

    @classmethod
    def from_dict(cls, raw: dict[str, Any] | None) -> StaticMetrics:
        if not isinstance(raw, dict):
            return cls.zero()
        values: dict[str, int] = {}
        for attr, wire in WIRE_KEYS.items():
            value = raw.get(wire, raw.get(attr, 0))
            try:
                values[attr] = max(0, int(value))
            except (TypeError, ValueError):
                values[attr] = 0
        values["missing_error_handling"] = min(1, values["missing_error_handling"])
        return cls(**values)
