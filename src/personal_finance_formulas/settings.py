# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path

from .debt import ProspectiveLoan

__version__ = "0.4.0"


# Allowed range of every setting, in the units the form displays (percent, years)
SETTING_RANGES: dict[str, tuple[float, float]] = {
    "target_dti": (20.0, 50.0),
    "rent_retention": (0.0, 100.0),
    "tmi": (0.0, 45.0),
    "ps": (0.0, 17.2),
    "acq_costs_pct": (0.0, 20.0),
    "loan_rate": (0.0, 10.0),
    "loan_duration_years": (1, 60),
    "loan_insurance_rate": (0.0, 1.0),
}


@dataclass(frozen=True)
class DefaultSettings:
    """
    Default values pre-filled into the calculator forms.

    Stored in percent as the user edits them (35 = 35%). The calculators never
    read this object; the UI converts the values and passes explicit arguments.
    """
    target_dti: float = 35.0
    rent_retention: float = 70.0
    tmi: float = 30.0
    ps: float = 17.2
    acq_costs_pct: float = 8.0
    loan_rate: float = 2.5
    loan_duration_years: int = 20
    loan_insurance_rate: float = 0.3

    def __post_init__(self) -> None:
        """Validate every setting against SETTING_RANGES."""
        for name, (lo, hi) in SETTING_RANGES.items():
            value = getattr(self, name)
            if not lo <= value <= hi:
                raise ValueError(f"{name} must be within [{lo}, {hi}], got {value}")
        if not float(self.loan_duration_years).is_integer():
            raise ValueError(f"loan_duration_years must be an integer, got {self.loan_duration_years}")

    def with_updates(self, **changes: float) -> DefaultSettings:
        """Copy with some settings changed; the copy is validated."""
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ValueError(f"unknown settings: {sorted(unknown)}")
        return replace(self, **changes)

    def prospective_loan(self) -> ProspectiveLoan:
        """Default loan terms for the debt-capacity calculator, as decimals."""
        return ProspectiveLoan(
            annual_rate=self.loan_rate / 100,
            years=int(self.loan_duration_years),
            insurance_rate=self.loan_insurance_rate / 100,
        )

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> DefaultSettings:
        """Build settings from a mapping; missing keys keep their defaults, unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def load_settings(path: str | Path) -> DefaultSettings:
    """
    Load settings saved with save_settings().

    Returns the defaults when the file does not exist.

    Raises:
        ValueError: If the file is not valid JSON or holds out-of-range values
    """
    path = Path(path)
    if not path.exists():
        return DefaultSettings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"settings file {path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"settings file {path} must hold a JSON object")
    return DefaultSettings.from_dict(data)


def save_settings(settings: DefaultSettings, path: str | Path) -> None:
    """Write settings as a JSON object."""
    Path(path).write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
