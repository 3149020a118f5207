# -*- coding: utf-8 -*-
"""
Runtime configuration module
Live parameters supplied by the UI shell (sliders, checkboxes, key presses)
"""

import math
from dataclasses import dataclass, fields, replace
from typing import List, Dict, Any

import config as static_config


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _to_finite(name: str, value: Any) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{name} must be a finite number, got {value!r}")
    return number


@dataclass
class SimulationParameters:
    """
    Simulation parameters

    Attributes:
        nuclear_charge: Z of the target nucleus (1-92)
        alpha_energy: alpha particle energy in MeV (1-10)
        show_paths: record and draw trajectories
        show_histogram: draw the angle distribution panel
        show_theory: overlay the expected distribution on the panel
    """
    nuclear_charge: int = static_config.NUCLEAR_CHARGE_DEFAULT
    alpha_energy: float = static_config.ALPHA_ENERGY_DEFAULT
    show_paths: bool = True
    show_histogram: bool = True
    show_theory: bool = True

    # camelCase names used on the wire
    KEY_MAP = {
        "nuclearCharge": "nuclear_charge",
        "alphaEnergy": "alpha_energy",
        "showPaths": "show_paths",
        "showHistogram": "show_histogram",
        "showTheory": "show_theory",
    }

    def __post_init__(self):
        self.clamp()

    def clamp(self) -> None:
        """Force the numeric parameters into the ranges the sliders allow"""
        charge = int(_to_finite("nuclear_charge", self.nuclear_charge))
        energy = _to_finite("alpha_energy", self.alpha_energy)
        self.nuclear_charge = int(max(static_config.NUCLEAR_CHARGE_MIN,
                                      min(static_config.NUCLEAR_CHARGE_MAX, charge)))
        self.alpha_energy = float(max(static_config.ALPHA_ENERGY_MIN,
                                      min(static_config.ALPHA_ENERGY_MAX, energy)))
        self.show_paths = _to_bool(self.show_paths)
        self.show_histogram = _to_bool(self.show_histogram)
        self.show_theory = _to_bool(self.show_theory)

    def copy(self) -> "SimulationParameters":
        return replace(self)

    def update(self, **changes: Any) -> List[str]:
        """
        Apply snake_case changes, clamp, and report which fields actually changed.
        Unknown names raise TypeError. A rejected update leaves every field as it was.
        """
        known = {f.name for f in fields(self)}
        for name in changes:
            if name not in known:
                raise TypeError(f"unknown simulation parameter: {name}")

        # Validate on a copy; self only sees clamped values
        candidate = self.copy()
        for name, value in changes.items():
            setattr(candidate, name, value)
        candidate.clamp()

        changed = [f.name for f in fields(self) if getattr(self, f.name) != getattr(candidate, f.name)]
        for name in changed:
            setattr(self, name, getattr(candidate, name))
        return changed

    def update_from_dict(self, data: Dict[str, Any]) -> List[str]:
        changes = {}
        for key, value in data.items():
            name = self.KEY_MAP.get(key)
            if name is None:
                continue
            if name == "nuclear_charge":
                value = int(_to_finite(key, value))
            elif name == "alpha_energy":
                value = _to_finite(key, value)
            changes[name] = value
        return self.update(**changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nuclearCharge": self.nuclear_charge,
            "alphaEnergy": self.alpha_energy,
            "showPaths": self.show_paths,
            "showHistogram": self.show_histogram,
            "showTheory": self.show_theory,
            "nuclearChargeMin": static_config.NUCLEAR_CHARGE_MIN,
            "nuclearChargeMax": static_config.NUCLEAR_CHARGE_MAX,
            "alphaEnergyMin": static_config.ALPHA_ENERGY_MIN,
            "alphaEnergyMax": static_config.ALPHA_ENERGY_MAX,
        }
