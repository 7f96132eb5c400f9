"""Emulator configuration and interpreter quirks."""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from chipvm.constants import TIMER_HZ

STACK_POLICIES = ("wrap", "raise")
FAULT_POLICIES = ("halt", "raise")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Quirks:
    """Behavioural divergences between historical CHIP-8 interpreters.

    Attributes:
        shift_uses_vy: 8XY6/8XYE shift VY into VX (COSMAC VIP) instead of shifting VX in place
        logic_resets_vf: 8XY1/8XY2/8XY3 clear VF after the operation
        store_load_inclusive: FX55/FX65 transfer V0 through VX inclusive; otherwise V0 through VX-1
        store_load_increments_index: FX55/FX65 leave I pointing past the transferred block
        jump_offset_uses_vx: BXNN jumps to XNN + VX instead of NNN + V0
        key_wait_on_release: FX0A completes when a key is released rather than pressed
        stack_policy: "wrap" overwrites the oldest frame on overflow, "raise" faults
    """
    shift_uses_vy: bool = False
    logic_resets_vf: bool = False
    store_load_inclusive: bool = True
    store_load_increments_index: bool = False
    jump_offset_uses_vx: bool = False
    key_wait_on_release: bool = False
    stack_policy: str = "wrap"

    def __post_init__(self):
        if self.stack_policy not in STACK_POLICIES:
            raise ValueError(
                f"Unknown stack policy '{self.stack_policy}'. Available: {list(STACK_POLICIES)}"
            )

    @classmethod
    def from_dict(cls, values: Optional[Dict[str, Any]]) -> "Quirks":
        return cls(**_checked_fields(cls, values or {}, "quirk"))


@dataclass(frozen=True)
class EmulatorConfig:
    """Settings for a single emulator run."""
    rom: Optional[str] = None
    scale: int = 10
    color_scheme: str = "classic"
    instructions_per_frame: int = 10
    fps: int = 60
    timer_hz: int = TIMER_HZ
    seed: int = 0
    log_level: str = "INFO"
    trace: bool = False
    on_fault: str = "halt"
    headless_frames: int = 0
    quirks: Quirks = field(default_factory=Quirks)

    def __post_init__(self):
        if self.on_fault not in FAULT_POLICIES:
            raise ValueError(
                f"Unknown fault policy '{self.on_fault}'. Available: {list(FAULT_POLICIES)}"
            )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{self.log_level}'. Available: {list(LOG_LEVELS)}")
        for name in ("scale", "instructions_per_frame", "fps", "timer_hz"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.headless_frames < 0:
            raise ValueError(f"headless_frames must be non-negative, got {self.headless_frames}")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "EmulatorConfig":
        """Build a config from a plain dictionary, e.g. a resolved hydra config."""
        values = dict(values)
        quirks = Quirks.from_dict(values.pop("quirks", None))
        return cls(quirks=quirks, **_checked_fields(cls, values, "config"))


def _checked_fields(cls, values: Dict[str, Any], kind: str) -> Dict[str, Any]:
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown {kind} option(s): {unknown}. Available: {sorted(known)}")
    return values
