"""
Hook configuration.

`HookConfig` is a frozen dataclass; `load_config` reads the same fields from a
YAML mapping, e.g.::

    max_buckets_per_sweep: 500
    check_invariants: true
    emit_events: true
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml


DEFAULT_MAX_BUCKETS_PER_SWEEP = 1000


@dataclass(frozen=True)
class HookConfig:
    # Resource bound for one sweep. A swap crossing more buckets than this is
    # rejected with UnboundedSweepCost; None disables the bound.
    max_buckets_per_sweep: Optional[int] = DEFAULT_MAX_BUCKETS_PER_SWEEP

    # Re-check ledger invariants after every entry point (fail-closed).
    check_invariants: bool = False

    # Record HookEvent entries on the hook's event log.
    emit_events: bool = True

    def __post_init__(self) -> None:
        bound = self.max_buckets_per_sweep
        if bound is not None:
            if not isinstance(bound, int) or isinstance(bound, bool) or bound < 0:
                raise ValueError(f"max_buckets_per_sweep must be a non-negative int or None: {bound!r}")
        for name in ("check_invariants", "emit_events"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be a bool")


_FIELD_NAMES = frozenset(f.name for f in fields(HookConfig))


def config_from_mapping(obj: Any) -> HookConfig:
    """Build a HookConfig from a plain mapping, rejecting unknown keys."""
    if obj is None:
        return HookConfig()
    if not isinstance(obj, Mapping):
        raise ValueError("hook config must be a mapping")
    unknown = sorted(str(k) for k in obj if k not in _FIELD_NAMES)
    if unknown:
        raise ValueError(f"unknown hook config keys: {', '.join(unknown)}")
    return HookConfig(**dict(obj))


def load_config(path: Union[str, Path]) -> HookConfig:
    """Load a HookConfig from a YAML file (an empty file gives the defaults)."""
    raw = Path(path).read_text(encoding="utf-8")
    return config_from_mapping(yaml.safe_load(raw))
