from __future__ import annotations

from pathlib import Path

import pytest

from takeprofit.config import DEFAULT_MAX_BUCKETS_PER_SWEEP, HookConfig, config_from_mapping, load_config


def test_defaults() -> None:
    config = HookConfig()
    assert config.max_buckets_per_sweep == DEFAULT_MAX_BUCKETS_PER_SWEEP
    assert config.check_invariants is False
    assert config.emit_events is True


def test_load_config_reads_yaml(tmp_path: Path) -> None:
    path = tmp_path / "hook.yaml"
    path.write_text("max_buckets_per_sweep: 12\ncheck_invariants: true\n", encoding="utf-8")
    config = load_config(path)
    assert config == HookConfig(max_buckets_per_sweep=12, check_invariants=True)


def test_null_bound_disables_limit(tmp_path: Path) -> None:
    path = tmp_path / "hook.yaml"
    path.write_text("max_buckets_per_sweep: null\n", encoding="utf-8")
    assert load_config(path).max_buckets_per_sweep is None


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "hook.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == HookConfig()


def test_unknown_keys_rejected() -> None:
    with pytest.raises(ValueError, match="unknown hook config keys"):
        config_from_mapping({"max_buckets": 3})


def test_non_mapping_rejected() -> None:
    with pytest.raises(ValueError):
        config_from_mapping([1, 2, 3])


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_buckets_per_sweep": -1},
        {"max_buckets_per_sweep": 1.5},
        {"max_buckets_per_sweep": True},
        {"check_invariants": "yes"},
        {"emit_events": 1},
    ],
)
def test_invalid_values_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        HookConfig(**kwargs)
