"""Tests for utils.config."""

from omegaconf import OmegaConf

from terragraph.utils.config import load_config, merge_configs, save_config


def test_defaults() -> None:
    cfg = load_config()
    assert cfg.evaluator.max_depth == 100
    assert cfg.compiler.water_level == 0
    assert cfg.sampler.resolution == 16


def test_overrides() -> None:
    cfg = load_config(overrides=["evaluator.max_depth=20", "sampler.solid_only=false"])
    assert cfg.evaluator.max_depth == 20
    assert cfg.sampler.solid_only is False


def test_base_inheritance(tmp_path) -> None:
    base = tmp_path / "base.yaml"
    save_config(OmegaConf.create({"compiler": {"water_level": 8}, "sampler": {"scale": 50.0}}), base)
    child = tmp_path / "child.yaml"
    child.write_text("_base_: base.yaml\nsampler:\n  scale: 25.0\n", encoding="utf-8")
    cfg = load_config(child)
    assert cfg.compiler.water_level == 8
    assert cfg.sampler.scale == 25.0
    assert cfg.evaluator.max_depth == 100
    assert "_base_" not in cfg


def test_merge_configs_last_wins() -> None:
    merged = merge_configs(OmegaConf.create({"a": 1, "b": 1}), OmegaConf.create({"b": 2}))
    assert merged.a == 1 and merged.b == 2
