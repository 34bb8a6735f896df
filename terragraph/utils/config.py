from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from omegaconf import DictConfig, OmegaConf

DEFAULT_CONFIG: Dict[str, Any] = {
    "evaluator": {"max_depth": 100},
    "compiler": {"water_level": 0, "header": "-- Luamap generated terrain"},
    "sampler": {"scale": 100.0, "resolution": 16, "solid_only": True},
    "logging": {"level": "WARNING"},
}


def default_config() -> DictConfig:
    return OmegaConf.create(DEFAULT_CONFIG)


def load_config(
    path: Optional[Union[str, Path, DictConfig]] = None,
    overrides: Optional[Sequence[str]] = None,
) -> DictConfig:
    """Загрузка конфига поверх значений по умолчанию; поддерживает ``_base_`` и dotlist-переопределения."""
    cfg = default_config()
    if path is not None:
        cfg = merge_configs(cfg, _load_with_base(path))
    if overrides:
        cfg = merge_configs(cfg, OmegaConf.from_dotlist(list(overrides)))
    return cfg


def _load_with_base(path: Union[str, Path, DictConfig]) -> DictConfig:
    if isinstance(path, (str, Path)):
        cfg = OmegaConf.load(path)
        base_dir = Path(path).parent
    else:
        cfg = path
        base_dir = Path.cwd()

    if "_base_" in cfg:
        base_path = Path(cfg._base_)
        if not base_path.is_absolute():
            base_path = base_dir / base_path
        base = _load_with_base(base_path)
        cfg = OmegaConf.merge(base, cfg)
        del cfg["_base_"]

    return OmegaConf.create(cfg)


def save_config(config: DictConfig, path: Union[str, Path]) -> None:
    """Сохранение конфига."""
    OmegaConf.save(config, path)


def merge_configs(*configs: DictConfig) -> DictConfig:
    """Слияние нескольких конфигов (последний побеждает)."""
    return OmegaConf.merge(*configs)
