from terragraph.utils.config import DEFAULT_CONFIG, default_config, load_config, merge_configs, save_config

__all__ = ["DEFAULT_CONFIG", "default_config", "load_config", "merge_configs", "save_config"]
