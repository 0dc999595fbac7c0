import copy
import os

import yaml
from loguru import logger

DEFAULT_CONFIG = {
    'num_threads': 4,
    'mode': 'compress',
    'progress': True,
    'log_dir': 'logs',
    'console_enabled': True,
    'log_level': 'INFO',
}


def load_config(config_path: str = None) -> dict:
    """
    加载配置，YAML文件中的值覆盖默认值

    文件不存在或内容无效时记录日志并使用默认配置。
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not config_path:
        return config

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            loaded = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"加载配置文件失败 {config_path}: {e}")
        return config

    if not isinstance(loaded, dict):
        logger.error(f"配置文件格式错误，应为映射: {config_path}")
        return config

    unknown = set(loaded) - set(DEFAULT_CONFIG)
    if unknown:
        logger.warning(f"忽略未知配置项: {', '.join(sorted(unknown))}")
    config.update({k: v for k, v in loaded.items() if k in DEFAULT_CONFIG})
    logger.debug(f"已加载配置: {os.path.abspath(config_path)}")
    return config
