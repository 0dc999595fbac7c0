import sys
from datetime import datetime
from pathlib import Path

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"
CONSOLE_FORMAT = "<level>{level: <8}</level> | {message}"


def _stderr_sink(message):
    # 每次写入时再取sys.stderr，rich的实时显示会替换它
    sys.stderr.write(message)


def setup_logger(config: dict):
    """
    配置日志系统

    Args:
        config: 日志配置
            script_name: 脚本名，用作日志子目录
            console_enabled: 是否输出到控制台
            log_dir: 日志根目录，为None时不写文件
            level: 日志级别

    Returns:
        tuple: (logger, config_info)，config_info['log_file'] 为日志文件路径
    """
    script_name = config.get('script_name') or Path(sys.argv[0]).stem or 'leafpack'
    level = config.get('level', 'INFO')
    log_dir = config.get('log_dir', 'logs')

    # 移除默认的sink
    logger.remove()

    log_file = None
    if log_dir is not None:
        now = datetime.now()
        date_dir = Path(log_dir) / script_name / now.strftime('%Y%m%d')
        date_dir.mkdir(parents=True, exist_ok=True)
        log_file = date_dir / f"{now.strftime('%H%M%S')}.log"
        logger.add(
            str(log_file),
            format=LOG_FORMAT,
            level="DEBUG",
            encoding='utf-8'
        )

    if config.get('console_enabled', True):
        logger.add(_stderr_sink, format=CONSOLE_FORMAT, level=level, colorize=True)

    config_info = {
        'script_name': script_name,
        'log_file': str(log_file) if log_file else None,
        'level': level,
    }
    return logger, config_info
