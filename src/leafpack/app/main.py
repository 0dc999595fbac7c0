import argparse
import sys

from loguru import logger

from leafpack.config.settings import load_config
from leafpack.error.errors import LeafPackError, PreconditionError
from leafpack.file.leaf_policy import POLICIES, get_policy
from leafpack.file.tree_reducer import TreeReducer
from leafpack.io.path_handler import check_directory, normalize_path
from leafpack.record.logger_config import setup_logger
from leafpack.tui.progress_hub import ProgressHub


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog='leafpack',
        description="叶子目录处理工具 - 将图片占多数的叶子目录打包为zip，或清理空文件和隐藏文件",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument('-d', '--dirname', required=True, help="要处理的根目录")
    parser.add_argument('-n', '--num-threads', type=int, default=None,
                        help="工作线程数(默认读取配置，配置缺省为4)")
    parser.add_argument('-m', '--mode', default=None,
                        help=f"处理模式: {' / '.join(POLICIES)} (默认 compress)")
    parser.add_argument('-c', '--config', default=None, help="YAML配置文件路径")
    parser.add_argument('--no-progress', action='store_true', help="不显示进度条")
    parser.add_argument('--log-dir', default=None, help="日志目录")
    return parser.parse_args(argv)


def build_settings(args) -> dict:
    """配置文件 < 命令行参数"""
    settings = load_config(args.config)
    if args.num_threads is not None:
        settings['num_threads'] = args.num_threads
    if args.mode is not None:
        settings['mode'] = args.mode
    if args.no_progress:
        settings['progress'] = False
    if args.log_dir is not None:
        settings['log_dir'] = args.log_dir
    return settings


def main(argv=None) -> int:
    """主入口函数，返回进程退出码"""
    args = parse_arguments(argv)
    settings = build_settings(args)
    setup_logger({
        'script_name': 'leafpack',
        'console_enabled': settings['console_enabled'],
        'log_dir': settings['log_dir'],
        'level': settings['log_level'],
    })

    try:
        root = check_directory(normalize_path(args.dirname))
    except PreconditionError as e:
        logger.error(f"❌ Error: {e}")
        return 1

    try:
        policy = get_policy(settings['mode'])
    except ValueError as e:
        logger.error(f"❌ {e}")
        return 1

    num_threads = settings['num_threads']
    if not isinstance(num_threads, int) or num_threads < 1:
        logger.error(f"❌ 线程数必须为正整数: {num_threads}")
        return 1

    logger.info(f"🚀 开始处理: {root} (模式: {policy.name}, 线程数: {num_threads})")
    with ProgressHub(enabled=settings['progress']) as hub:
        reducer = TreeReducer(policy, num_threads=num_threads, hub=hub)
        try:
            files = reducer.reduce(root)
        except (LeafPackError, OSError) as e:
            logger.error(f"❌ Failed to read directory: {e}")
            return 1

    stats = reducer.stats
    logger.info(
        f"✨ Total files processed: {len(files)} "
        f"(叶子目录: {stats['leaves']}, 已处理: {stats['acted']}, 失败子树: {stats['failed']})"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
