import os

from leafpack.error.errors import PreconditionError


def normalize_path(path: str) -> str:
    """
    规范化路径，去掉首尾空白和引号并转换为绝对路径

    Args:
        path: 原始路径

    Returns:
        str: 规范化后的路径
    """
    path = path.strip().strip('"\'')
    return os.path.abspath(path)


def check_directory(path: str) -> str:
    """
    检查根目录是否存在且为目录

    Raises:
        PreconditionError: 不存在或不是目录
    """
    if not os.path.exists(path):
        raise PreconditionError(f"Directory '{path}' does not exist")
    if not os.path.isdir(path):
        raise PreconditionError(f"'{path}' is not a directory")
    return path
