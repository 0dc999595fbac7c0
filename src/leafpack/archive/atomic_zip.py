import os
import zipfile
from typing import List, Optional

from loguru import logger

from leafpack.tui.progress_hub import ProgressHub

TEMP_SUFFIX = '.tmp'


def resolve_archive_path(directory: str) -> str:
    """
    为目录生成不冲突的压缩包路径，放在父目录下

    先尝试 <parent>/<name>.zip，已存在则依次尝试 <name>(1).zip、<name>(2).zip ...

    Args:
        directory: 要打包的目录

    Returns:
        str: 可用的压缩包路径
    """
    directory = os.path.normpath(directory)
    dir_name = os.path.basename(directory) or 'unknown'
    parent_dir = os.path.dirname(directory) or '.'

    archive_path = os.path.join(parent_dir, f"{dir_name}.zip")
    counter = 1
    # 非独占创建，并发写同一父目录时存在竞争窗口
    while os.path.exists(archive_path):
        archive_path = os.path.join(parent_dir, f"{dir_name}({counter}).zip")
        counter += 1
    return archive_path


class AtomicZipWriter:
    """
    先写临时文件再重命名的zip写入器

    最终路径上永远不会出现写了一半的压缩包，失败时只可能残留 .tmp 文件。
    """

    compression = zipfile.ZIP_DEFLATED

    def __init__(self, hub: Optional[ProgressHub] = None):
        self.hub = hub

    def write(self, target_path: str, files: List[str]) -> str:
        """
        将文件写入压缩包，条目名只保留文件名(不含目录)

        Args:
            target_path: 最终压缩包路径
            files: 按顺序写入的文件列表

        Returns:
            str: 最终压缩包路径

        Raises:
            OSError: 读取、写入或重命名失败
        """
        temp_path = target_path + TEMP_SUFFIX
        ticket = None
        if self.hub is not None:
            ticket = self.hub.register(len(files), f"Zipping: {os.path.basename(target_path)}")

        try:
            # 1980年以前的修改时间按1980-01-01写入
            with zipfile.ZipFile(temp_path, 'w', compression=self.compression,
                                 strict_timestamps=False) as zf:
                for path in files:
                    zf.write(path, arcname=os.path.basename(path))
                    if ticket is not None:
                        ticket.advance()
        finally:
            if ticket is not None:
                ticket.clear()

        os.replace(temp_path, target_path)
        logger.info(f"📦 创建压缩包成功: {target_path} ({len(files)}个文件)")
        return target_path
