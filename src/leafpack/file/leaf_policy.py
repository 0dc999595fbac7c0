import os
import shutil
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

from loguru import logger

from leafpack.archive.atomic_zip import AtomicZipWriter, resolve_archive_path
from leafpack.error.errors import LeafPolicyError
from leafpack.pics.image_classifier import is_image_dominant, split_images
from leafpack.tui.progress_hub import ProgressHub


class LeafPolicy(ABC):
    """
    叶子目录处理策略

    TreeReducer 对每个叶子目录(没有子目录的目录)调用一次 process，
    返回值表示策略是否真的执行了操作，不影响遍历本身。
    """

    name = None

    @abstractmethod
    def process(self, directory: str, files: List[str],
                subdirs: Optional[List[str]] = None,
                hub: Optional[ProgressHub] = None) -> bool:
        """
        处理一个叶子目录

        Args:
            directory: 叶子目录路径
            files: 目录下的文件路径
            subdirs: 目录下的子目录路径(叶子目录时为空)
            hub: 共享的进度条复用器

        Returns:
            bool: 是否执行了操作

        Raises:
            LeafPolicyError: 叶子级别的失败
        """


class CompressPolicy(LeafPolicy):
    """图片占多数的叶子目录打包为同名zip并删除原目录"""

    name = 'compress'

    def process(self, directory, files, subdirs=None, hub=None):
        if subdirs:
            logger.debug(f"⏭️ 非叶子目录，跳过: {directory}")
            return False

        if not is_image_dominant(files):
            images, _ = split_images(files)
            logger.debug(f"⏭️ 图片未占多数({len(images)}/{len(files)})，跳过: {directory}")
            return False

        archive_path = resolve_archive_path(directory)
        logger.info(f"🔄 开始打包: {directory} -> {os.path.basename(archive_path)}")
        try:
            # 图片和其他文件一起打包
            AtomicZipWriter(hub).write(archive_path, files)
        except (OSError, ValueError) as e:
            logger.error(f"❌ 创建压缩包失败: {archive_path}: {e}")
            raise LeafPolicyError(f"创建压缩包失败: {archive_path}", e) from e

        try:
            shutil.rmtree(directory)
        except OSError as e:
            # 压缩包已经完整，不回滚
            logger.error(f"❌ 删除源文件夹失败: {directory}: {e}")
            raise LeafPolicyError(f"删除源文件夹失败: {directory}", e) from e
        logger.info(f"🗑️ 已删除源文件夹: {directory}")
        return True


class CleanPolicy(LeafPolicy):
    """删除空文件和隐藏文件，叶子目录被清空时一并删除目录"""

    name = 'clean'

    @staticmethod
    def should_delete(path: str, size: int) -> bool:
        return size == 0 or os.path.basename(path).startswith('.')

    def process(self, directory, files, subdirs=None, hub=None):
        logger.info(f"🧹 清理目录: {directory}")

        deleted_count = 0
        for file_path in files:
            try:
                size = os.stat(file_path).st_size
            except OSError as e:
                logger.warning(f"⚠️ 读取文件信息失败 {file_path}: {e}")
                continue

            if not self.should_delete(file_path, size):
                continue
            try:
                os.remove(file_path)
            except OSError as e:
                logger.warning(f"⚠️ 删除空文件/隐藏文件失败 {file_path}: {e}")
                continue
            deleted_count += 1
            logger.debug(f"🗑️ 已删除文件: {file_path}")

        logger.info(f"🧹 删除了 {deleted_count} 个空文件或隐藏文件，共 {len(files)} 个文件: {directory}")

        if deleted_count < len(files):
            return deleted_count > 0

        logger.info(f"🗑️ 删除空文件夹: {directory}")
        try:
            shutil.rmtree(directory)
        except OSError as e:
            logger.error(f"❌ 删除文件夹失败 {directory}: {e}")
            raise LeafPolicyError(f"删除文件夹失败: {directory}", e) from e
        return True


POLICIES: Dict[str, Type[LeafPolicy]] = {
    CompressPolicy.name: CompressPolicy,
    CleanPolicy.name: CleanPolicy,
}


def get_policy(mode: str) -> LeafPolicy:
    """
    根据模式名创建策略实例

    Raises:
        ValueError: 未知模式
    """
    try:
        return POLICIES[mode]()
    except KeyError:
        raise ValueError(f"Invalid mode: {mode}. Use one of: {', '.join(POLICIES)}") from None
