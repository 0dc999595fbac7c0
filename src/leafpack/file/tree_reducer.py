import os
import threading
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Callable, List, Optional, Tuple

from loguru import logger

from leafpack.error.errors import BranchIOError
from leafpack.file.leaf_policy import LeafPolicy
from leafpack.tui.progress_hub import ProgressHub


class TreeReducer:
    """
    并行深度优先遍历目录树

    每个目录列出后分为文件和子目录：没有子目录的是叶子，调用一次策略；
    否则并行递归所有子目录，把各子树访问到的文件列表拼接起来。
    某个子树失败只丢弃该子树，不影响兄弟子树；只有根目录失败才向上抛出。
    """

    def __init__(self, policy: LeafPolicy, num_threads: int = 4,
                 hub: Optional[ProgressHub] = None):
        if num_threads < 1:
            raise ValueError(f"num_threads 必须大于0: {num_threads}")
        self.policy = policy
        self.num_threads = num_threads
        self.hub = hub
        self._executor = None
        self._lock = threading.Lock()
        self.stats = {'leaves': 0, 'acted': 0, 'failed': 0}

    def reduce(self, path: str) -> List[str]:
        """
        遍历并处理整棵目录树

        Args:
            path: 根目录

        Returns:
            List[str]: 所有成功子树中访问到的文件路径

        Raises:
            BranchIOError: 根目录读取失败
            LeafPackError: 根目录本身是叶子且策略失败
        """
        self._reset_counts()
        with ThreadPoolExecutor(max_workers=self.num_threads,
                                thread_name_prefix='leafpack') as executor:
            self._executor = executor
            try:
                return executor.submit(self._reduce_directory, path).result()
            finally:
                self._executor = None

    def _reset_counts(self):
        with self._lock:
            for key in self.stats:
                self.stats[key] = 0

    def _update_counts(self, **counts):
        with self._lock:
            for key, value in counts.items():
                self.stats[key] += value

    @staticmethod
    def _list_entries(path: str) -> List[os.DirEntry]:
        try:
            with os.scandir(path) as it:
                return list(it)
        except OSError as e:
            raise BranchIOError(f"读取目录失败: {path}: {e}", e) from e

    @staticmethod
    def _classify_entries(entries: List[os.DirEntry]) -> Tuple[List[str], List[str]]:
        """把一批条目分为 (文件, 子目录)，单个条目出错直接忽略"""
        files = []
        subdirs = []
        for entry in entries:
            try:
                if entry.is_file():
                    files.append(entry.path)
                elif entry.is_dir():
                    subdirs.append(entry.path)
                else:
                    logger.debug(f"⏭️ 跳过非文件非目录条目: {entry.path}")
            except OSError:
                continue
        return files, subdirs

    def _partition_entries(self, path: str) -> Tuple[List[str], List[str]]:
        """列出目录，按线程数分批并行判断条目类型"""
        entries = self._list_entries(path)
        batches = [entries[i::self.num_threads] for i in range(self.num_threads)]
        files = []
        subdirs = []
        for batch_files, batch_subdirs in self._parallel_map(self._classify_entries,
                                                             [b for b in batches if b]):
            files.extend(batch_files)
            subdirs.extend(batch_subdirs)
        files.sort()
        subdirs.sort()
        return files, subdirs

    def _reduce_directory(self, path: str) -> List[str]:
        files, subdirs = self._partition_entries(path)

        if not subdirs:
            return self._visit_leaf(path, files, subdirs)

        visited = []
        for branch_files in self._parallel_map(self._reduce_branch, subdirs):
            visited.extend(branch_files)
        return visited

    def _visit_leaf(self, path: str, files: List[str], subdirs: List[str]) -> List[str]:
        try:
            acted = self.policy.process(path, files, subdirs, self.hub)
        except Exception as e:
            logger.error(f"❌ 处理目录出错 {path}: {e}")
            raise
        self._update_counts(leaves=1, acted=1 if acted else 0)
        return files

    def _reduce_branch(self, path: str) -> List[str]:
        """子树出错时记录日志并返回空列表，不影响兄弟子树"""
        try:
            return self._reduce_directory(path)
        except Exception as e:
            logger.error(f"❌ 子目录处理失败，已跳过 {path}: {e}")
            self._update_counts(failed=1)
            return []

    def _parallel_map(self, func: Callable, items: list) -> list:
        """
        在线程池中并行执行 func，按 items 顺序返回结果

        等待时如果子任务还在排队，就取消它并在当前线程直接执行，
        线程池再小也不会因为嵌套等待而死锁。
        """
        pending: List[Tuple[object, Future]] = [
            (item, self._executor.submit(func, item))
            for item in items
        ]
        results = []
        for item, future in pending:
            if future.cancel():
                results.append(func(item))
            else:
                results.append(future.result())
        return results
