import threading
from typing import Dict, Optional

from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    BarColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
    MofNCompleteColumn,
    TaskID,
)


class ProgressTicket:
    """单个压缩任务持有的进度条，完成后必须clear"""

    def __init__(self, hub: "ProgressHub", task_id: TaskID, total: int):
        self._hub = hub
        self.task_id = task_id
        self.total = total
        self.completed = 0
        self.cleared = False

    def advance(self, n: int = 1):
        if self.cleared:
            return
        self.completed += n
        self._hub._advance(self, n)

    def clear(self):
        """移除进度条，可重复调用"""
        if self.cleared:
            return
        self.cleared = True
        self._hub._remove(self)


class ProgressHub:
    """
    多进度条复用器

    并发的多个压缩任务各自注册一个进度条，共用同一个rich Progress显示，
    注册/推进/移除都在锁内完成，允许任意线程交错调用。
    """

    def __init__(self, enabled: bool = True, console: Optional[Console] = None):
        self.enabled = enabled
        self.console = console or Console(stderr=True)
        self._lock = threading.Lock()
        self._tickets: Dict[TaskID, ProgressTicket] = {}
        self._started = False
        self.progress = Progress(
            SpinnerColumn(spinner_name="dots2", style="green"),
            TimeElapsedColumn(),
            BarColumn(
                bar_width=40,
                style="blue",
                complete_style="cyan",
                finished_style="green bold"
            ),
            MofNCompleteColumn(),
            TextColumn("files"),
            TimeRemainingColumn(),
            TextColumn("[magenta]{task.description}"),
            console=self.console,
            transient=True,
            disable=not enabled,
        )

    @property
    def active_count(self) -> int:
        with self._lock:
            return len(self._tickets)

    def start(self):
        with self._lock:
            if not self._started:
                self.progress.start()
                self._started = True

    def stop(self):
        with self._lock:
            if self._started:
                self.progress.stop()
                self._started = False

    def register(self, total: int, description: str) -> ProgressTicket:
        """创建新的进度条并返回对应的ticket"""
        with self._lock:
            task_id = self.progress.add_task(description, total=total)
            ticket = ProgressTicket(self, task_id, total)
            self._tickets[task_id] = ticket
            return ticket

    def _advance(self, ticket: ProgressTicket, n: int):
        with self._lock:
            if ticket.task_id in self._tickets:
                self.progress.advance(ticket.task_id, n)

    def _remove(self, ticket: ProgressTicket):
        with self._lock:
            if self._tickets.pop(ticket.task_id, None) is not None:
                self.progress.remove_task(ticket.task_id)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
