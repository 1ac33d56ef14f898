from __future__ import annotations

import heapq
import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# 時刻の取得元。テストではフェイク時計を差し込む
Clock = Callable[[], float]


@dataclass(order=True)
class _Task:
    due: float
    seq: int
    generation: int = field(compare=False)
    name: str = field(compare=False)
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


@dataclass(frozen=True)
class TimerHandle:
    seq: int
    name: str


class TimerQueue:
    """期限付きタスクのキュー（取り消し可能）。

    仕様:
    - time.sleep は使わず、`run_due()` が呼ばれた時点で期限を過ぎたタスクを実行する。
    - `cancel_all()` は世代番号を進め、それ以前に登録されたタスクは決して実行しない。
    - 実行中のタスクが新しいタスクを登録し、それも期限切れなら同じ `run_due()` 内で実行する。
    """

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._heap: list[_Task] = []
        self._by_seq: dict[int, _Task] = {}
        self._seq = itertools.count()
        self.generation = 0

    def now(self) -> float:
        return self._clock()

    def schedule(self, delay_s: float, callback: Callable[[], None], name: str = "") -> TimerHandle:
        task = _Task(
            due=self._clock() + max(0.0, float(delay_s)),
            seq=next(self._seq),
            generation=self.generation,
            name=name,
            callback=callback,
        )
        heapq.heappush(self._heap, task)
        self._by_seq[task.seq] = task
        return TimerHandle(task.seq, name)

    def cancel(self, handle: TimerHandle | None) -> bool:
        if handle is None:
            return False
        task = self._by_seq.pop(handle.seq, None)
        if task is None:
            return False
        task.cancelled = True
        return True

    def cancel_all(self) -> None:
        self.generation += 1
        for task in self._heap:
            task.cancelled = True
        self._heap.clear()
        self._by_seq.clear()

    def is_pending(self, handle: TimerHandle | None) -> bool:
        return handle is not None and handle.seq in self._by_seq

    def pending_count(self) -> int:
        return len(self._by_seq)

    def next_due_in(self) -> float | None:
        """次のタスクまでの残り秒。無ければ None。"""
        self._drop_cancelled()
        if not self._heap:
            return None
        return max(0.0, self._heap[0].due - self._clock())

    def run_due(self, now: float | None = None) -> int:
        """期限切れのタスクを期限順に実行し、実行した件数を返す。"""
        ran = 0
        while True:
            self._drop_cancelled()
            if not self._heap:
                break
            current = self._clock() if now is None else now
            if self._heap[0].due > current:
                break
            task = heapq.heappop(self._heap)
            self._by_seq.pop(task.seq, None)
            if task.generation != self.generation:
                continue
            logger.debug("timer fired: %s", task.name)
            task.callback()
            ran += 1
        return ran

    def _drop_cancelled(self) -> None:
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)
