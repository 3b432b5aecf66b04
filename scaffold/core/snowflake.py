"""雪花 ID 生成器：生成趋势递增的 64 位分布式唯一 ID。

位布局（高位到低位）：1 位符号 | 41 位毫秒时间戳 | 5 位数据中心 | 5 位机器 | 12 位序列号。
进程内应只构造一个实例，并显式传递给需要生成 ID 的调用方。
"""

import threading
import time
from typing import Callable, Optional

DEFAULT_EPOCH_MS = 1288834974657

WORKER_ID_BITS = 5
DATACENTER_ID_BITS = 5
SEQUENCE_BITS = 12

MAX_WORKER_ID = (1 << WORKER_ID_BITS) - 1
MAX_DATACENTER_ID = (1 << DATACENTER_ID_BITS) - 1
SEQUENCE_MASK = (1 << SEQUENCE_BITS) - 1

WORKER_ID_SHIFT = SEQUENCE_BITS
DATACENTER_ID_SHIFT = SEQUENCE_BITS + WORKER_ID_BITS
TIMESTAMP_SHIFT = SEQUENCE_BITS + WORKER_ID_BITS + DATACENTER_ID_BITS

# 时钟回拨不超过该毫秒数时等待追平，否则直接报错
CLOCK_BACKWARDS_TOLERANCE_MS = 5


class ClockMovedBackwardsError(RuntimeError):
    """系统时钟回拨超过容忍范围。"""


def _current_millis() -> int:
    return time.time_ns() // 1_000_000


class SnowflakeIdGenerator:
    """线程安全的雪花 ID 生成器。"""

    def __init__(
        self,
        worker_id: int,
        datacenter_id: int,
        *,
        epoch_ms: int = DEFAULT_EPOCH_MS,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        if not 0 <= worker_id <= MAX_WORKER_ID:
            raise ValueError(f"worker_id must be between 0 and {MAX_WORKER_ID}")
        if not 0 <= datacenter_id <= MAX_DATACENTER_ID:
            raise ValueError(f"datacenter_id must be between 0 and {MAX_DATACENTER_ID}")
        self.worker_id = worker_id
        self.datacenter_id = datacenter_id
        self.epoch_ms = epoch_ms
        self._clock = clock or _current_millis
        self._lock = threading.Lock()
        self._last_timestamp = -1
        self._sequence = 0

    def next_id(self) -> int:
        with self._lock:
            timestamp = self._clock()
            if timestamp < self._last_timestamp:
                offset = self._last_timestamp - timestamp
                if offset > CLOCK_BACKWARDS_TOLERANCE_MS:
                    raise ClockMovedBackwardsError(f"clock moved backwards by {offset} ms")
                timestamp = self._wait_until(self._last_timestamp)

            if timestamp == self._last_timestamp:
                self._sequence = (self._sequence + 1) & SEQUENCE_MASK
                if self._sequence == 0:
                    timestamp = self._wait_until(self._last_timestamp + 1)
            else:
                self._sequence = 0

            self._last_timestamp = timestamp
            return (
                ((timestamp - self.epoch_ms) << TIMESTAMP_SHIFT)
                | (self.datacenter_id << DATACENTER_ID_SHIFT)
                | (self.worker_id << WORKER_ID_SHIFT)
                | self._sequence
            )

    def next_id_str(self) -> str:
        return str(self.next_id())

    def parse(self, snowflake_id: int) -> dict[str, int]:
        """拆解 ID 各组成部分，便于排查问题。"""
        return {
            "timestamp": (snowflake_id >> TIMESTAMP_SHIFT) + self.epoch_ms,
            "datacenter_id": (snowflake_id >> DATACENTER_ID_SHIFT) & MAX_DATACENTER_ID,
            "worker_id": (snowflake_id >> WORKER_ID_SHIFT) & MAX_WORKER_ID,
            "sequence": snowflake_id & SEQUENCE_MASK,
        }

    def _wait_until(self, target: int) -> int:
        timestamp = self._clock()
        while timestamp < target:
            time.sleep(0.0001)
            timestamp = self._clock()
        return timestamp
