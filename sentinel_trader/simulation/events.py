"""
이벤트 로그 모듈.

[ 역할 ]
    엔진이 남기는 관찰용 이벤트(진입, 청산, 트레일링, 세션 전환 등)를 최근 50개까지 보관.
    엔진은 이벤트를 다시 읽지 않는다. 로그 뷰어/CLI 출력 전용.
    추가되는 모든 이벤트는 "sentinel_trader.events" 로거에도 같이 기록된다.

[ 호출하는 곳 ]
    - simulation/engine.py, simulation/risk.py에서 이벤트 생성
"""

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterator

logger = logging.getLogger("sentinel_trader.events")


class Severity(Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    ADVISORY = "AI"


_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.SUCCESS: logging.INFO,
    Severity.ADVISORY: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Event:
    timestamp: str
    message: str
    severity: Severity = Severity.INFO

    @classmethod
    def at(cls, epoch_seconds: float, message: str, severity: Severity = Severity.INFO) -> "Event":
        """epoch 초를 HH:MM:SS 타임스탬프로 변환하여 생성."""
        return cls(
            timestamp=datetime.fromtimestamp(epoch_seconds).strftime("%H:%M:%S"),
            message=message,
            severity=severity,
        )


class EventLog:
    """고정 용량 이벤트 링 버퍼. 가득 차면 가장 오래된 이벤트부터 밀려난다."""

    def __init__(self, capacity: int = 50):
        self.capacity = capacity
        self._events: deque[Event] = deque(maxlen=capacity)

    def append(self, event: Event) -> None:
        self._events.append(event)
        logger.log(_LOG_LEVELS[event.severity], "[%s] %s", event.severity.value, event.message)

    def extend(self, events: list[Event]) -> None:
        for event in events:
            self.append(event)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def recent(self, n: int | None = None) -> list[Event]:
        events = list(self._events)
        return events if n is None else events[-n:]
