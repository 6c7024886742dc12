"""
어드바이저 비동기 호출 모듈.

[ 역할 ]
    세션 전환 시 어드바이저를 백그라운드에서 호출하고(fire-and-forget), 결과를 큐로 전달.
    tick()은 결과를 기다리지 않는다.

[ 규칙 ]
    - advise()의 예외는 여기서 잡아 WARNING 로그 후 FALLBACK_TEXT로 대체
    - 요청마다 증가하는 순번을 붙인다. 늦게 끝난 예전 요청이 최신 결과를 덮어쓰지 않는다
    - 진행 중인 요청을 취소하지 않는다

[ 호출하는 곳 ]
    - simulation/engine.py::SimulationDriver (세션 전환 시 submit, 매 틱 drain)
"""

import logging
import queue
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass

from sentinel_trader.core.advisor import EMPTY_TEXT, FALLBACK_TEXT, Advisor, AdvisoryRequest

logger = logging.getLogger("sentinel_trader.advisory")


@dataclass(frozen=True)
class AdvisoryResult:
    sequence: int
    asset: str
    text: str


class AdvisoryDispatcher:
    """어드바이저 백그라운드 호출기.

    사용 예:
        dispatcher = AdvisoryDispatcher(HeuristicAdvisor())
        dispatcher.submit(request)
        ...
        for result in dispatcher.drain():
            print(result.text)
        dispatcher.close()
    """

    def __init__(self, advisor: Advisor, executor: Executor | None = None):
        self.advisor = advisor
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="advisory")
        self._results: queue.Queue[AdvisoryResult] = queue.Queue()
        self._lock = threading.Lock()
        self._sequence = 0
        self._latest: AdvisoryResult | None = None

    @property
    def latest(self) -> AdvisoryResult | None:
        """가장 최근 요청 기준으로 표시할 결과."""
        with self._lock:
            return self._latest

    def submit(self, request: AdvisoryRequest) -> int | None:
        """요청 제출. 순번 반환, 디스패처가 닫혀 있으면 None."""
        with self._lock:
            self._sequence += 1
            sequence = self._sequence
        try:
            self._executor.submit(self._run, sequence, request)
        except RuntimeError:
            logger.warning(f"어드바이저 요청 무시 (디스패처 종료됨): #{sequence}")
            return None
        logger.debug(f"어드바이저 요청 #{sequence}: {request.asset} @ {request.price:.5f}")
        return sequence

    def drain(self) -> list[AdvisoryResult]:
        """도착한 결과를 모두 꺼낸다 (완료 순서)."""
        results = []
        while True:
            try:
                results.append(self._results.get_nowait())
            except queue.Empty:
                return results

    def close(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def _run(self, sequence: int, request: AdvisoryRequest) -> None:
        try:
            text = self.advisor.advise(request)
        except Exception:
            logger.warning(f"어드바이저 호출 실패 #{sequence}, 기본 문구로 대체", exc_info=True)
            text = FALLBACK_TEXT
        if not text:
            text = EMPTY_TEXT

        result = AdvisoryResult(sequence=sequence, asset=request.asset, text=text)
        with self._lock:
            if self._latest is None or sequence > self._latest.sequence:
                self._latest = result
        self._results.put(result)
