"""
시장 코멘트(어드바이저) 추상 클래스 정의.

[ 역할 ]
    세션 전환 시점에 시장 상황 요약 텍스트를 만들어 주는 외부 협력자 인터페이스.
    결과는 표시 전용이며 포지션/잔고 판단에 절대 쓰이지 않는다.

[ 구현체 ]
    - advisors/local_advisors.py::NullAdvisor       (고정 문구 반환, 기본값)
    - advisors/local_advisors.py::HeuristicAdvisor  (최근 캔들로 횡보/추세, 지지/저항 요약)

[ 호출하는 곳 ]
    - simulation/advisory.py::AdvisoryDispatcher가 백그라운드 스레드에서 advise() 호출
      (예외는 디스패처가 잡아서 FALLBACK_TEXT로 대체)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from sentinel_trader.core.market_data import Candle, TrendStatus

FALLBACK_TEXT = "AI Connection Interrupted. Using internal heuristic fallback."
EMPTY_TEXT = "AI Analysis unavailable."
OFFLINE_TEXT = "AI System: API Key missing. Running in autonomous fail-safe mode."


@dataclass(frozen=True)
class AdvisoryRequest:
    """advise() 입력. 세션 전환 시점의 스냅샷."""
    asset: str
    price: float
    trend: TrendStatus
    rsi: float
    candles: tuple[Candle, ...]   # 최근 5개


class Advisor(ABC):
    """어드바이저 추상 클래스."""

    @abstractmethod
    def advise(self, request: AdvisoryRequest) -> str:
        """시장 코멘트 생성. 실패 시 예외를 던져도 된다 (디스패처가 처리)."""
        ...
