"""
네트워크 없이 동작하는 어드바이저 구현.

[ 포함 클래스 ]
    NullAdvisor      - 항상 오프라인 고정 문구 반환 (API 키 없는 환경)
    HeuristicAdvisor - 최근 캔들로 횡보/추세 판단, 스캘핑/스윙 제안, 지지/저항 계산

[ 호출하는 곳 ]
    - run_simulation.py의 --advisor 옵션
    - simulation/advisory.py::AdvisoryDispatcher (백그라운드 스레드에서 advise 호출)
"""

from sentinel_trader.core.advisor import OFFLINE_TEXT, Advisor, AdvisoryRequest
from sentinel_trader.core.market_data import TrendStatus


class NullAdvisor(Advisor):
    def advise(self, request: AdvisoryRequest) -> str:
        return OFFLINE_TEXT


class HeuristicAdvisor(Advisor):
    """규칙 기반 시장 요약.

    횡보(SIDEWAYS)면 "Scalp", 추세(UP/DOWN)면 "Swing"을 제안하고
    전달받은 캔들의 최저가/최고가를 지지/저항으로 제시한다.
    """

    def advise(self, request: AdvisoryRequest) -> str:
        if not request.candles:
            raise ValueError("캔들 없이 코멘트 생성 불가")

        candles = request.candles
        movement = abs(candles[-1].close - candles[0].close)
        support = min(c.low for c in candles)
        resistance = max(c.high for c in candles)

        if request.trend == TrendStatus.SIDEWAYS:
            outlook = "Ranging market. Strategy: Scalp."
        else:
            outlook = f"Trending {request.trend.value}. Strategy: Swing."

        return (
            f"{request.asset} {request.price:.4f} | {outlook} "
            f"Support {support:.4f}, Resistance {resistance:.4f}. "
            f"RSI {request.rsi:.1f}, {len(candles)}-candle move {movement:.4f}."
        )
