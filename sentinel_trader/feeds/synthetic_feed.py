"""
합성 가격 피드 구현 (랜덤워크 + 모멘텀).

[ 역할 ]
    실제 시세 없이 다음 캔들을 생성하는 core/market_data.py::PriceFeed 구현체.
    종목별 마지막 가격과 모멘텀(AssetState)을 보관하며, 매 틱 노이즈 + 모멘텀 + 세션 바이어스로
    가격 변화를 만든다.

[ 캔들 생성 흐름 ]
    next_candle() 호출 시:
        1. noise ∈ [-1, 1] 추출
        2. momentum = momentum * 0.9 + noise * 0.1 + session_bias * 0.05
        3. change = (momentum + noise) * 종목 기본변동성 * volatility_multiplier
        4. open = 직전 가격, close = open + change, high/low는 몸통 밖으로 최대 변동성*0.5
        5. 마지막 가격 갱신 후 지표(MA7, MA25, RSI14) 계산

[ 재현성 ]
    numpy Generator를 주입받는다. 같은 seed + 같은 clock이면 같은 캔들 시퀀스.

[ 호출하는 곳 ]
    - simulation/engine.py::SimulationDriver.tick()
"""

import math
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Sequence

import numpy as np

from sentinel_trader.core.market_data import Candle, PriceFeed
from sentinel_trader.data.indicators import (
    MA_FAST_WINDOW,
    MA_SLOW_WINDOW,
    RSI_PERIOD,
    moving_average,
    rsi,
)

# 종목별 시작 가격
SEED_PRICES: dict[str, float] = {
    "BTCUSD": 65000.0,
    "XAUUSD": 2350.0,
    "EURUSD": 1.08,
}

# 종목별 기본 변동성 (가격 단위)
BASE_VOLATILITY: dict[str, float] = {
    "BTCUSD": 50.0,
    "XAUUSD": 2.0,
    "EURUSD": 0.0005,
}

MOMENTUM_DECAY = 0.9
NOISE_WEIGHT = 0.1
BIAS_WEIGHT = 0.05
WICK_RATIO = 0.5


@dataclass
class AssetState:
    """종목별로 틱 사이에 유지되는 상태. 종목 전환 시에도 초기화되지 않는다."""
    last_price: float
    momentum: float = 0.0


class SyntheticPriceFeed(PriceFeed):
    """랜덤워크 + 모멘텀 합성 피드.

    사용법:
        feed = SyntheticPriceFeed(rng=np.random.default_rng(42))
        candle = feed.next_candle("XAUUSD", history, volatility_multiplier=0.5, session_bias=0.0)
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        clock: Callable[[], float] = time.time,
        seed_prices: dict[str, float] | None = None,
        base_volatility: dict[str, float] | None = None,
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.clock = clock
        self.base_volatility = dict(base_volatility or BASE_VOLATILITY)
        self._states: dict[str, AssetState] = {}
        for asset, price in (seed_prices or SEED_PRICES).items():
            self.seed_asset(asset, price)

    def seed_asset(self, asset: str, price: float, momentum: float = 0.0) -> None:
        """종목 상태를 지정 가격으로 초기화.

        Raises:
            ValueError: 가격이 유한한 양수가 아님
        """
        if not math.isfinite(price) or price <= 0:
            raise ValueError(f"잘못된 시작 가격: {asset}={price}")
        if not math.isfinite(momentum):
            raise ValueError(f"잘못된 모멘텀: {asset}={momentum}")
        self._states[asset] = AssetState(last_price=float(price), momentum=float(momentum))

    def get_state(self, asset: str) -> AssetState:
        """종목 상태 조회 (복사본).

        Raises:
            ValueError: 시작 가격이 등록되지 않은 종목
        """
        state = self._require_state(asset)
        return AssetState(last_price=state.last_price, momentum=state.momentum)

    def get_last_price(self, asset: str) -> float:
        return self._require_state(asset).last_price

    def next_candle(
        self,
        asset: str,
        history: Sequence[Candle],
        volatility_multiplier: float,
        session_bias: float,
    ) -> Candle:
        state = self._require_state(asset)
        volatility = self.base_volatility[asset]

        noise = float(self.rng.uniform(-1.0, 1.0))
        momentum = state.momentum * MOMENTUM_DECAY + noise * NOISE_WEIGHT + session_bias * BIAS_WEIGHT
        change = (momentum + noise) * volatility * volatility_multiplier

        open_price = state.last_price
        close = open_price + change
        high = max(open_price, close) + float(self.rng.uniform(0.0, WICK_RATIO)) * volatility
        low = min(open_price, close) - float(self.rng.uniform(0.0, WICK_RATIO)) * volatility

        if not all(math.isfinite(v) for v in (momentum, close, high, low)):
            raise ValueError(f"비정상 가격 생성: {asset} close={close}, momentum={momentum}")

        state.momentum = momentum
        state.last_price = close

        closes = [c.close for c in history] + [close]
        return Candle(
            time=datetime.fromtimestamp(self.clock()).strftime("%H:%M:%S"),
            open=open_price,
            high=high,
            low=low,
            close=close,
            ma_fast=moving_average(closes, MA_FAST_WINDOW),
            ma_slow=moving_average(closes, MA_SLOW_WINDOW),
            rsi=rsi(closes, RSI_PERIOD),
        )

    def _require_state(self, asset: str) -> AssetState:
        if asset not in self._states:
            raise ValueError(f"시작 가격이 없는 종목: {asset}")
        return self._states[asset]
