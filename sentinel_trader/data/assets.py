"""
종목 설정 테이블.

[ 역할 ]
    거래 가능한 종목의 정적 설정(이름, 레버리지, 스프레드, 권장 타임프레임) 조회.
    스프레드는 손절/익절/트레일링 거리 계산의 기본 단위로 쓰인다.

[ 호출하는 곳 ]
    - simulation/engine.py에서 종목 검증 및 스프레드 조회
    - run_simulation.py의 --asset 선택지
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AssetConfig:
    """종목별 정적 설정."""
    name: str
    leverage: int
    spread: float
    recommended_timeframe: str


ASSETS: dict[str, AssetConfig] = {
    # 코인은 노이즈가 커서 상위 타임프레임 권장
    "BTCUSD": AssetConfig(name="Bitcoin", leverage=100, spread=20.0, recommended_timeframe="H1"),
    "XAUUSD": AssetConfig(name="Gold", leverage=200, spread=0.2, recommended_timeframe="M15"),
    "EURUSD": AssetConfig(name="Euro", leverage=500, spread=0.0001, recommended_timeframe="M5"),
}

DEFAULT_ASSET = "XAUUSD"


def get_asset_config(asset: str) -> AssetConfig:
    """종목 설정 조회.

    Raises:
        ValueError: 등록되지 않은 종목 코드
    """
    if asset not in ASSETS:
        available = ", ".join(sorted(ASSETS.keys()))
        raise ValueError(f"알 수 없는 종목: '{asset}'. 사용 가능: {available}")
    return ASSETS[asset]


def list_assets() -> list[str]:
    return sorted(ASSETS.keys())
