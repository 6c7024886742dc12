"""
전략 모듈.

[ 전략 등록 방식 ]
    @register("전략이름") 데코레이터를 붙이면 STRATEGY_REGISTRY에 자동 등록.
    run_simulation.py / SimulationDriver에서 이름만으로 전략 클래스를 찾아 생성할 수 있다.

[ 기본 전략 ]
    session      - 세션별 전략 선택 (ASIAN → asian_scalp, LONDON/NEW_YORK → trend_follow)
    asian_scalp  - RSI 과매도/과매수 역추세
    trend_follow - MA 정배열/역배열 추세추종

[ 새 전략 추가 방법 ]
    1. 이 디렉토리에 새 .py 파일 생성
    2. TradingStrategy를 상속받는 클래스 작성
    3. @register("이름") 데코레이터 추가
    4. config.yaml에서 strategy.name을 해당 이름으로 설정

[ 파라미터 검증 ]
    create_strategy()는 클래스의 DEFAULT_PARAMS에 없는 키를 거부한다 (새 전략은 모든 파라미터의 기본값을 선언).
"""

from importlib import import_module
from pathlib import Path
from typing import Any

from sentinel_trader.core.trading_strategy import TradingStrategy

# 전략 이름 → 전략 클래스 매핑
STRATEGY_REGISTRY: dict[str, type[TradingStrategy]] = {}


def register(name: str):
    """전략 클래스를 STRATEGY_REGISTRY에 등록하는 데코레이터."""
    def decorator(cls: type[TradingStrategy]):
        STRATEGY_REGISTRY[name] = cls
        return cls
    return decorator


def create_strategy(name: str, params: dict[str, Any] | None = None) -> TradingStrategy:
    """이름으로 전략 인스턴스를 생성.

    Args:
        name: 등록된 전략 이름 (예: "session", "trend_follow")
        params: 전략 파라미터 (각 전략의 DEFAULT_PARAMS를 오버라이드)

    Raises:
        ValueError: 등록되지 않은 전략 이름, 또는 DEFAULT_PARAMS에 없는 파라미터 키 (-p 오타 등)
    """
    defaults = strategy_params(name)
    unknown = sorted(set(params or {}) - set(defaults))
    if unknown:
        raise ValueError(f"전략 '{name}'에 없는 파라미터: {unknown}. 사용 가능: {sorted(defaults)}")
    return STRATEGY_REGISTRY[name](params=params)


def strategy_params(name: str) -> dict[str, Any]:
    """전략의 기본 파라미터 (DEFAULT_PARAMS 복사본).

    Raises:
        ValueError: 등록되지 않은 전략 이름
    """
    if name not in STRATEGY_REGISTRY:
        available = ", ".join(sorted(STRATEGY_REGISTRY.keys()))
        raise ValueError(f"알 수 없는 전략: '{name}'. 사용 가능: {available}")
    return dict(getattr(STRATEGY_REGISTRY[name], "DEFAULT_PARAMS", {}))


def list_strategies() -> list[str]:
    """등록된 전략 이름 목록 반환."""
    return sorted(STRATEGY_REGISTRY.keys())


def _auto_discover():
    """이 디렉토리의 모든 전략 모듈을 자동 임포트하여 @register가 실행되게 한다."""
    strategies_dir = Path(__file__).parent
    for py_file in sorted(strategies_dir.glob("*.py")):
        if py_file.name.startswith("_"):
            continue
        import_module(f"sentinel_trader.strategies.{py_file.stem}")


# 모듈 로드 시 자동 탐색
_auto_discover()
