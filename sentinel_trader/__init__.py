"""
=============================================================================
트레이딩 에이전트 시뮬레이터 (Sentinel Trader)
=============================================================================

[ 시스템 전체 구조 ]

    run_simulation.py (진입점)
         │
         ├── utils/config.py        ← config.yaml 설정 로드
         ├── utils/logger.py        ← 로깅
         │
         └── simulation/engine.py   ← 틱 단위 실행 엔진 (SimulationDriver)
               │
               ├── simulation/session.py   ← 틱 카운터 → 세션 (변동성/바이어스)
               ├── feeds/synthetic_feed.py ← 합성 캔들 생성 (+ data/indicators.py 지표)
               ├── data/indicators.py      ← 추세 판별
               ├── simulation/risk.py      ← 손절/익절, 추세 무효화, 계단식 트레일링
               ├── strategies/             ← 진입 시그널 (세션별 전략 선택)
               ├── data/portfolio.py       ← 잔고/포지션/청산 기록
               ├── simulation/events.py    ← 이벤트 로그 (최근 50개)
               ├── simulation/advisory.py  ← 세션 전환 코멘트 (백그라운드, 표시 전용)
               └── simulation/metrics.py   ← 성과 지표 계산


[ 핵심 추상 클래스 (core/) - 모든 구현체의 부모 ]

    core/market_data.py::PriceFeed     → feeds/synthetic_feed.py::SyntheticPriceFeed
    core/trading_strategy.py           → strategies/session_strategy.py (기본)
                                         strategies/asian_scalp_strategy.py
                                         strategies/trend_follow_strategy.py
    core/advisor.py::Advisor           → advisors/local_advisors.py (Null / Heuristic)


[ 한 틱의 데이터 흐름 ]

    1. 틱 카운터로 세션 결정 (ASIAN / LONDON / NEW_YORK)
    2. PriceFeed가 다음 캔들 생성 (MA7, MA25, RSI14 포함)
    3. 추세 판별 (UP / DOWN / SIDEWAYS)
    4. 열린 포지션이 있으면 RiskManager가 평가 → 유지 또는 청산 (잔고 반영)
    5. 열린 포지션이 없으면 전략이 진입 시그널 판단 → 포지션 생성
    6. equity = 잔고 + 열린 포지션 손익
"""
