"""
설정 모듈 - 스코어링 가중치 및 통계 제공자 API 설정
================================================

scoring.py:
- DIMENSION_WEIGHTS: 8대 평가 차원 가중치
- MATCH_WEIGHTS: 브랜드 매칭 5개 카테고리 가중치
- ScoringConfig: 버전이 붙은 가중치 설정 (JSON 로드 지원)

social_blade.py:
- 통계 제공자 API 주소, 자격 증명, 재시도 설정
"""
from .scoring import (
    SCHEMA_VERSION,
    DIMENSION_WEIGHTS,
    MATCH_WEIGHTS,
    ScoringConfig,
    ScoringConfigError,
    DEFAULT_SCORING_CONFIG,
    load_scoring_config
)
from .social_blade import (
    SOCIAL_BLADE_BASE_URL,
    SOCIAL_BLADE_CLIENT_ID,
    SOCIAL_BLADE_TOKEN
)
