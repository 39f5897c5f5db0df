"""
스코어링 설정 - 평가 차원/매칭 카테고리 가중치 테이블
====================================================

가중치는 코드 리터럴이 아니라 버전이 붙은 설정 객체로 관리합니다.
A/B 테스트용 가중치는 JSON 파일로 작성하고 환경변수 KOL_SCORING_CONFIG로 지정합니다.

JSON 예시:
{
  "version": "1.1-ab",
  "dimension_weights": {"brand_fit": 0.2, ...},
  "match_weights": {"brand_tone_match": 0.3, ...}
}
"""
import os
import json
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"

# 8대 평가 차원 가중치 (합계 1.0)
DIMENSION_WEIGHTS = {
    'brand_fit': 0.15,
    'content_quality': 0.20,
    'engagement_rate': 0.15,
    'audience_profile': 0.10,
    'professionalism': 0.15,
    'business_ability': 0.10,
    'brand_safety': 0.10,
    'stability': 0.05
}

# 브랜드 매칭 5개 카테고리 가중치 (합계 1.0)
MATCH_WEIGHTS = {
    'brand_tone_match': 0.25,
    'audience_match': 0.25,
    'content_type_match': 0.20,
    'market_reach': 0.15,
    'engagement_potential': 0.15
}

# 등급 사다리 (내림차순, 마지막은 기본 등급)
GRADE_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (95, 'S'),
    (90, 'A+'),
    (85, 'A'),
    (80, 'A-'),
    (75, 'B+'),
    (70, 'B'),
    (65, 'B-'),
    (60, 'C+'),
    (55, 'C'),
    (50, 'C-'),
)
DEFAULT_GRADE = 'D'

# 등급 순서 (낮음 -> 높음)
GRADE_ORDER = ('D', 'C-', 'C', 'C+', 'B-', 'B', 'B+', 'A-', 'A', 'A+', 'S')

RECOMMENDATION_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (85, 'strongly_recommended'),
    (75, 'recommended'),
    (60, 'conditional'),
)
DEFAULT_RECOMMENDATION = 'not_recommended'

CONFIG_ENV_VAR = "KOL_SCORING_CONFIG"


class ScoringConfigError(ValueError):
    """스코어링 설정 오류"""


def _check_weights(name: str, weights: Dict[str, float], expected_keys) -> None:
    if set(weights) != set(expected_keys):
        missing = sorted(set(expected_keys) - set(weights))
        extra = sorted(set(weights) - set(expected_keys))
        raise ScoringConfigError(f"{name} 키 불일치 (누락: {missing}, 초과: {extra})")
    if any(w < 0 for w in weights.values()):
        raise ScoringConfigError(f"{name}에 음수 가중치가 있습니다")
    total = sum(weights.values())
    if abs(total - 1.0) > 1e-6:
        raise ScoringConfigError(f"{name} 합계가 1.0이 아닙니다: {total}")


@dataclass(frozen=True)
class ScoringConfig:
    """
    버전이 붙은 스코어링 설정

    Evaluator와 Matcher에 인자로 전달됩니다.
    생성 시 가중치 합계(1.0)와 키 구성을 검증합니다.
    """
    version: str = "1.0"
    dimension_weights: Dict[str, float] = field(default_factory=lambda: dict(DIMENSION_WEIGHTS))
    match_weights: Dict[str, float] = field(default_factory=lambda: dict(MATCH_WEIGHTS))
    grade_thresholds: Tuple[Tuple[float, str], ...] = GRADE_THRESHOLDS
    recommendation_thresholds: Tuple[Tuple[float, str], ...] = RECOMMENDATION_THRESHOLDS

    def __post_init__(self):
        _check_weights('dimension_weights', self.dimension_weights, DIMENSION_WEIGHTS)
        _check_weights('match_weights', self.match_weights, MATCH_WEIGHTS)

        cutoffs = [t for t, _ in self.grade_thresholds]
        if cutoffs != sorted(cutoffs, reverse=True):
            raise ScoringConfigError("grade_thresholds는 내림차순이어야 합니다")
        cutoffs = [t for t, _ in self.recommendation_thresholds]
        if cutoffs != sorted(cutoffs, reverse=True):
            raise ScoringConfigError("recommendation_thresholds는 내림차순이어야 합니다")

    @classmethod
    def from_dict(cls, data: Dict) -> 'ScoringConfig':
        """딕셔너리에서 설정 생성 (누락 항목은 기본값)"""
        kwargs = {'version': str(data.get('version', '1.0'))}
        if 'dimension_weights' in data:
            kwargs['dimension_weights'] = {k: float(v) for k, v in data['dimension_weights'].items()}
        if 'match_weights' in data:
            kwargs['match_weights'] = {k: float(v) for k, v in data['match_weights'].items()}
        if 'grade_thresholds' in data:
            kwargs['grade_thresholds'] = tuple((float(t), str(g)) for t, g in data['grade_thresholds'])
        if 'recommendation_thresholds' in data:
            kwargs['recommendation_thresholds'] = tuple(
                (float(t), str(r)) for t, r in data['recommendation_thresholds']
            )
        return cls(**kwargs)

    def to_dict(self) -> Dict:
        return {
            'version': self.version,
            'dimension_weights': dict(self.dimension_weights),
            'match_weights': dict(self.match_weights),
            'grade_thresholds': [list(t) for t in self.grade_thresholds],
            'recommendation_thresholds': [list(t) for t in self.recommendation_thresholds]
        }


DEFAULT_SCORING_CONFIG = ScoringConfig()


def load_scoring_config(path: Optional[str] = None) -> ScoringConfig:
    """
    JSON 파일에서 스코어링 설정을 로드합니다.

    Args:
        path: 설정 파일 경로 (없으면 KOL_SCORING_CONFIG 환경변수)

    Returns:
        ScoringConfig (경로가 없으면 기본 설정)
    """
    path = path or os.getenv(CONFIG_ENV_VAR)
    if not path:
        return DEFAULT_SCORING_CONFIG

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = ScoringConfig.from_dict(data)
    logger.info(f"스코어링 설정 로드: {path} (version={config.version})")
    return config
