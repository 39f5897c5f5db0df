"""
Evaluator Module - 8대 차원 평가
분석기 결과로부터 차원 점수, 가중 점수, 등급, 추천 단계를 계산합니다.

차원 점수는 DIMENSION_SCORERS 레지스트리에 등록된 함수로 계산됩니다.
가중치/등급 사다리는 ScoringConfig에서 가져옵니다.
"""

import math
import logging
from typing import Callable, Dict, Optional

from config.scoring import (
    ScoringConfig,
    DEFAULT_SCORING_CONFIG,
    DEFAULT_GRADE,
    DEFAULT_RECOMMENDATION
)
from .normalizer import RawPlatformRecord
from .metrics import score_engagement_rate
from .content_analyzer import grade_safety_score

logger = logging.getLogger(__name__)


DimensionScorer = Callable[[RawPlatformRecord, Dict, Dict], float]


def _mean(values) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 50.0


# ============== 차원 점수 함수 ==============

def score_brand_fit(record: RawPlatformRecord, metrics: Dict, analyses: Dict) -> float:
    """오디언스 품질과 브랜드 적합성 리스크의 역수 평균"""
    return (0.5 * analyses['audience']['quality_score']
            + 0.5 * (100 - analyses['risk']['factors']['brand_fit_risk']))


def score_content_quality(record: RawPlatformRecord, metrics: Dict, analyses: Dict) -> float:
    return _mean(analyses['content']['quality'].values())


def score_engagement(record: RawPlatformRecord, metrics: Dict, analyses: Dict) -> float:
    return score_engagement_rate(metrics['engagement_rate'], record.has('engagement'))


def score_audience_profile(record: RawPlatformRecord, metrics: Dict, analyses: Dict) -> float:
    return analyses['audience']['quality_score']


def score_professionalism(record: RawPlatformRecord, metrics: Dict, analyses: Dict) -> float:
    return analyses['business']['collaboration']['professionalism']


def score_business_ability(record: RawPlatformRecord, metrics: Dict, analyses: Dict) -> float:
    """전환 역량 3요소와 ROI 잠재력의 평균"""
    business = analyses['business']
    values = list(business['conversion'].values()) + [business['market_value']['roi_potential']]
    return _mean(values)


def score_brand_safety(record: RawPlatformRecord, metrics: Dict, analyses: Dict) -> float:
    """
    외부 등급 신호가 있으면 등급 기반 (A 90 / B 75 / C 60 / 그 외 40),
    없으면 콘텐츠 분석기의 안전 점수
    """
    if record.grade:
        return grade_safety_score(record.grade)
    return analyses['content']['brand_safety']['safety_score']


def score_growth(record: RawPlatformRecord, metrics: Dict) -> float:
    if not record.has('growth'):
        return 50.0
    monthly = metrics['growth']['monthly']
    if monthly > 0:
        return 80.0
    if monthly == 0:
        return 50.0
    return 30.0


def score_stability(record: RawPlatformRecord, metrics: Dict, analyses: Dict) -> float:
    """게시 일관성 60% + 성장 추세 40%"""
    return 0.6 * metrics['post_frequency']['consistency'] + 0.4 * score_growth(record, metrics)


DIMENSION_SCORERS: Dict[str, DimensionScorer] = {
    'brand_fit': score_brand_fit,
    'content_quality': score_content_quality,
    'engagement_rate': score_engagement,
    'audience_profile': score_audience_profile,
    'professionalism': score_professionalism,
    'business_ability': score_business_ability,
    'brand_safety': score_brand_safety,
    'stability': score_stability,
}


# ============== 등급 / 추천 ==============

def assign_grade(score: float, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> str:
    """등급 사다리 적용 (S ~ D)"""
    for threshold, grade in config.grade_thresholds:
        if score >= threshold:
            return grade
    return DEFAULT_GRADE


def assign_recommendation(score: float, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> str:
    for threshold, tier in config.recommendation_thresholds:
        if score >= threshold:
            return tier
    return DEFAULT_RECOMMENDATION


def calculate_weighted_score(dimensions: Dict[str, float],
                             config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> float:
    """차원 점수 × 가중치 합 (소수 둘째 자리)"""
    total = sum(dimensions[name] * weight for name, weight in config.dimension_weights.items())
    return round(total, 2)


def evaluate_dimensions(record: RawPlatformRecord, metrics: Dict, analyses: Dict,
                        config: Optional[ScoringConfig] = None,
                        scorers: Optional[Dict[str, DimensionScorer]] = None) -> Dict:
    """
    8대 차원 평가

    Args:
        record: 정규화 레코드
        metrics: 추출된 지표
        analyses: AnalyzerSet.run() 결과
        config: 스코어링 설정 (기본 설정 사용 시 생략)
        scorers: 차원 점수 함수 레지스트리 (교체용)

    Returns:
        {'overall_score', 'dimensions', 'weighted_score', 'grade', 'recommendation'}
    """
    config = config or DEFAULT_SCORING_CONFIG
    scorers = scorers or DIMENSION_SCORERS

    dimensions = {}
    for name in config.dimension_weights:
        value = scorers[name](record, metrics, analyses)
        dimensions[name] = round(max(0.0, min(100.0, value)), 1)

    overall_score = int(math.floor(sum(dimensions.values()) / len(dimensions) + 0.5))
    weighted_score = calculate_weighted_score(dimensions, config)

    logger.debug(f"평가 완료: {record.id} weighted={weighted_score}")

    return {
        'overall_score': overall_score,
        'dimensions': dimensions,
        'weighted_score': weighted_score,
        'grade': assign_grade(weighted_score, config),
        'recommendation': assign_recommendation(weighted_score, config)
    }
