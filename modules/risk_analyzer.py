"""
Risk Analyzer Module - 협업 리스크 평가
콘텐츠 / 평판 / 법률 / 브랜드 적합성 4개 리스크 요인 (0-100, 높을수록 위험)
"""

from typing import Dict, List, Optional

from .normalizer import RawPlatformRecord
from .taxonomy import extract_text_features
from .content_analyzer import analyze_content


HIGH_RISK_THRESHOLD = 60
MEDIUM_RISK_THRESHOLD = 35

LEGAL_RISK_BASE = 10.0


def classify_risk(factors: Dict[str, float]) -> str:
    """최대 리스크 요인 기준 등급: >=60 high, >=35 medium, 그 외 low"""
    peak = max(factors.values()) if factors else 0.0
    if peak >= HIGH_RISK_THRESHOLD:
        return 'high'
    if peak >= MEDIUM_RISK_THRESHOLD:
        return 'medium'
    return 'low'


def _clamp(value: float) -> float:
    return round(max(0.0, min(100.0, value)), 1)


def calculate_risk_factors(record: RawPlatformRecord, metrics: Dict, content: Dict,
                           features: Dict) -> Dict[str, float]:
    """4개 리스크 요인 계산"""
    content_risk = 100 - content['brand_safety']['safety_score']

    reputation_risk = 100 - content['integrity']['score']
    if record.has('growth') and metrics['growth']['monthly'] < 0:
        reputation_risk += 15

    legal_risk = LEGAL_RISK_BASE
    if record.made_for_kids:
        legal_risk += 20
    if {'gambling', 'adult'}.intersection(features['risk_categories']):
        legal_risk += 30
    if features['sponsored_content'] and not features['sponsorship_disclosed']:
        legal_risk += 15

    category_scores = features['category_scores']
    if not category_scores:
        brand_fit_risk = 50.0
    else:
        # 주력 카테고리 비중이 낮을수록(분산될수록) 메시지 일관성 위험 증가
        top_share = max(category_scores.values()) / sum(category_scores.values())
        brand_fit_risk = 20.0 + 50.0 * (1 - top_share)

    return {
        'content_risk': _clamp(content_risk),
        'reputation_risk': _clamp(reputation_risk),
        'legal_risk': _clamp(legal_risk),
        'brand_fit_risk': _clamp(brand_fit_risk)
    }


def collect_concerns(record: RawPlatformRecord, metrics: Dict, content: Dict,
                     features: Dict) -> List[str]:
    concerns = list(content['brand_safety']['concerns'])

    if content['integrity']['verdict'] == 'suspicious':
        concerns.append('참여 지표 이상 징후 (허수 계정 의심)')
    if record.has('growth') and metrics['growth']['monthly'] < 0:
        concerns.append('최근 30일 팔로워 감소')
    if features['sponsored_content'] and not features['sponsorship_disclosed']:
        concerns.append('광고 표기 누락 가능성')

    return concerns


def suggest_mitigation(factors: Dict[str, float]) -> List[str]:
    mitigation = ['명확한 협업 계약 조건 수립']
    if factors['content_risk'] >= MEDIUM_RISK_THRESHOLD:
        mitigation.append('게시 전 콘텐츠 사전 검수')
    if factors['reputation_risk'] >= MEDIUM_RISK_THRESHOLD:
        mitigation.append('성과 기반 단계별 계약')
    if factors['legal_risk'] >= MEDIUM_RISK_THRESHOLD:
        mitigation.append('광고 표기 및 관련 법규 준수 조항 명시')
    if factors['brand_fit_risk'] >= MEDIUM_RISK_THRESHOLD:
        mitigation.append('브랜드 가이드라인 사전 공유')
    return mitigation


def suggest_monitoring(factors: Dict[str, float]) -> List[str]:
    monitoring = ['월간 콘텐츠 검토']
    if factors['content_risk'] >= MEDIUM_RISK_THRESHOLD or factors['reputation_risk'] >= MEDIUM_RISK_THRESHOLD:
        monitoring.append('여론/댓글 모니터링')
    if factors['reputation_risk'] >= MEDIUM_RISK_THRESHOLD:
        monitoring.append('팔로워 증감 추적')
    if factors['legal_risk'] >= MEDIUM_RISK_THRESHOLD:
        monitoring.append('광고 표기 점검')
    return monitoring


def analyze_risk(record: RawPlatformRecord, metrics: Dict, prior: Optional[Dict] = None) -> Dict:
    """
    리스크 평가

    Args:
        record: 정규화 레코드
        metrics: 추출된 지표
        prior: 선행 분석 결과 ({'content': ...}, 없으면 직접 계산)

    Returns:
        {'overall', 'factors', 'concerns', 'mitigation', 'monitoring', 'confidence'}
    """
    content = (prior or {}).get('content') or analyze_content(record, metrics)
    features = extract_text_features(record)

    factors = calculate_risk_factors(record, metrics, content, features)
    observed = sum(1 for name in ('recent_posts', 'grade', 'growth') if record.has(name))

    return {
        'overall': classify_risk(factors),
        'factors': factors,
        'concerns': collect_concerns(record, metrics, content, features),
        'mitigation': suggest_mitigation(factors),
        'monitoring': suggest_monitoring(factors),
        'confidence': round(25 + 75 * observed / 3, 1)
    }
