"""
Content Analyzer Module - 콘텐츠 분석
카테고리/스타일 태그, 품질 4요소, 최근 활동 요약, 브랜드 안전성
"""

from typing import Dict, List, Optional

from .normalizer import RawPlatformRecord
from .platforms import Platform
from .taxonomy import extract_text_features
from .integrity import calculate_integrity_score


# 플랫폼별 제작 수준 기준점
PLATFORM_PRODUCTION_BASE = {
    Platform.YOUTUBE: 70.0,
    Platform.INSTAGRAM: 65.0,
    Platform.TIKTOK: 60.0,
    Platform.FACEBOOK: 55.0,
    Platform.TWITTER: 50.0,
}

# 등급 계열 -> 안전 점수
GRADE_SAFETY_SCORES = {'A': 90.0, 'B': 75.0, 'C': 60.0}
UNRATED_GRADE_SAFETY = 40.0

# 등급 계열 -> 제작 수준 보정
GRADE_PRODUCTION_BONUS = {'A': 15.0, 'B': 5.0, 'C': -5.0}

# 위험 카테고리별 안전 점수 감점
RISK_PENALTY = 15.0

# 위험 카테고리 설명
RISK_CONCERN_LABELS = {
    'violence': '폭력적 표현',
    'adult': '성인 콘텐츠',
    'gambling': '도박 관련 콘텐츠',
    'substance': '약물/음주 관련 콘텐츠',
    'profanity': '비속어 사용',
    'controversy': '논란/구설 이력',
    'politics': '정치적 발언',
}


def grade_tier(grade: str) -> str:
    """'A+', 'B-' 등의 등급에서 계열 문자만 추출"""
    return grade.strip().upper()[:1] if grade else ''


def grade_safety_score(grade: str) -> float:
    """
    외부 등급 신호 -> 브랜드 안전 점수
    A 계열 90, B 계열 75, C 계열 60, 그 외 40
    """
    return GRADE_SAFETY_SCORES.get(grade_tier(grade), UNRATED_GRADE_SAFETY)


def calculate_creativity(styles: List[str], hashtag_count: int) -> float:
    """창의성: 스타일 다양성 + 해시태그 다양성"""
    if not styles and hashtag_count == 0:
        return 50.0
    score = 50.0 + min(30.0, 10.0 * len(styles)) + min(10.0, hashtag_count * 1.0)
    if 'creative' in styles or 'innovative' in styles:
        score += 10
    return round(min(100.0, score), 1)


def calculate_production(record: RawPlatformRecord) -> float:
    """제작 수준: 플랫폼 기준점 + 인증 + 등급 보정"""
    score = PLATFORM_PRODUCTION_BASE[record.platform]
    if record.verified:
        score += 10
    score += GRADE_PRODUCTION_BONUS.get(grade_tier(record.grade), 0.0)
    return round(max(0.0, min(100.0, score)), 1)


def calculate_storytelling(avg_caption_length: float, caption_count: int, styles: List[str]) -> float:
    """스토리텔링: 평균 캡션 길이 + 서사형 스타일"""
    if caption_count == 0:
        return 50.0

    if avg_caption_length >= 300:
        score = 80.0
    elif avg_caption_length >= 120:
        score = 70.0
    elif avg_caption_length >= 40:
        score = 60.0
    else:
        score = 45.0

    if 'educational' in styles or 'inspirational' in styles:
        score += 10
    return min(100.0, score)


def calculate_brand_safety(record: RawPlatformRecord, risk_categories: List[str]) -> Dict:
    """
    브랜드 안전성 평가

    Returns:
        {'risk_level', 'concerns', 'safety_score'}
    """
    base = grade_safety_score(record.grade) if record.grade else 80.0
    safety_score = max(0.0, base - RISK_PENALTY * len(risk_categories))

    concerns = [RISK_CONCERN_LABELS[name] for name in risk_categories]
    if record.made_for_kids:
        concerns.append('아동 대상 콘텐츠 (광고 규제 대상)')

    if safety_score >= 75:
        risk_level = 'low'
    elif safety_score >= 50:
        risk_level = 'medium'
    else:
        risk_level = 'high'

    return {
        'risk_level': risk_level,
        'concerns': concerns,
        'safety_score': round(safety_score, 1)
    }


def describe_frequency(posts_per_week: float) -> str:
    """게시 빈도 표시 문자열"""
    if posts_per_week <= 0:
        return '알 수 없음'
    if posts_per_week >= 7:
        return f'하루 {posts_per_week / 7:.1f}회'
    return f'주 {posts_per_week:.1f}회'


def analyze_content(record: RawPlatformRecord, metrics: Dict, prior: Optional[Dict] = None) -> Dict:
    """
    콘텐츠 분석

    Args:
        record: 정규화 레코드
        metrics: 추출된 지표

    Returns:
        콘텐츠 분석 결과
    """
    features = extract_text_features(record)

    styles = list(record.content_styles) or features['styles'][:5]
    categories = features['categories'][:5]

    integrity = calculate_integrity_score(record)

    quality = {
        'creativity': calculate_creativity(styles, len(features['hashtags'])),
        'production': calculate_production(record),
        'storytelling': calculate_storytelling(
            features['avg_caption_length'], features['caption_count'], styles
        ),
        'authenticity': integrity['score']
    }

    main_topics = list(record.content_topics[:5]) or categories
    trending_hashtags = ['#' + tag for tag in features['hashtags'][:5]]

    observed = sum(1 for flag in (
        record.has('recent_posts'),
        record.has('content_topics') or record.has('content_styles'),
        record.has('grade'),
    ) if flag)

    return {
        'categories': categories,
        'styles': styles,
        'quality': quality,
        'recent': {
            'main_topics': main_topics,
            'trending_hashtags': trending_hashtags,
            'average_engagement': metrics['engagement_rate'],
            'content_frequency': describe_frequency(metrics['post_frequency']['posts_per_week'])
        },
        'brand_safety': calculate_brand_safety(record, features['risk_categories']),
        'integrity': {'score': integrity['score'], 'verdict': integrity['verdict']},
        'sponsorship': {
            'sponsored_content': features['sponsored_content'],
            'disclosed': features['sponsorship_disclosed']
        },
        'confidence': round(25 + 75 * observed / 3, 1)
    }
