"""
Integrity Module - 계정 신뢰도(허수) 점수
최근 게시물 통계의 변동성/비율로 봇·어뷰징 징후를 추정합니다.
콘텐츠 진정성(authenticity)과 평판 리스크 계산에 사용됩니다.
"""

import math
from typing import Dict, List, Sequence, Tuple

from .normalizer import PostSnapshot, RawPlatformRecord


NEUTRAL_SCORE = 50.0


def calculate_view_variability_score(posts: Sequence[PostSnapshot]) -> Tuple[float, Dict]:
    """
    조회수 변동성 점수 (V_score)
    변동계수(CV)가 0.05 미만이면 조회수 구매 의심

    Returns:
        (점수 0-100, 상세 분석)
    """
    views = [p.views for p in posts if p.views > 0]

    if len(views) < 2:
        return NEUTRAL_SCORE, {'status': 'insufficient_data'}

    mean_views = sum(views) / len(views)
    variance = sum((v - mean_views) ** 2 for v in views) / len(views)
    cv = math.sqrt(variance) / mean_views

    if cv < 0.03:
        score = 30.0  # 거의 동일한 조회수
    elif cv < 0.05:
        score = 55.0
    elif cv < 0.08:
        score = 75.0
    elif cv < 0.50:
        score = 95.0
    else:
        score = 80.0

    return score, {
        'mean_views': round(mean_views, 2),
        'cv': round(cv, 4),
        'status': 'normal' if 0.08 <= cv <= 0.50 else 'suspicious' if cv < 0.05 else 'irregular'
    }


def calculate_engagement_asymmetry_score(posts: Sequence[PostSnapshot], followers: int) -> Tuple[float, Dict]:
    """
    참여 비대칭성 점수 (A_score)
    좋아요/조회수 비율 2%~15% 이탈 시 이상치
    조회수가 없는 플랫폼은 좋아요/팔로워 비율(1%~10%)로 판단

    Returns:
        (점수 0-100, 상세 분석)
    """
    ratios = [p.likes / p.views for p in posts if p.views > 0]
    low, high = 0.02, 0.15
    basis = 'views'

    if not ratios and followers > 0:
        ratios = [p.likes / followers for p in posts if p.likes > 0]
        low, high = 0.01, 0.10
        basis = 'followers'

    if not ratios:
        return NEUTRAL_SCORE, {'status': 'insufficient_data'}

    avg_ratio = sum(ratios) / len(ratios)

    if low <= avg_ratio <= high:
        score, status = 90.0, 'normal'
    elif low / 2 <= avg_ratio < low:
        score, status = 70.0, 'low_engagement'
    elif high < avg_ratio <= high * 5 / 3:
        score, status = 70.0, 'high_engagement'
    elif avg_ratio < low / 2:
        score, status = 30.0, 'suspicious_low'
    else:
        score, status = 40.0, 'suspicious_high'

    return score, {'avg_ratio': round(avg_ratio * 100, 2), 'basis': basis, 'status': status}


def calculate_comment_ratio_score(posts: Sequence[PostSnapshot]) -> Tuple[float, Dict]:
    """
    댓글 비율 점수 (E_score)
    댓글/좋아요 비율과 댓글 수 균일성으로 봇 댓글 징후를 간접 측정

    Returns:
        (점수 0-100, 상세 분석)
    """
    pairs = [(p.comments, p.likes) for p in posts if p.likes > 0]
    if not pairs:
        return NEUTRAL_SCORE, {'status': 'insufficient_data'}

    avg_ratio = sum(c / l for c, l in pairs) / len(pairs)

    # 정상 댓글/좋아요 비율: 0.5% ~ 10%
    if 0.005 <= avg_ratio <= 0.10:
        score, status = 90.0, 'normal'
    elif avg_ratio < 0.005:
        score, status = 45.0, 'suspicious_low'
    elif avg_ratio <= 0.25:
        score, status = 75.0, 'high_comments'
    else:
        score, status = 50.0, 'suspicious_high'

    comments = [c for c, _ in pairs]
    if len(comments) >= 3:
        mean_comments = sum(comments) / len(comments)
        if mean_comments > 0:
            variance = sum((c - mean_comments) ** 2 for c in comments) / len(comments)
            if math.sqrt(variance) / mean_comments < 0.1:
                score -= 20  # 댓글 수가 너무 균일함
                status = 'suspicious_uniform'

    return max(0.0, score), {'avg_ratio': round(avg_ratio * 100, 3), 'status': status}


def calculate_activity_stability_score(posts: Sequence[PostSnapshot]) -> Tuple[float, Dict]:
    """
    활동 안정성 점수 (ACS_score)
    평균 업로드 간격(일) 기준

    Returns:
        (점수 0-100, 상세 분석)
    """
    timestamps: List[float] = sorted(p.timestamp for p in posts if p.timestamp is not None)
    if len(timestamps) < 2:
        return NEUTRAL_SCORE, {'status': 'no_interval_data'}

    avg_interval = (timestamps[-1] - timestamps[0]) / 86400 / (len(timestamps) - 1)

    if 1 <= avg_interval <= 7:
        score, status = 90.0, 'normal'
    elif 0.5 <= avg_interval < 1:
        score, status = 75.0, 'very_frequent'
    elif 7 < avg_interval <= 14:
        score, status = 80.0, 'moderate'
    elif avg_interval < 0.5:
        score, status = 40.0, 'suspicious_frequent'
    else:
        score, status = 60.0, 'infrequent'

    return score, {'avg_interval_days': round(avg_interval, 2), 'status': status}


def calculate_geographic_consistency_score(record: RawPlatformRecord) -> Tuple[float, Dict]:
    """
    지리적 정합성 점수 (D_score)
    채널 국가와 오디언스 국가 분포의 일치도

    Returns:
        (점수 0-100, 상세 분석)
    """
    if not record.audience_countries or not record.country:
        return 80.0, {'status': 'no_audience_data'}

    home = record.country.lower()
    home_share = sum(pct for name, pct in record.audience_countries if name.lower() == home)

    if home_share >= 50:
        score, status = 95.0, 'excellent'
    elif home_share >= 30:
        score, status = 85.0, 'good'
    elif home_share >= 15:
        score, status = 70.0, 'international_mix'
    else:
        score, status = 60.0, 'global'

    return score, {'home_share': home_share, 'status': status}


def calculate_integrity_score(record: RawPlatformRecord) -> Dict:
    """
    최종 계정 신뢰도 점수
    score = (w1×V + w2×E + w3×A + w4×ACS) × D/100 + w5×D

    게시물 데이터가 전혀 없으면 중립값 50을 반환합니다.

    Args:
        record: 정규화 레코드

    Returns:
        신뢰도 점수 및 상세 분석
    """
    posts = record.recent_posts
    if not posts:
        return {
            'score': NEUTRAL_SCORE,
            'verdict': 'unknown',
            'observed': False,
            'breakdown': {}
        }

    v_score, v_analysis = calculate_view_variability_score(posts)
    e_score, e_analysis = calculate_comment_ratio_score(posts)
    a_score, a_analysis = calculate_engagement_asymmetry_score(posts, record.followers)
    acs_score, acs_analysis = calculate_activity_stability_score(posts)
    d_score, d_analysis = calculate_geographic_consistency_score(record)

    w1, w2, w3, w4, w5 = 0.25, 0.20, 0.25, 0.15, 0.15

    base_score = w1 * v_score + w2 * e_score + w3 * a_score + w4 * acs_score
    final_score = base_score * (d_score / 100) + w5 * d_score
    final_score = max(0.0, min(100.0, final_score))

    if final_score >= 80:
        verdict = 'trusted'
    elif final_score >= 60:
        verdict = 'review'
    else:
        verdict = 'suspicious'

    return {
        'score': round(final_score, 1),
        'verdict': verdict,
        'observed': True,
        'breakdown': {
            'view_variability': {'score': v_score, 'weight': w1, 'analysis': v_analysis},
            'comment_ratio': {'score': e_score, 'weight': w2, 'analysis': e_analysis},
            'engagement_asymmetry': {'score': a_score, 'weight': w3, 'analysis': a_analysis},
            'activity_stability': {'score': acs_score, 'weight': w4, 'analysis': acs_analysis},
            'geographic_consistency': {'score': d_score, 'weight': w5, 'analysis': d_analysis}
        }
    }
