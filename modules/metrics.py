"""
Metrics Module - 핵심 지표 추출
팔로워 수, 참여율, 구간별 성장, 게시 주기(빈도/일관성) 계산
"""

import math
from typing import Dict, Optional, Tuple

from .normalizer import RawPlatformRecord, GROWTH_HORIZONS


SECONDS_PER_DAY = 86400


def format_followers(followers: int) -> str:
    """
    팔로워 수를 표시용 문자열로 변환합니다.

    999 -> "999", 1500 -> "1.5K", 2500000 -> "2.5M"
    """
    if followers >= 1_000_000:
        return f"{followers / 1_000_000:.1f}M"
    if followers >= 1_000:
        return f"{followers / 1_000:.1f}K"
    return str(int(followers))


def calculate_engagement_rate(record: RawPlatformRecord) -> float:
    """
    참여율(%) 계산
    제공자 값이 있으면 그대로, 없으면 (평균 좋아요+댓글+공유) / 팔로워 × 100

    Returns:
        참여율 (0-100)
    """
    if record.engagement_rate > 0:
        rate = record.engagement_rate
    elif record.followers > 0:
        interactions = record.avg_likes + record.avg_comments + record.avg_shares
        rate = interactions / record.followers * 100
    else:
        rate = 0.0
    return round(max(0.0, min(100.0, rate)), 2)


def score_engagement_rate(rate: float, observed: bool = True) -> float:
    """참여율(%) -> 0-100 점수 (관측값이 없으면 50)"""
    if not observed:
        return 50.0
    if rate >= 6:
        return 95.0
    if rate >= 4:
        return 85.0
    if rate >= 3:
        return 75.0
    if rate >= 2:
        return 65.0
    if rate >= 1:
        return 50.0
    if rate > 0:
        return 35.0
    return 20.0


def derive_quarterly_growth(weekly: Optional[float], monthly: Optional[float]) -> float:
    """
    분기(90일) 성장 추정
    주간 추세(×90/7)와 월간 추세(×3)의 평균, 한쪽만 있으면 그 값만 사용
    """
    projections = []
    if weekly is not None:
        projections.append(weekly * 90 / 7)
    if monthly is not None:
        projections.append(monthly * 3)
    if not projections:
        return 0.0
    return sum(projections) / len(projections)


def extract_growth(record: RawPlatformRecord) -> Dict[str, float]:
    """구간별 성장 값 (daily/weekly/monthly/quarterly/yearly)"""
    growth = {}
    for name, days in GROWTH_HORIZONS.items():
        value = record.growth_at(days)
        growth[name] = value

    if growth['quarterly'] is None:
        growth['quarterly'] = derive_quarterly_growth(growth['weekly'], growth['monthly'])

    return {name: int(round(value or 0)) for name, value in growth.items()}


def calculate_post_frequency(record: RawPlatformRecord) -> Tuple[float, float, Dict]:
    """
    게시 빈도 및 일관성 계산
    게시 간격의 변동계수(CV)가 작을수록 일관성이 높습니다.

    Args:
        record: 정규화 레코드

    Returns:
        (주당 게시 수, 일관성 점수 0-100, 상세 분석)
    """
    timestamps = sorted(p.timestamp for p in record.recent_posts if p.timestamp is not None)

    if len(timestamps) >= 2:
        intervals = [
            (later - earlier) / SECONDS_PER_DAY
            for earlier, later in zip(timestamps, timestamps[1:])
        ]
        mean_interval = sum(intervals) / len(intervals)

        if mean_interval <= 0:
            # 같은 시각에 몰린 게시물
            return 0.0, 50.0, {'status': 'zero_interval', 'intervals': intervals}

        variance = sum((i - mean_interval) ** 2 for i in intervals) / len(intervals)
        cv = math.sqrt(variance) / mean_interval

        posts_per_week = 7 / mean_interval
        consistency = 100 * (1 - min(1.0, cv))

        return round(posts_per_week, 1), round(consistency, 1), {
            'status': 'timestamps',
            'mean_interval_days': round(mean_interval, 2),
            'cv': round(cv, 4)
        }

    uploads_30d = record.uploads_at(30)
    if uploads_30d is not None and uploads_30d > 0:
        return round(uploads_30d / 30 * 7, 1), 50.0, {'status': 'upload_growth'}

    return 0.0, 50.0, {'status': 'insufficient_data'}


def extract_metrics(record: RawPlatformRecord) -> Dict:
    """
    정규화 레코드에서 표준 지표를 추출합니다.

    Args:
        record: 정규화 레코드

    Returns:
        표준 지표 딕셔너리
    """
    followers = max(0, int(record.followers))
    posts_per_week, consistency, _ = calculate_post_frequency(record)

    avg_views = record.avg_views
    if avg_views <= 0 and record.total_views > 0 and record.uploads > 0:
        avg_views = record.total_views / record.uploads

    return {
        'followers': followers,
        'followers_display': format_followers(followers),
        'engagement_rate': calculate_engagement_rate(record),
        'avg_likes': int(round(record.avg_likes)),
        'avg_comments': int(round(record.avg_comments)),
        'avg_shares': int(round(record.avg_shares)),
        'avg_views': int(round(avg_views)),
        'growth': extract_growth(record),
        'post_frequency': {
            'posts_per_week': posts_per_week,
            'consistency': consistency
        }
    }
