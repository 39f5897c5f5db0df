"""
Business Analyzer Module - 상업적 가치 분석
시장 가치(CPM/CPV/CPE/ROI), 협업 역량, 전환 역량, 협업 추천
"""

from typing import Dict, List, Optional

from .normalizer import RawPlatformRecord
from .platforms import Platform, PLATFORM_CONTENT_TYPES
from .metrics import score_engagement_rate
from .audience_analyzer import analyze_audience
from .content_analyzer import analyze_content, grade_tier


# ============== 단가 설정 (USD) ==============

# 플랫폼별 기본 CPM
PLATFORM_BASE_CPM = {
    Platform.YOUTUBE: 20.0,
    Platform.INSTAGRAM: 12.0,
    Platform.TIKTOK: 8.0,
    Platform.FACEBOOK: 10.0,
    Platform.TWITTER: 6.0,
}

# 플랫폼별 조회 완료율 (CPV 산정)
PLATFORM_VIEW_THROUGH = {
    Platform.YOUTUBE: 0.50,
    Platform.INSTAGRAM: 0.40,
    Platform.TIKTOK: 0.35,
    Platform.FACEBOOK: 0.30,
    Platform.TWITTER: 0.25,
}

# 구매력 -> CPM 배수
PURCHASING_POWER_MULTIPLIER = {'high': 1.4, 'medium': 1.0, 'low': 0.7}

# 조회수 정보가 없을 때 팔로워 대비 노출 비율
DEFAULT_REACH_RATIO = 0.10

# 팔로워 규모 -> 예산 범위
BUDGET_TIERS = [
    (10_000, 'micro', '$100-$500'),
    (50_000, 'small', '$500-$2,000'),
    (500_000, 'medium', '$2,000-$10,000'),
    (1_000_000, 'large', '$10,000-$50,000'),
]
PREMIUM_BUDGET = ('premium', '$50,000+')

GRADE_PROFESSIONALISM_BONUS = {'A': 20.0, 'B': 10.0, 'C': 0.0}


def _clamp(value: float) -> float:
    return round(max(0.0, min(100.0, value)), 1)


def budget_range(followers: int) -> Dict[str, str]:
    """팔로워 규모별 예산 범위"""
    for limit, tier, label in BUDGET_TIERS:
        if followers < limit:
            return {'tier': tier, 'label': label}
    return {'tier': PREMIUM_BUDGET[0], 'label': PREMIUM_BUDGET[1]}


def estimate_market_value(record: RawPlatformRecord, metrics: Dict, audience: Dict,
                          content: Dict) -> Dict:
    """
    시장 가치 추정

    CPM = 플랫폼 기본 CPM × 구매력 배수 × (1 + min(참여율, 10) / 20)
    게시물 단가 = CPM × 예상 노출 / 1000

    Returns:
        {'estimated_cpm', 'estimated_cpv', 'estimated_cpe', 'roi_potential', 'estimated_post_fee'}
    """
    rate = metrics['engagement_rate']
    multiplier = PURCHASING_POWER_MULTIPLIER.get(audience['purchasing_power'], 1.0)
    cpm = PLATFORM_BASE_CPM[record.platform] * multiplier * (1 + min(rate, 10.0) / 20)

    impressions = metrics['avg_views'] or metrics['followers'] * DEFAULT_REACH_RATIO
    post_fee = cpm * impressions / 1000

    cpv = cpm / 1000 / PLATFORM_VIEW_THROUGH[record.platform]

    engagements = metrics['avg_likes'] + metrics['avg_comments'] + metrics['avg_shares']
    if engagements <= 0 and rate > 0:
        engagements = impressions * rate / 100
    cpe = post_fee / engagements if engagements > 0 else 0.0

    quality = content['quality']
    content_quality = sum(quality.values()) / len(quality)
    roi_potential = (
        0.4 * score_engagement_rate(rate, record.has('engagement'))
        + 0.3 * audience['quality_score']
        + 0.3 * content_quality
    )

    return {
        'estimated_cpm': round(cpm, 2),
        'estimated_cpv': round(cpv, 4),
        'estimated_cpe': round(cpe, 3),
        'roi_potential': _clamp(roi_potential),
        'estimated_post_fee': round(post_fee, 2)
    }


def evaluate_collaboration(record: RawPlatformRecord, metrics: Dict, content: Dict) -> Dict[str, float]:
    """협업 역량 4요소 (전문성, 신뢰성, 창의성, 유연성)"""
    styles = content['styles']

    professionalism = 50.0
    if record.verified:
        professionalism += 15
    professionalism += GRADE_PROFESSIONALISM_BONUS.get(grade_tier(record.grade), 0.0)
    if 'professional' in styles:
        professionalism += 10
    if content['sponsorship']['disclosed']:
        professionalism += 5

    reliability = 0.6 * metrics['post_frequency']['consistency'] + 0.4 * content['integrity']['score']

    flexibility = 50.0 + 10 * (len(PLATFORM_CONTENT_TYPES[record.platform]) - 1)
    if len(styles) >= 3:
        flexibility += 10

    return {
        'professionalism': _clamp(professionalism),
        'reliability': _clamp(reliability),
        'creativity': content['quality']['creativity'],
        'flexibility': _clamp(flexibility)
    }


def score_traffic_driving(followers: int, observed: bool) -> float:
    """팔로워 규모 기반 유입 견인력"""
    if not observed:
        return 50.0
    if followers >= 1_000_000:
        return 90.0
    if followers >= 500_000:
        return 80.0
    if followers >= 100_000:
        return 70.0
    if followers >= 50_000:
        return 60.0
    if followers >= 10_000:
        return 50.0
    return 35.0


def evaluate_conversion(record: RawPlatformRecord, metrics: Dict, audience: Dict,
                        content: Dict) -> Dict[str, float]:
    """전환 역량 3요소 (판매 잠재력, 유입 견인, 브랜드 구축)"""
    sales = {'high': 75.0, 'medium': 55.0, 'low': 35.0}.get(audience['purchasing_power'], 55.0)
    if record.has('engagement'):
        sales += min(20.0, metrics['engagement_rate'] * 3)

    quality = content['quality']
    content_quality = sum(quality.values()) / len(quality)
    brand_building = 0.5 * content_quality + 0.5 * content['brand_safety']['safety_score']

    return {
        'sales_potential': _clamp(sales),
        'traffic_driving': score_traffic_driving(metrics['followers'], record.has('followers')),
        'brand_building': _clamp(brand_building)
    }


def suggest_campaigns(metrics: Dict, content: Dict, collaboration: Dict,
                      conversion: Dict) -> List[str]:
    """적합 캠페인 유형 추천"""
    campaigns = []
    categories = content['categories']

    if metrics['followers'] >= 100_000:
        campaigns.append('브랜드 인지도 캠페인')
    if {'beauty', 'tech', 'food'}.intersection(categories) or 'educational' in content['styles']:
        campaigns.append('제품 리뷰/언박싱')
    if conversion['sales_potential'] >= 65:
        campaigns.append('전환/판매 캠페인')
    if collaboration['reliability'] >= 75:
        campaigns.append('장기 앰배서더')
    if 'lifestyle' in categories or 'travel' in categories:
        campaigns.append('라이프스타일 브랜디드 콘텐츠')

    return campaigns or ['제품 협찬']


def write_cooperation_notes(record: RawPlatformRecord, content: Dict, collaboration: Dict) -> str:
    notes = []
    if collaboration['reliability'] >= 75:
        notes.append('장기 협업에 적합')
    elif collaboration['reliability'] < 50:
        notes.append('단발성 협업 후 성과 확인 권장')
    if content['sponsorship']['sponsored_content'] and not content['sponsorship']['disclosed']:
        notes.append('광고 표기 가이드 제공 필요')
    if record.made_for_kids:
        notes.append('아동 대상 광고 규정 확인 필요')
    if not notes:
        notes.append('일반적인 협업 조건 적용 가능')
    return ', '.join(notes)


def analyze_business(record: RawPlatformRecord, metrics: Dict, prior: Optional[Dict] = None) -> Dict:
    """
    상업적 가치 분석

    Args:
        record: 정규화 레코드
        metrics: 추출된 지표
        prior: 선행 분석 결과 ({'audience': ..., 'content': ...}, 없으면 직접 계산)

    Returns:
        상업적 가치 분석 결과
    """
    prior = prior or {}
    audience = prior.get('audience') or analyze_audience(record, metrics)
    content = prior.get('content') or analyze_content(record, metrics)

    market_value = estimate_market_value(record, metrics, audience, content)
    collaboration = evaluate_collaboration(record, metrics, content)
    conversion = evaluate_conversion(record, metrics, audience, content)

    observed = sum(1 for name in ('followers', 'engagement', 'recent_posts', 'grade') if record.has(name))

    return {
        'market_value': market_value,
        'collaboration': collaboration,
        'conversion': conversion,
        'recommendation': {
            'suitable_campaigns': suggest_campaigns(metrics, content, collaboration, conversion),
            'budget_range': budget_range(metrics['followers'])['label'],
            'cooperation_notes': write_cooperation_notes(record, content, collaboration)
        },
        'confidence': round(25 + 75 * observed / 4, 1)
    }
