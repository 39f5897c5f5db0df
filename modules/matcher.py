"""
Matcher Module - 브랜드-인플루언서 매칭 점수
브랜드 톤 / 오디언스 / 콘텐츠 유형 / 시장 도달 / 참여 잠재력 5개 카테고리 (0-1)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from config.scoring import ScoringConfig, DEFAULT_SCORING_CONFIG
from .platforms import Platform, PLATFORM_CONTENT_TYPES
from .normalizer import parse_count, AGE_BRACKETS
from .brand_profile import (
    BrandProfile,
    BrandPersonality,
    CommunicationStyle,
    VisualStyle,
    GenderDistribution
)


# ============== 스타일 대응 테이블 ==============

# 브랜드 성격 -> 허용 콘텐츠 스타일
PERSONALITY_STYLES: Dict[BrandPersonality, Tuple[str, ...]] = {
    BrandPersonality.PROFESSIONAL: ('professional', 'sophisticated'),
    BrandPersonality.FRIENDLY: ('friendly', 'casual', 'playful'),
    BrandPersonality.LUXURIOUS: ('luxury', 'sophisticated', 'elegant'),
    BrandPersonality.PLAYFUL: ('playful', 'friendly', 'casual'),
    BrandPersonality.AUTHORITATIVE: ('professional', 'educational', 'sophisticated'),
    BrandPersonality.INNOVATIVE: ('innovative', 'creative', 'modern'),
    BrandPersonality.TRADITIONAL: ('traditional', 'elegant'),
    BrandPersonality.YOUTHFUL: ('playful', 'modern', 'casual'),
    BrandPersonality.SOPHISTICATED: ('sophisticated', 'elegant', 'professional'),
}

COMMUNICATION_STYLES: Dict[CommunicationStyle, Tuple[str, ...]] = {
    CommunicationStyle.FORMAL: ('professional', 'sophisticated', 'elegant'),
    CommunicationStyle.CASUAL: ('casual', 'friendly'),
    CommunicationStyle.HUMOROUS: ('humorous', 'playful'),
    CommunicationStyle.EDUCATIONAL: ('educational', 'professional'),
    CommunicationStyle.INSPIRATIONAL: ('inspirational', 'authentic'),
    CommunicationStyle.CONVERSATIONAL: ('friendly', 'casual', 'authentic'),
}

VISUAL_STYLES: Dict[VisualStyle, Tuple[str, ...]] = {
    VisualStyle.MINIMALIST: ('elegant', 'modern', 'sophisticated'),
    VisualStyle.BOLD: ('modern', 'creative', 'playful'),
    VisualStyle.ELEGANT: ('elegant', 'luxury', 'sophisticated'),
    VisualStyle.PLAYFUL: ('playful', 'humorous', 'creative'),
    VisualStyle.PROFESSIONAL: ('professional', 'sophisticated'),
    VisualStyle.CREATIVE: ('creative', 'innovative'),
}

TREND_STYLES = {'modern', 'innovative', 'creative', 'playful'}

NEUTRAL = 0.5


# ============== 매칭 입력 ==============

@dataclass(frozen=True)
class MatchCandidate:
    """
    매칭용 인플루언서 정보 (표준 리포트 또는 프로필 dict에서 생성)

    follower/참여율이 0이면 미관측으로 취급합니다.
    0-100 품질 수치는 없으면 None입니다.
    """
    id: str
    platform: Platform
    followers: int = 0
    engagement_rate: float = 0.0
    content_topics: Tuple[str, ...] = ()
    content_styles: Tuple[str, ...] = ()
    audience_location: str = ''
    primary_location: str = ''
    age_distribution: Dict[str, float] = field(default_factory=dict)
    gender_distribution: Dict[str, float] = field(default_factory=dict)
    monthly_growth: Optional[float] = None
    consistency: Optional[float] = None
    creativity: Optional[float] = None
    storytelling: Optional[float] = None
    brand_safety: Optional[float] = None
    audience_quality: Optional[float] = None
    sales_potential: Optional[float] = None

    @classmethod
    def from_report(cls, report: Mapping[str, Any]) -> 'MatchCandidate':
        """StandardizedKOLReport.to_dict() 결과에서 생성"""
        metrics = report['metrics']
        audience = report['audience']
        content = report['content']
        business = report['business']
        metadata = report.get('metadata', {})
        missing = set(metadata.get('missing_fields', ()))

        geography = audience['geography']
        primary = geography['primary'] if geography['primary'] != 'unknown' else ''
        locations = [primary] + [name for name in geography['global_reach'] if name != primary]

        topics = list(content['recent']['main_topics'])
        topics += [c for c in content['categories'] if c not in topics]

        ages = {b: audience['demographics'][key] for b, key in zip(AGE_BRACKETS, _AGE_KEYS)}

        return cls(
            id=str(report['id']),
            platform=Platform.from_tag(report['platform']),
            followers=int(metrics['followers']),
            engagement_rate=float(metrics['engagement_rate']),
            content_topics=tuple(topics),
            content_styles=tuple(s.lower() for s in content['styles']),
            audience_location=', '.join(loc for loc in locations if loc),
            primary_location=primary,
            age_distribution=ages if 'age_distribution' not in missing and any(ages.values()) else {},
            gender_distribution=(dict(audience['gender'])
                                 if 'gender_distribution' not in missing and any(audience['gender'].values())
                                 else {}),
            monthly_growth=None if 'growth' in missing else float(metrics['growth']['monthly']),
            consistency=float(metrics['post_frequency']['consistency']),
            creativity=float(content['quality']['creativity']),
            storytelling=float(content['quality']['storytelling']),
            brand_safety=float(report['evaluation']['dimensions']['brand_safety']),
            audience_quality=float(audience['quality_score']),
            sales_potential=float(business['conversion']['sales_potential'])
        )

    @classmethod
    def from_profile(cls, profile: Mapping[str, Any], platform=None) -> 'MatchCandidate':
        """
        평면 프로필 dict에서 생성
        (name, platform, followers, engagementRate, contentTopics, contentStyle, audienceLocation)
        """
        def get(*keys):
            for key in keys:
                if profile.get(key) is not None:
                    return profile[key]
            return None

        location = str(get('audienceLocation', 'audience_location') or '')
        followers = parse_count(get('followers'))
        rate = parse_count(get('engagementRate', 'engagement_rate'))
        growth = parse_count(get('monthlyGrowth', 'monthly_growth'))

        return cls(
            id=str(get('id', 'url', 'name') or ''),
            platform=Platform.from_tag(platform or get('platform')),
            followers=int(max(0, followers or 0)),
            engagement_rate=float(max(0.0, rate or 0.0)),
            content_topics=_strings(get('contentTopics', 'content_topics')),
            content_styles=tuple(s.lower() for s in _strings(get('contentStyle', 'content_styles'))),
            audience_location=location,
            primary_location=location.split(',')[0].strip(),
            monthly_growth=growth
        )


_AGE_KEYS = ('age_13_17', 'age_18_24', 'age_25_34', 'age_35_44', 'age_45_54', 'age_55_plus')


def _strings(raw: Any) -> Tuple[str, ...]:
    if isinstance(raw, str):
        raw = raw.split(',')
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(str(item).strip() for item in raw if str(item).strip())


def _contains_any(text: str, needles: Sequence[str]) -> bool:
    lowered = text.lower()
    return any(needle.lower() in lowered for needle in needles if needle)


def _fraction_found(needles: Sequence[str], haystack: Sequence[str]) -> float:
    """needles 중 haystack 항목에 부분 문자열로 포함된 비율 (대소문자 무시)"""
    if not needles:
        return NEUTRAL
    lowered = [item.lower() for item in haystack]
    found = sum(1 for needle in needles if any(needle.lower() in item for item in lowered))
    return min(found / len(needles), 1.0)


def _style_match(styles: Sequence[str], accepted: Sequence[str]) -> float:
    if not styles:
        return NEUTRAL
    return 0.8 if set(styles).intersection(accepted) else 0.4


def follower_ladder(followers: int) -> float:
    """팔로워 규모 사다리: >1M 0.9, >500K 0.8, >100K 0.7, >50K 0.6, 그 외 0.4"""
    if followers > 1_000_000:
        return 0.9
    if followers > 500_000:
        return 0.8
    if followers > 100_000:
        return 0.7
    if followers > 50_000:
        return 0.6
    return 0.4


# ============== 브랜드 톤 ==============

def calculate_personality_match(candidate: MatchCandidate, brand: BrandProfile) -> float:
    accepted = PERSONALITY_STYLES.get(brand.brand_tone.personality, ())
    return 0.8 if set(candidate.content_styles).intersection(accepted) else 0.3


def calculate_communication_match(candidate: MatchCandidate, brand: BrandProfile) -> float:
    return _style_match(candidate.content_styles,
                        COMMUNICATION_STYLES[brand.brand_tone.communication_style])


def calculate_visual_match(candidate: MatchCandidate, brand: BrandProfile) -> float:
    return _style_match(candidate.content_styles, VISUAL_STYLES[brand.brand_tone.visual_style])


def calculate_keyword_overlap(candidate: MatchCandidate, brand: BrandProfile) -> float:
    """브랜드 키워드가 콘텐츠 토픽에 포함된 비율 (키워드 없으면 0.5)"""
    return _fraction_found(brand.brand_tone.keywords, candidate.content_topics)


# ============== 오디언스 ==============

def calculate_age_match(candidate: MatchCandidate, brand: BrandProfile) -> float:
    """타겟 연령대 오디언스 비중: 0.3 + 0.7 × 비중"""
    targets = [age.value for age in brand.target_audience.age_ranges]
    if not targets or not candidate.age_distribution:
        return NEUTRAL
    share = sum(candidate.age_distribution.get(bracket, 0.0) for bracket in targets) / 100
    return round(0.3 + 0.7 * min(1.0, share), 4)


def calculate_gender_match(candidate: MatchCandidate, brand: BrandProfile) -> float:
    genders = candidate.gender_distribution
    target = brand.target_audience.gender
    if not genders or target == GenderDistribution.OTHER:
        return NEUTRAL

    male = genders.get('male', 0.0) / 100
    female = genders.get('female', 0.0) / 100
    if target == GenderDistribution.FEMALE_DOMINANT:
        share = female
    elif target == GenderDistribution.MALE_DOMINANT:
        share = male
    else:
        share = 1 - abs(male - female)
    return round(0.3 + 0.7 * max(0.0, min(1.0, share)), 4)


def calculate_location_match(candidate: MatchCandidate, brand: BrandProfile) -> float:
    """타겟 지역이 오디언스 지역에 포함되면 0.9, 아니면 0.3 (타겟 없으면 0.5)"""
    locations = brand.target_audience.locations
    if not locations:
        return NEUTRAL
    return 0.9 if _contains_any(candidate.audience_location, locations) else 0.3


def calculate_interest_overlap(candidate: MatchCandidate, brand: BrandProfile) -> float:
    return _fraction_found(brand.target_audience.interests, candidate.content_topics)


# ============== 콘텐츠 ==============

def calculate_content_type_preference(candidate: MatchCandidate, brand: BrandProfile) -> float:
    preferred = [c.value for c in brand.preferred_content_types]
    if not preferred:
        return NEUTRAL
    supported = PLATFORM_CONTENT_TYPES[candidate.platform]
    return 0.8 if set(preferred).intersection(supported) else 0.4


def calculate_content_quality(candidate: MatchCandidate) -> float:
    """기준 0.5, 팔로워 10만 초과 +0.2, 참여율 3% 초과 +0.3"""
    quality = 0.5
    if candidate.followers > 100_000:
        quality += 0.2
    if candidate.engagement_rate > 3:
        quality += 0.3
    return min(round(quality, 4), 1.0)


def calculate_content_consistency(candidate: MatchCandidate) -> float:
    if candidate.consistency is None:
        return NEUTRAL
    return round(candidate.consistency / 100, 4)


def calculate_product_integration(candidate: MatchCandidate) -> float:
    facets = [v for v in (candidate.creativity, candidate.storytelling) if v is not None]
    score = sum(facets) / len(facets) / 100 if facets else NEUTRAL
    if 'educational' in candidate.content_styles:
        score += 0.1
    return round(min(1.0, score), 4)


def calculate_storytelling_ability(candidate: MatchCandidate) -> float:
    if candidate.storytelling is None:
        return NEUTRAL
    return round(candidate.storytelling / 100, 4)


# ============== 시장 ==============

def calculate_market_presence(candidate: MatchCandidate) -> float:
    return follower_ladder(candidate.followers)


def calculate_local_influence(candidate: MatchCandidate, brand: BrandProfile) -> float:
    """
    브랜드 홈 마켓 영향력
    주 오디언스 지역 0.85, 오디언스 지역에 포함 0.65, 미포함 0.35, 정보 없음 0.5
    """
    home = brand.home_market
    if not home or not candidate.audience_location:
        return NEUTRAL
    if candidate.primary_location and home.lower() in candidate.primary_location.lower():
        return 0.85
    if home.lower() in candidate.audience_location.lower():
        return 0.65
    return 0.35


def calculate_cultural_relevance(candidate: MatchCandidate, brand: BrandProfile) -> float:
    """타겟 시장 중 오디언스 지역에 포함된 비율: 0.4 + 0.6 × 비율"""
    markets = brand.target_markets
    if not markets or not candidate.audience_location:
        return NEUTRAL
    location = candidate.audience_location.lower()
    found = sum(1 for market in markets if market.lower() in location)
    return round(0.4 + 0.6 * found / len(markets), 4)


def calculate_trend_alignment(candidate: MatchCandidate) -> float:
    if not candidate.content_styles:
        return NEUTRAL
    hits = len(TREND_STYLES.intersection(candidate.content_styles))
    return round(0.4 + 0.6 * min(1.0, hits / 2), 4)


# ============== 참여 ==============

def calculate_reach_potential(candidate: MatchCandidate) -> float:
    return follower_ladder(candidate.followers)


def calculate_engagement_rate_score(candidate: MatchCandidate) -> float:
    """참여율 사다리: >5% 0.9, >3% 0.8, >1% 0.6, 그 외 0.4"""
    rate = candidate.engagement_rate
    if rate > 5:
        return 0.9
    if rate > 3:
        return 0.8
    if rate > 1:
        return 0.6
    return 0.4


def calculate_audience_retention(candidate: MatchCandidate) -> float:
    """월간 팔로워 순증 비율 기반 유지율"""
    if candidate.monthly_growth is None or candidate.followers <= 0:
        return NEUTRAL
    ratio = candidate.monthly_growth / candidate.followers
    if ratio >= 0.02:
        return 0.9
    if ratio >= 0.005:
        return 0.75
    if ratio >= 0:
        return 0.6
    return 0.3


def calculate_audience_engagement(candidate: MatchCandidate) -> float:
    if candidate.engagement_rate <= 0:
        return NEUTRAL
    return round(min(1.0, candidate.engagement_rate / 6), 4)


def calculate_conversion_potential(candidate: MatchCandidate) -> float:
    if candidate.sales_potential is not None:
        return round(candidate.sales_potential / 100, 4)
    return round((calculate_engagement_rate_score(candidate) + calculate_content_quality(candidate)) / 2, 4)


def _scaled(value: Optional[float]) -> float:
    return NEUTRAL if value is None else round(value / 100, 4)


def analyze_sentiment(candidate: MatchCandidate) -> str:
    if candidate.brand_safety is None:
        return 'neutral'
    if candidate.brand_safety >= 75:
        return 'positive'
    if candidate.brand_safety < 50:
        return 'negative'
    return 'neutral'


# ============== 추천 / 리스크 ==============

def generate_recommendations(candidate: MatchCandidate, brand: BrandProfile) -> List[str]:
    recommendations = []
    if candidate.followers > 500_000:
        recommendations.append('높은 도달력: 브랜드 인지도 캠페인에 적합')
    if candidate.engagement_rate > 3:
        recommendations.append('높은 참여율: 심층 브랜드 인게이지먼트에 적합')
    if brand.home_market and brand.home_market.lower() in candidate.audience_location.lower():
        recommendations.append(f'{brand.home_market} 현지 영향력: 로컬라이즈 캠페인에 적합')
    return recommendations


def identify_risk_factors(candidate: MatchCandidate, brand: BrandProfile) -> List[str]:
    """팔로워/참여율이 0(미관측)이면 해당 규칙은 건너뜁니다."""
    risks = []
    if 0 < candidate.followers < 10_000:
        risks.append('영향력이 작아 도달 범위가 제한적')
    if 0 < candidate.engagement_rate < 1:
        risks.append('낮은 참여율로 캠페인 효과가 제한될 수 있음')
    return risks


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def calculate_brand_match(candidate: MatchCandidate, brand: BrandProfile,
                          config: Optional[ScoringConfig] = None) -> Dict:
    """
    브랜드 매칭 점수 계산

    Args:
        candidate: 매칭 입력
        brand: 브랜드 프로필
        config: 스코어링 설정 (카테고리 가중치)

    Returns:
        {'overall_score', 'category_scores', 'detailed_analysis', 'recommendations', 'risk_factors'}
    """
    config = config or DEFAULT_SCORING_CONFIG

    brand_tone = {
        'personality_match': calculate_personality_match(candidate, brand),
        'communication_style_match': calculate_communication_match(candidate, brand),
        'visual_style_match': calculate_visual_match(candidate, brand),
        'keyword_overlap': calculate_keyword_overlap(candidate, brand),
    }
    audience = {
        'age_match': calculate_age_match(candidate, brand),
        'gender_match': calculate_gender_match(candidate, brand),
        'location_match': calculate_location_match(candidate, brand),
        'interest_overlap': calculate_interest_overlap(candidate, brand),
    }
    content = {
        'content_type_preference': calculate_content_type_preference(candidate, brand),
        'content_quality': calculate_content_quality(candidate),
        'content_consistency': calculate_content_consistency(candidate),
    }
    market = {
        'market_presence': calculate_market_presence(candidate),
        'local_influence': calculate_local_influence(candidate, brand),
        'cultural_relevance': calculate_cultural_relevance(candidate, brand),
    }
    engagement = {
        'reach_potential': calculate_reach_potential(candidate),
        'engagement_rate': calculate_engagement_rate_score(candidate),
        'audience_retention': calculate_audience_retention(candidate),
    }

    raw_scores = {
        'brand_tone_match': _mean(list(brand_tone.values())),
        'audience_match': _mean(list(audience.values())),
        'content_type_match': _mean(list(content.values())),
        'market_reach': _mean(list(market.values())),
        'engagement_potential': _mean(list(engagement.values())),
    }
    overall = sum(raw_scores[name] * weight for name, weight in config.match_weights.items())

    detailed = {
        'brand_tone_analysis': dict(
            brand_tone,
            content_sentiment=analyze_sentiment(candidate),
            brand_safety_score=_scaled(candidate.brand_safety),
        ),
        'audience_analysis': dict(
            audience,
            audience_quality=_scaled(candidate.audience_quality),
            audience_engagement=calculate_audience_engagement(candidate),
        ),
        'content_analysis': dict(
            content,
            product_integration_ability=calculate_product_integration(candidate),
            storytelling_ability=calculate_storytelling_ability(candidate),
        ),
        'market_analysis': dict(
            market,
            market_trend_alignment=calculate_trend_alignment(candidate),
        ),
        'engagement_analysis': dict(
            engagement,
            conversion_potential=calculate_conversion_potential(candidate),
        ),
    }

    return {
        'overall_score': round(overall, 2),
        'category_scores': {name: round(value, 2) for name, value in raw_scores.items()},
        'detailed_analysis': detailed,
        'recommendations': generate_recommendations(candidate, brand),
        'risk_factors': identify_risk_factors(candidate, brand),
    }
