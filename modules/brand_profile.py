"""
Brand Profile Module - 브랜드 프로필 모델
브랜드 톤(성격/커뮤니케이션/비주얼), 타겟 오디언스, 캠페인 목표, 선호 콘텐츠 유형

매처의 읽기 전용 입력이며, 엔진은 프로필을 수정하지 않습니다.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import MalformedInputError


class BrandPersonality(str, Enum):
    PROFESSIONAL = 'professional'
    FRIENDLY = 'friendly'
    LUXURIOUS = 'luxurious'
    PLAYFUL = 'playful'
    AUTHORITATIVE = 'authoritative'
    INNOVATIVE = 'innovative'
    TRADITIONAL = 'traditional'
    YOUTHFUL = 'youthful'
    SOPHISTICATED = 'sophisticated'


class CommunicationStyle(str, Enum):
    FORMAL = 'formal'
    CASUAL = 'casual'
    HUMOROUS = 'humorous'
    EDUCATIONAL = 'educational'
    INSPIRATIONAL = 'inspirational'
    CONVERSATIONAL = 'conversational'


class VisualStyle(str, Enum):
    MINIMALIST = 'minimalist'
    BOLD = 'bold'
    ELEGANT = 'elegant'
    PLAYFUL = 'playful'
    PROFESSIONAL = 'professional'
    CREATIVE = 'creative'


class GoalType(str, Enum):
    AWARENESS = 'awareness'
    ENGAGEMENT = 'engagement'
    CONVERSION = 'conversion'
    BRAND_LOVE = 'brand_love'
    SALES = 'sales'
    EDUCATION = 'education'


class ContentType(str, Enum):
    VIDEO = 'video'
    IMAGE = 'image'
    TEXT = 'text'
    STORY = 'story'
    LIVE = 'live'
    REEL = 'reel'


class AgeRange(str, Enum):
    TEENS = '13-17'
    YOUNG_ADULTS = '18-24'
    ADULTS = '25-34'
    MIDDLE_ADULTS = '35-44'
    OLDER_ADULTS = '45-54'
    SENIORS = '55+'


class GenderDistribution(str, Enum):
    MALE_DOMINANT = 'male_dominant'
    FEMALE_DOMINANT = 'female_dominant'
    BALANCED = 'balanced'
    OTHER = 'other'


class IncomeLevel(str, Enum):
    LOW = 'low'
    MIDDLE = 'middle'
    HIGH = 'high'
    LUXURY = 'luxury'


class BudgetRange(str, Enum):
    MICRO = 'micro'        # $100-$500
    SMALL = 'small'        # $500-$2,000
    MEDIUM = 'medium'      # $2,000-$10,000
    LARGE = 'large'        # $10,000-$50,000
    PREMIUM = 'premium'    # $50,000+


class ProductComplexity(str, Enum):
    SIMPLE = 'simple'
    MODERATE = 'moderate'
    COMPLEX = 'complex'
    TECHNICAL = 'technical'


# 입력 호환용 별칭
PERSONALITY_ALIASES = {
    'luxury': BrandPersonality.LUXURIOUS,
    'casual': BrandPersonality.FRIENDLY,
}


@dataclass(frozen=True)
class BrandTone:
    personality: BrandPersonality = BrandPersonality.FRIENDLY
    communication_style: CommunicationStyle = CommunicationStyle.CONVERSATIONAL
    visual_style: VisualStyle = VisualStyle.MINIMALIST
    keywords: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TargetAudience:
    age_ranges: Tuple[AgeRange, ...] = ()
    gender: GenderDistribution = GenderDistribution.BALANCED
    locations: Tuple[str, ...] = ()
    interests: Tuple[str, ...] = ()
    income_level: IncomeLevel = IncomeLevel.MIDDLE
    lifestyle: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CampaignGoal:
    type: GoalType
    priority: str = 'medium'  # high / medium / low
    target_metrics: Tuple[str, ...] = ()
    description: str = ''


@dataclass(frozen=True)
class BrandProfile:
    """브랜드 프로필 (불변)"""
    id: str
    name: str
    industry: str = ''
    brand_tone: BrandTone = field(default_factory=BrandTone)
    target_audience: TargetAudience = field(default_factory=TargetAudience)
    campaign_goals: Tuple[CampaignGoal, ...] = ()
    preferred_content_types: Tuple[ContentType, ...] = ()
    target_markets: Tuple[str, ...] = ()
    home_market: str = ''
    budget_range: BudgetRange = BudgetRange.MEDIUM
    product_complexity: ProductComplexity = ProductComplexity.MODERATE

    def __post_init__(self):
        if not self.home_market and self.target_markets:
            object.__setattr__(self, 'home_market', self.target_markets[0])

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'BrandProfile':
        """
        딕셔너리(camelCase 또는 snake_case)에서 BrandProfile 생성

        Raises:
            MalformedInputError: id 누락 또는 잘못된 열거형 값
        """
        if not isinstance(data, Mapping):
            raise MalformedInputError("브랜드 프로필은 dict여야 합니다", field='brand')

        brand_id = _get(data, 'id')
        if brand_id is None or str(brand_id).strip() == '':
            raise MalformedInputError("브랜드 id가 없습니다", field='brand.id')

        tone = _get(data, 'brand_tone', 'brandTone') or {}
        audience = _get(data, 'target_audience', 'targetAudience') or {}

        personality = _get(tone, 'personality')
        if isinstance(personality, str) and personality.lower() in PERSONALITY_ALIASES:
            personality = PERSONALITY_ALIASES[personality.lower()]

        brand_tone = BrandTone(
            personality=_enum(BrandPersonality, personality, BrandPersonality.FRIENDLY, 'personality'),
            communication_style=_enum(
                CommunicationStyle, _get(tone, 'communication_style', 'communicationStyle'),
                CommunicationStyle.CONVERSATIONAL, 'communication_style'
            ),
            visual_style=_enum(
                VisualStyle, _get(tone, 'visual_style', 'visualStyle'),
                VisualStyle.MINIMALIST, 'visual_style'
            ),
            keywords=_strings(_get(tone, 'keywords'))
        )

        target_audience = TargetAudience(
            age_ranges=tuple(
                _enum(AgeRange, value, None, 'age_ranges')
                for value in _get(audience, 'age_ranges', 'ageRanges') or ()
            ),
            gender=_enum(GenderDistribution, _get(audience, 'gender'), GenderDistribution.BALANCED, 'gender'),
            locations=_strings(_get(audience, 'locations')),
            interests=_strings(_get(audience, 'interests')),
            income_level=_enum(IncomeLevel, _get(audience, 'income_level', 'incomeLevel'),
                               IncomeLevel.MIDDLE, 'income_level'),
            lifestyle=_strings(_get(audience, 'lifestyle'))
        )

        goals = []
        for goal in _get(data, 'campaign_goals', 'campaignGoals') or ():
            if isinstance(goal, Mapping):
                goals.append(CampaignGoal(
                    type=_enum(GoalType, _get(goal, 'type'), None, 'campaign_goals.type'),
                    priority=str(_get(goal, 'priority') or 'medium'),
                    target_metrics=_strings(_get(goal, 'target_metrics', 'targetMetrics')),
                    description=str(_get(goal, 'description') or '')
                ))
            else:
                goals.append(CampaignGoal(type=_enum(GoalType, goal, None, 'campaign_goals')))

        return cls(
            id=str(brand_id),
            name=str(_get(data, 'name') or ''),
            industry=str(_get(data, 'industry') or ''),
            brand_tone=brand_tone,
            target_audience=target_audience,
            campaign_goals=tuple(goals),
            preferred_content_types=tuple(
                _enum(ContentType, value, None, 'preferred_content_types')
                for value in _get(data, 'preferred_content_types', 'preferredContentTypes') or ()
            ),
            target_markets=_strings(_get(data, 'target_markets', 'targetMarkets')),
            home_market=str(_get(data, 'home_market', 'homeMarket') or ''),
            budget_range=_enum(BudgetRange, _get(data, 'budget_range', 'budgetRange'),
                               BudgetRange.MEDIUM, 'budget_range'),
            product_complexity=_enum(ProductComplexity, _get(data, 'product_complexity', 'productComplexity'),
                                     ProductComplexity.MODERATE, 'product_complexity')
        )

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'industry': self.industry,
            'brand_tone': {
                'personality': self.brand_tone.personality.value,
                'communication_style': self.brand_tone.communication_style.value,
                'visual_style': self.brand_tone.visual_style.value,
                'keywords': list(self.brand_tone.keywords)
            },
            'target_audience': {
                'age_ranges': [a.value for a in self.target_audience.age_ranges],
                'gender': self.target_audience.gender.value,
                'locations': list(self.target_audience.locations),
                'interests': list(self.target_audience.interests),
                'income_level': self.target_audience.income_level.value,
                'lifestyle': list(self.target_audience.lifestyle)
            },
            'campaign_goals': [
                {
                    'type': g.type.value,
                    'priority': g.priority,
                    'target_metrics': list(g.target_metrics),
                    'description': g.description
                }
                for g in self.campaign_goals
            ],
            'preferred_content_types': [c.value for c in self.preferred_content_types],
            'target_markets': list(self.target_markets),
            'home_market': self.home_market,
            'budget_range': self.budget_range.value,
            'product_complexity': self.product_complexity.value
        }


# ============== 파싱 헬퍼 ==============

def _get(data: Any, *keys: str) -> Any:
    if not isinstance(data, Mapping):
        return None
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _strings(raw: Any) -> Tuple[str, ...]:
    if isinstance(raw, str):
        raw = raw.split(',')
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(str(item).strip() for item in raw if str(item).strip())


def _enum(enum_cls, value: Any, default: Optional[Enum], field_name: str):
    """문자열 -> 열거형 (대소문자 무시), 값이 없으면 기본값"""
    if value is None or value == '':
        if default is None:
            raise MalformedInputError(f"{field_name} 값이 없습니다", field=field_name)
        return default
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ', '.join(member.value for member in enum_cls)
        raise MalformedInputError(
            f"{field_name} 값이 올바르지 않습니다: {value!r} (허용: {allowed})",
            field=field_name
        )
