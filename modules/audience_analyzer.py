"""
Audience Analyzer Module - 오디언스 분석
지역 분포, 연령/성별 분포, 관심사, 구매력, 오디언스 품질 점수
"""

from typing import Dict, List, Optional

from .normalizer import RawPlatformRecord, AGE_BRACKETS, GENDER_KEYS
from .taxonomy import extract_text_features


# 구매력이 높은 시장 (국가 코드 / 이름)
HIGH_INCOME_MARKETS = {
    'us', 'united states', 'usa', 'gb', 'uk', 'united kingdom', 'de', 'germany', 'fr', 'france',
    'jp', 'japan', 'kr', 'south korea', 'korea', 'sg', 'singapore', 'hk', 'hong kong',
    'tw', 'taiwan', 'au', 'australia', 'ca', 'canada', 'ch', 'switzerland', 'nl', 'netherlands',
    'se', 'sweden', 'no', 'norway', 'ae', 'united arab emirates',
    '미국', '일본', '한국', '대만', '싱가포르', '홍콩', '台灣', '香港', '新加坡', '日本', '美國',
}

# 아시아 시장 (국가 코드 / 이름)
ASIAN_MARKETS = {
    'kr', 'south korea', 'korea', 'jp', 'japan', 'tw', 'taiwan', 'hk', 'hong kong', 'sg', 'singapore',
    'my', 'malaysia', 'th', 'thailand', 'vn', 'vietnam', 'id', 'indonesia', 'ph', 'philippines',
    'cn', 'china', 'in', 'india',
    '한국', '일본', '대만', '홍콩', '싱가포르', '말레이시아', '태국', '베트남', '台灣', '香港', '新加坡', '馬來西亞', '日本',
}

# 구매력과 연관된 관심사
HIGH_SPEND_INTERESTS = {'luxury', 'finance', 'tech', 'travel', 'fashion'}

AGE_KEYS = {bracket: 'age_' + bracket.replace('-', '_').replace('+', '_plus') for bracket in AGE_BRACKETS}


def analyze_geography(record: RawPlatformRecord) -> Dict:
    """
    지역 분포 분석

    Returns:
        {'primary': 주요 지역, 'asian_markets': {지역: %}, 'global_reach': {지역: %}, 'unknown': 미상 %}
    """
    if record.audience_countries:
        markets = {name: pct for name, pct in record.audience_countries}
        primary = max(markets.items(), key=lambda kv: kv[1])[0]
    else:
        markets = {}
        primary = record.audience_location or record.country or 'unknown'

    asian_markets = {name: pct for name, pct in markets.items() if name.strip().lower() in ASIAN_MARKETS}

    known = round(sum(markets.values()), 2)
    return {
        'primary': primary,
        'asian_markets': asian_markets,
        'global_reach': markets,
        'unknown': round(max(0.0, 100 - known), 2)
    }


def analyze_demographics(record: RawPlatformRecord) -> Dict[str, float]:
    """6개 연령대 분포 (%), 데이터 없으면 0"""
    ages = dict(record.age_distribution)
    return {AGE_KEYS[bracket]: ages.get(bracket, 0.0) for bracket in AGE_BRACKETS}


def analyze_gender(record: RawPlatformRecord) -> Dict[str, float]:
    genders = dict(record.gender_distribution)
    return {key: genders.get(key, 0.0) for key in GENDER_KEYS}


def estimate_purchasing_power(primary: str, interests: List[str], demographics: Dict[str, float],
                              observed: bool) -> str:
    """
    구매력 등급 추정 (high / medium / low)
    관측 데이터가 없으면 중립값 medium
    """
    if not observed:
        return 'medium'

    points = 0
    if primary.strip().lower() in HIGH_INCOME_MARKETS:
        points += 1
    if HIGH_SPEND_INTERESTS.intersection(interests):
        points += 1
    if demographics['age_25_34'] + demographics['age_35_44'] >= 50:
        points += 1

    if points >= 2:
        return 'high'
    if points == 1:
        return 'medium'
    return 'low'


def calculate_audience_quality(record: RawPlatformRecord, metrics: Dict, geography: Dict) -> float:
    """
    오디언스 품질 점수 (0-100)
    참여율, 월간 성장, 인증 여부, 지역 집중도 반영 (기준 50)
    """
    score = 50.0

    if record.has('engagement'):
        rate = metrics['engagement_rate']
        if rate >= 6:
            score += 25
        elif rate >= 3:
            score += 15
        elif rate >= 1:
            score += 5
        else:
            score -= 15

    if record.has('growth'):
        score += 5 if metrics['growth']['monthly'] >= 0 else -10

    if record.verified:
        score += 5

    markets = geography['global_reach']
    if markets and max(markets.values()) >= 50:
        score += 5

    return round(max(0.0, min(100.0, score)), 1)


def analyze_audience(record: RawPlatformRecord, metrics: Dict, prior: Optional[Dict] = None) -> Dict:
    """
    오디언스 분석

    Args:
        record: 정규화 레코드
        metrics: 추출된 지표

    Returns:
        오디언스 분석 결과
    """
    geography = analyze_geography(record)
    demographics = analyze_demographics(record)
    gender = analyze_gender(record)

    features = extract_text_features(record)
    interests = features['categories'][:6]

    observed_fields = ['audience_countries', 'age_distribution', 'gender_distribution', 'engagement']
    observed = sum(1 for name in observed_fields if record.has(name))

    purchasing_power = estimate_purchasing_power(
        geography['primary'], interests, demographics,
        observed=observed > 0 or bool(interests)
    )

    return {
        'geography': geography,
        'demographics': demographics,
        'gender': gender,
        'interests': interests,
        'purchasing_power': purchasing_power,
        'quality_score': calculate_audience_quality(record, metrics, geography),
        'confidence': round(25 + 75 * observed / len(observed_fields), 1)
    }
