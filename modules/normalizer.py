"""
Normalizer Module - 제공자 원본 데이터 정규화
플랫폼/제공자마다 다른 payload를 RawPlatformRecord 하나로 통일합니다.

지원 payload 형태:
1. 통계 제공자 형태 (id / general / statistics / misc / daily)
2. AI 분석 / 수동 입력 형태 (name / followers / engagementRate / contentTopics ...)

누락된 선택 필드는 0 / 빈 문자열 / 빈 튜플로 채우고 missing_fields에 기록합니다.
"""

import re
import math
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import MalformedInputError
from .platforms import (
    Platform,
    FOLLOWER_FIELDS,
    GROWTH_SERIES_FIELDS,
    UPLOAD_FIELDS,
    profile_url
)

logger = logging.getLogger(__name__)


AGE_BRACKETS = ('13-17', '18-24', '25-34', '35-44', '45-54', '55+')
GENDER_KEYS = ('male', 'female', 'other')

# 이름 있는 성장 구간 -> 일수
GROWTH_HORIZONS = {
    'daily': 1,
    'weekly': 7,
    'monthly': 30,
    'quarterly': 90,
    'yearly': 365,
}

# 결측 여부를 추적하는 선택 필드
OPTIONAL_FIELDS = (
    'followers',
    'engagement',
    'growth',
    'grade',
    'recent_posts',
    'country',
    'audience_countries',
    'age_distribution',
    'gender_distribution',
    'content_topics',
    'content_styles',
)


@dataclass(frozen=True)
class PostSnapshot:
    """최근 게시물 스냅샷"""
    timestamp: Optional[float] = None  # epoch seconds
    likes: int = 0
    comments: int = 0
    shares: int = 0
    views: int = 0
    caption: str = ''
    hashtags: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RawPlatformRecord:
    """
    정규화된 플랫폼 레코드 (불변)

    분포 필드는 (키, 퍼센트) 쌍의 튜플, 성장 시계열은 (일수, 값) 쌍의 튜플입니다.
    """
    platform: Platform
    id: str
    url: str
    username: str = ''
    display_name: str = ''
    avatar_url: str = ''
    bio: str = ''

    followers: int = 0
    total_views: int = 0
    uploads: int = 0
    engagement_rate: float = 0.0
    avg_likes: float = 0.0
    avg_comments: float = 0.0
    avg_shares: float = 0.0
    avg_views: float = 0.0

    growth_series: Tuple[Tuple[int, float], ...] = ()
    upload_series: Tuple[Tuple[int, float], ...] = ()

    grade: str = ''
    verified: bool = False
    made_for_kids: bool = False

    country: str = ''
    audience_location: str = ''
    audience_countries: Tuple[Tuple[str, float], ...] = ()
    age_distribution: Tuple[Tuple[str, float], ...] = ()
    gender_distribution: Tuple[Tuple[str, float], ...] = ()

    content_topics: Tuple[str, ...] = ()
    content_styles: Tuple[str, ...] = ()
    recent_posts: Tuple[PostSnapshot, ...] = ()

    missing_fields: Tuple[str, ...] = field(default=())

    def growth_at(self, days: int) -> Optional[float]:
        """지정 일수의 성장 값 (없으면 None)"""
        for offset, value in self.growth_series:
            if offset == days:
                return value
        return None

    def uploads_at(self, days: int) -> Optional[float]:
        for offset, value in self.upload_series:
            if offset == days:
                return value
        return None

    def has(self, field_name: str) -> bool:
        """선택 필드가 실제로 관측되었는지 여부"""
        return field_name not in self.missing_fields


# ============== 파싱 헬퍼 ==============

_COUNT_SUFFIXES = {'k': 1_000, 'm': 1_000_000, 'b': 1_000_000_000}


def _dig(data: Any, *path: str) -> Any:
    """중첩 딕셔너리 안전 조회"""
    current = data
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _first(*values: Any, default: Any = None) -> Any:
    """None/빈 문자열이 아닌 첫 번째 값 (없으면 default)"""
    for value in values:
        if value is not None and value != '':
            return value
    return default


def parse_count(value: Any) -> Optional[float]:
    """
    숫자 또는 '1.2M', '15K', '12,345' 같은 문자열을 숫자로 변환합니다.

    Returns:
        숫자 (해석 불가하거나 inf/nan이면 None)
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        text, multiplier = value, 1
    elif isinstance(value, str):
        text = value.strip().lower().replace(',', '').replace('%', '')
        if not text:
            return None
        multiplier = 1
        if text[-1] in _COUNT_SUFFIXES:
            multiplier = _COUNT_SUFFIXES[text[-1]]
            text = text[:-1]
    else:
        return None

    try:
        number = float(text) * multiplier
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


_TRUE_STRINGS = ('true', '1', 'yes', 'y')


def parse_flag(value: Any) -> bool:
    """불리언 또는 'true' / 'false' 같은 문자열 플래그 해석"""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def parse_timestamp(value: Any) -> Optional[float]:
    """ISO 문자열 또는 epoch 숫자를 epoch seconds로 변환"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = parse_count(value)
        if number is None:
            return None
        # 밀리초 단위 epoch
        return number / 1000 if number > 1e11 else number
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        # Instagram Graph API 형식 (+0000)
        text = re.sub(r'([+-]\d{2})(\d{2})$', r'\1:\2', text)
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def _series(raw: Any) -> Tuple[Tuple[int, float], ...]:
    """{'1': n, '7': n} 또는 {'daily': n, 'weekly': n} 형태의 시계열 정규화"""
    if not isinstance(raw, Mapping):
        return ()

    points = {}
    for key, value in raw.items():
        number = parse_count(value)
        if number is None:
            continue
        key_text = str(key).strip().lower()
        if key_text in GROWTH_HORIZONS:
            days = GROWTH_HORIZONS[key_text]
        else:
            try:
                days = int(key_text)
            except ValueError:
                continue
        points[days] = number

    return tuple(sorted(points.items()))


def _percent_pairs(raw: Any, keys: Optional[Tuple[str, ...]] = None,
                   aliases: Optional[Dict[str, str]] = None) -> Tuple[Tuple[str, float], ...]:
    """
    분포 딕셔너리를 (키, 퍼센트) 튜플로 정규화합니다.
    값 합계가 1 이하이면 비율로 보고 100을 곱합니다.
    """
    if not isinstance(raw, Mapping):
        return ()

    values = {}
    for key, value in raw.items():
        number = parse_count(value)
        if number is None or number < 0:
            continue
        name = str(key).strip()
        if aliases:
            name = aliases.get(name.lower(), name)
        if keys is not None and name not in keys:
            continue
        values[name] = values.get(name, 0.0) + number

    total = sum(values.values())
    if total <= 0:
        return ()
    if total <= 1.0 + 1e-9:
        values = {k: v * 100 for k, v in values.items()}
        total *= 100
    # 합계가 100을 넘으면 100으로 맞춤
    if total > 100:
        values = {k: v * 100 / total for k, v in values.items()}

    ordered = sorted(values.items(), key=lambda kv: (keys.index(kv[0]) if keys else -kv[1]))
    # 소수 둘째 자리 내림 (합계 100 초과 방지)
    return tuple((k, math.floor(v * 100 + 1e-6) / 100) for k, v in ordered)


_AGE_ALIASES = {}
for _bracket in AGE_BRACKETS:
    _AGE_ALIASES[_bracket] = _bracket
    _AGE_ALIASES['age_' + _bracket.replace('-', '_').replace('+', '_plus')] = _bracket
_AGE_ALIASES['55_plus'] = '55+'
_AGE_ALIASES['55-64'] = '55+'
_AGE_ALIASES['65+'] = '55+'

_GENDER_ALIASES = {'m': 'male', 'f': 'female', 'men': 'male', 'women': 'female', 'unknown': 'other'}


def _string_tuple(raw: Any) -> Tuple[str, ...]:
    if isinstance(raw, str):
        raw = [part for part in re.split(r'[,;/|]', raw)]
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(str(item).strip() for item in raw if str(item).strip())


def _parse_post(raw: Mapping) -> PostSnapshot:
    caption = str(_first(raw.get('caption'), raw.get('text'), raw.get('title'), default=''))
    hashtags = raw.get('hashtags')
    if isinstance(hashtags, (list, tuple)):
        tags = tuple(str(tag).lstrip('#') for tag in hashtags if tag)
    else:
        tags = tuple(re.findall(r'#(\w+)', caption))

    def count(*keys):
        for key in keys:
            number = parse_count(raw.get(key))
            if number is not None:
                return int(max(0, number))
        return 0

    return PostSnapshot(
        timestamp=parse_timestamp(_first(raw.get('timestamp'), raw.get('created_at'), raw.get('date'))),
        likes=count('like_count', 'likes'),
        comments=count('comments_count', 'comments'),
        shares=count('shares', 'share_count'),
        views=count('views', 'view_count', 'plays'),
        caption=caption,
        hashtags=tags
    )


def _collect_posts(data: Mapping) -> Tuple[PostSnapshot, ...]:
    raw_posts = _first(
        data.get('recent_posts'),
        data.get('posts'),
        _dig(data, 'general', 'media', 'recent')
    )
    if isinstance(raw_posts, Mapping):
        raw_posts = list(raw_posts.values())
    if not isinstance(raw_posts, (list, tuple)):
        return ()

    posts = [_parse_post(p) for p in raw_posts if isinstance(p, Mapping)]
    # 시간순 정렬 (타임스탬프 없는 게시물은 뒤로)
    posts.sort(key=lambda p: (p.timestamp is None, p.timestamp or 0))
    return tuple(posts)


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


# ============== 정규화 ==============

def normalize_record(payload: Any, platform) -> RawPlatformRecord:
    """
    제공자 payload를 RawPlatformRecord로 정규화합니다.

    Args:
        payload: 제공자 원본 데이터 (dict)
        platform: 플랫폼 태그 (문자열 또는 Platform)

    Returns:
        RawPlatformRecord

    Raises:
        UnsupportedPlatformError: 알 수 없는 플랫폼 태그
        MalformedInputError: payload가 dict가 아니거나 id/url을 확정할 수 없음
    """
    platform = Platform.from_tag(platform)

    if not isinstance(payload, Mapping):
        raise MalformedInputError(
            f"payload는 dict여야 합니다 (받은 타입: {type(payload).__name__})",
            field='payload'
        )

    missing = []

    # ---- 식별 정보 ----
    raw_id = payload.get('id')
    id_block = raw_id if isinstance(raw_id, Mapping) else {}

    username = str(_first(
        id_block.get('username'),
        id_block.get('handle'),
        id_block.get('cusername'),
        payload.get('username'),
        payload.get('handle'),
        default=''
    )).lstrip('@')

    influencer_id = _first(
        id_block.get('id'),
        raw_id if not isinstance(raw_id, Mapping) else None,
        username
    )
    influencer_id = str(influencer_id).strip() if influencer_id is not None else ''

    url = str(payload.get('url') or '').strip()
    if not url and username:
        url = profile_url(platform, username)

    if not influencer_id and not url:
        raise MalformedInputError("id 또는 url을 확정할 수 없습니다", field='id')
    if not influencer_id:
        influencer_id = url

    display_name = str(_first(
        id_block.get('display_name'),
        payload.get('display_name'),
        payload.get('name'),
        username,
        default=''
    ))
    avatar_url = str(_first(
        _dig(payload, 'general', 'branding', 'avatar'),
        payload.get('avatar'),
        payload.get('avatar_url'),
        payload.get('profile_picture_url'),
        default=''
    ))
    bio = str(_first(payload.get('bio'), payload.get('biography'), payload.get('description'), default=''))

    # ---- 누적 통계 ----
    totals = _dig(payload, 'statistics', 'total')
    totals = totals if isinstance(totals, Mapping) else {}

    follower_field = FOLLOWER_FIELDS[platform]
    followers = parse_count(_first(totals.get(follower_field), payload.get('followers'),
                                   payload.get(follower_field)))
    if followers is None:
        missing.append('followers')
    followers = int(max(0, followers or 0))

    upload_field = UPLOAD_FIELDS[platform]
    uploads = parse_count(totals.get(upload_field)) if upload_field else None
    total_views = parse_count(totals.get('views'))

    posts = _collect_posts(payload)
    if not posts:
        missing.append('recent_posts')

    # ---- 참여 지표 ----
    engagement = _dig(payload, 'statistics', 'engagement')
    engagement = engagement if isinstance(engagement, Mapping) else {}
    daily = payload.get('daily')
    latest_daily = daily[-1] if isinstance(daily, list) and daily and isinstance(daily[-1], Mapping) else {}

    engagement_rate = parse_count(_first(
        totals.get('engagement_rate'),
        payload.get('engagementRate'),
        payload.get('engagement_rate')
    ))

    def average(key: str, post_attr: str) -> Optional[float]:
        value = parse_count(_first(engagement.get(key), latest_daily.get(key), payload.get(key)))
        if value is None and posts:
            value = _mean([getattr(p, post_attr) for p in posts])
        return value

    avg_likes = average('avg_likes', 'likes')
    avg_comments = average('avg_comments', 'comments')
    avg_shares = average('avg_shares', 'shares')
    avg_views = average('avg_views', 'views')

    if engagement_rate is None and avg_likes is None and avg_comments is None:
        missing.append('engagement')

    # ---- 성장 시계열 ----
    growth_block = _dig(payload, 'statistics', 'growth')
    growth_block = growth_block if isinstance(growth_block, Mapping) else {}
    growth_series = _series(_first(
        growth_block.get(GROWTH_SERIES_FIELDS[platform]),
        payload.get('growth')
    ))
    if not growth_series:
        missing.append('growth')
    upload_series = _series(growth_block.get(upload_field)) if upload_field else ()

    # ---- 등급 / 인증 ----
    misc = payload.get('misc') if isinstance(payload.get('misc'), Mapping) else {}
    grade = _first(_dig(misc, 'grade', 'grade'), payload.get('grade'))
    if isinstance(grade, Mapping):
        grade = grade.get('grade')
    grade = str(grade or '').strip().upper()
    if not grade:
        missing.append('grade')
    verified = parse_flag(_first(misc.get('sb_verified'), payload.get('verified')))
    made_for_kids = parse_flag(_first(misc.get('made_for_kids'), payload.get('made_for_kids')))

    # ---- 지역 / 오디언스 ----
    country = str(_first(
        _dig(payload, 'general', 'geo', 'country'),
        _dig(payload, 'general', 'geo', 'country_code'),
        payload.get('country'),
        default=''
    ))
    if not country:
        missing.append('country')

    audience = payload.get('audience') if isinstance(payload.get('audience'), Mapping) else {}
    audience_location = str(_first(payload.get('audienceLocation'), payload.get('audience_location'),
                                   audience.get('location'), default=''))
    audience_countries = _percent_pairs(_first(audience.get('countries'), payload.get('audience_countries')))
    if not audience_countries:
        missing.append('audience_countries')
    age_distribution = _percent_pairs(_first(audience.get('age'), payload.get('age_distribution')),
                                      keys=AGE_BRACKETS, aliases=_AGE_ALIASES)
    if not age_distribution:
        missing.append('age_distribution')
    gender_distribution = _percent_pairs(_first(audience.get('gender'), payload.get('gender_distribution')),
                                         keys=GENDER_KEYS, aliases=_GENDER_ALIASES)
    if not gender_distribution:
        missing.append('gender_distribution')

    # ---- 콘텐츠 ----
    content_topics = _string_tuple(_first(payload.get('contentTopics'), payload.get('content_topics'),
                                          payload.get('topics')))
    if not content_topics:
        missing.append('content_topics')
    content_styles = tuple(s.lower() for s in _string_tuple(_first(
        payload.get('contentStyle'), payload.get('content_styles'), payload.get('styles'))))
    if not content_styles:
        missing.append('content_styles')

    record = RawPlatformRecord(
        platform=platform,
        id=influencer_id,
        url=url,
        username=username,
        display_name=display_name,
        avatar_url=avatar_url,
        bio=bio,
        followers=followers,
        total_views=int(max(0, total_views or 0)),
        uploads=int(max(0, uploads or 0)),
        engagement_rate=float(max(0.0, engagement_rate or 0.0)),
        avg_likes=float(max(0.0, avg_likes or 0.0)),
        avg_comments=float(max(0.0, avg_comments or 0.0)),
        avg_shares=float(max(0.0, avg_shares or 0.0)),
        avg_views=float(max(0.0, avg_views or 0.0)),
        growth_series=growth_series,
        upload_series=upload_series,
        grade=grade,
        verified=verified,
        made_for_kids=made_for_kids,
        country=country,
        audience_location=audience_location,
        audience_countries=audience_countries,
        age_distribution=age_distribution,
        gender_distribution=gender_distribution,
        content_topics=content_topics,
        content_styles=content_styles,
        recent_posts=posts,
        missing_fields=tuple(missing)
    )

    logger.debug(f"정규화 완료: {platform.value}/{influencer_id} (결측 {len(missing)}개)")
    return record
