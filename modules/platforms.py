"""
Platforms Module - 플랫폼 정의 및 플랫폼별 조회 테이블
플랫폼 분기는 문자열 비교 대신 Platform 열거형을 키로 하는 테이블로 처리합니다.
"""

import re
from enum import Enum
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse

from .errors import UnsupportedPlatformError


class Platform(Enum):
    YOUTUBE = 'YouTube'
    INSTAGRAM = 'Instagram'
    FACEBOOK = 'Facebook'
    TIKTOK = 'TikTok'
    TWITTER = 'Twitter'

    @classmethod
    def from_tag(cls, tag) -> 'Platform':
        """
        플랫폼 태그를 Platform으로 변환합니다. (대소문자 무시)

        Raises:
            UnsupportedPlatformError: 알 수 없는 태그
        """
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, str):
            key = tag.strip().lower()
            for platform in cls:
                if key in (platform.value.lower(), platform.name.lower()):
                    return platform
            if key == 'x':
                return cls.TWITTER
        raise UnsupportedPlatformError(tag)


# 팔로워 수가 들어있는 통계 필드 (statistics.total.*)
FOLLOWER_FIELDS: Dict[Platform, str] = {
    Platform.YOUTUBE: 'subscribers',
    Platform.INSTAGRAM: 'followers',
    Platform.FACEBOOK: 'likes',
    Platform.TIKTOK: 'followers',
    Platform.TWITTER: 'followers',
}

# 팔로워 증가 시계열 필드 (statistics.growth.*)
GROWTH_SERIES_FIELDS: Dict[Platform, str] = {
    Platform.YOUTUBE: 'subs',
    Platform.INSTAGRAM: 'followers',
    Platform.FACEBOOK: 'likes',
    Platform.TIKTOK: 'followers',
    Platform.TWITTER: 'followers',
}

# 업로드 수 필드 (statistics.total.* / statistics.growth.*)
UPLOAD_FIELDS: Dict[Platform, Optional[str]] = {
    Platform.YOUTUBE: 'uploads',
    Platform.INSTAGRAM: 'media',
    Platform.FACEBOOK: None,
    Platform.TIKTOK: 'uploads',
    Platform.TWITTER: 'tweets',
}

# 플랫폼별 지원 콘텐츠 유형
PLATFORM_CONTENT_TYPES: Dict[Platform, Tuple[str, ...]] = {
    Platform.YOUTUBE: ('video',),
    Platform.INSTAGRAM: ('image', 'story', 'reel'),
    Platform.FACEBOOK: ('video', 'image', 'text'),
    Platform.TIKTOK: ('video', 'reel'),
    Platform.TWITTER: ('text', 'image'),
}

# 프로필 URL 템플릿
PROFILE_URL_TEMPLATES: Dict[Platform, str] = {
    Platform.YOUTUBE: 'https://www.youtube.com/@{username}',
    Platform.INSTAGRAM: 'https://www.instagram.com/{username}',
    Platform.FACEBOOK: 'https://www.facebook.com/{username}',
    Platform.TIKTOK: 'https://www.tiktok.com/@{username}',
    Platform.TWITTER: 'https://twitter.com/{username}',
}

# URL 호스트 -> 플랫폼
PLATFORM_HOSTS: Dict[str, Platform] = {
    'youtube.com': Platform.YOUTUBE,
    'youtu.be': Platform.YOUTUBE,
    'instagram.com': Platform.INSTAGRAM,
    'facebook.com': Platform.FACEBOOK,
    'fb.com': Platform.FACEBOOK,
    'tiktok.com': Platform.TIKTOK,
    'twitter.com': Platform.TWITTER,
    'x.com': Platform.TWITTER,
}

# URL 경로에서 사용자명을 뽑는 패턴 (순서대로 시도)
USERNAME_PATTERNS: Dict[Platform, List[str]] = {
    Platform.YOUTUBE: [
        r'^/@([^/?]+)',
        r'^/c/([^/?]+)',
        r'^/channel/([^/?]+)',
        r'^/user/([^/?]+)',
        r'^/([^/?]+)$',
    ],
    Platform.INSTAGRAM: [r'^/([^/?]+)'],
    Platform.FACEBOOK: [r'^/([^/?]+)'],
    Platform.TIKTOK: [r'^/@([^/?]+)', r'^/([^/?]+)'],
    Platform.TWITTER: [r'^/([^/?]+)'],
}


def detect_platform(url: str) -> Platform:
    """
    프로필 URL에서 플랫폼을 판별합니다.

    Raises:
        UnsupportedPlatformError: 지원하지 않는 호스트
    """
    host = (urlparse(url).netloc or '').lower().split(':')[0]
    if host.startswith('www.') or host.startswith('m.'):
        host = host.split('.', 1)[1]

    for domain, platform in PLATFORM_HOSTS.items():
        if host == domain or host.endswith('.' + domain):
            return platform

    raise UnsupportedPlatformError(url)


def extract_username(url: str, platform: Optional[Platform] = None) -> Optional[str]:
    """
    프로필 URL에서 사용자명을 추출합니다.

    Returns:
        사용자명 (찾지 못하면 None)
    """
    platform = platform or detect_platform(url)
    path = urlparse(url).path.rstrip('/')

    for pattern in USERNAME_PATTERNS[platform]:
        match = re.search(pattern, path)
        if match:
            return match.group(1)
    return None


def profile_url(platform: Platform, username: str) -> str:
    """사용자명으로 프로필 URL 생성"""
    return PROFILE_URL_TEMPLATES[platform].format(username=username.lstrip('@'))
