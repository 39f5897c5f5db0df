"""
Social Blade Matrix API 클라이언트
통계 제공자에서 플랫폼별 원본 통계 payload를 가져옵니다.
(정규화는 modules.normalizer가 담당)
"""
import logging
from typing import Dict, List, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from config.social_blade import (
    SOCIAL_BLADE_BASE_URL,
    SOCIAL_BLADE_CLIENT_ID,
    SOCIAL_BLADE_TOKEN,
    SOCIAL_BLADE_HISTORY,
    REQUEST_TIMEOUT,
    MAX_RETRIES,
    BACKOFF_FACTOR,
    SUPPORTED_PROVIDER_PLATFORMS
)
from modules.platforms import Platform, detect_platform, extract_username

logger = logging.getLogger(__name__)


class SocialBladeAPIError(Exception):
    """통계 제공자 API 에러"""
    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class SocialBladeConfigError(SocialBladeAPIError):
    """자격 증명 누락"""


def username_variations(username: str) -> List[str]:
    """조회 실패 시 시도할 사용자명 변형 (원본, @ 제거, 소문자)"""
    variations = []
    for candidate in (username, username.lstrip('@'), username.lstrip('@').lower()):
        if candidate and candidate not in variations:
            variations.append(candidate)
    return variations


class SocialBladeClient:
    """
    Social Blade Matrix API 클라이언트

    사용법:
        client = SocialBladeClient(client_id="...", token="...")

        # 플랫폼 + 사용자명으로 조회
        payload = client.get_statistics(Platform.YOUTUBE, "mrbeast")

        # 프로필 URL로 조회
        payload, platform = client.fetch_by_url("https://www.youtube.com/@mrbeast")
    """

    def __init__(
        self,
        client_id: str = None,
        token: str = None,
        base_url: str = None,
        history: str = None,
        session: requests.Session = None
    ):
        """
        클라이언트 초기화

        Args:
            client_id: API client id (기본: SOCIAL_BLADE_CLIENT_ID 환경변수)
            token: API token (기본: SOCIAL_BLADE_TOKEN 환경변수)
            base_url: API 기본 주소
            history: 히스토리 범위 (default / extended / archive)
            session: 주입할 HTTP 세션 (테스트용)
        """
        self.client_id = client_id or SOCIAL_BLADE_CLIENT_ID
        self.token = token or SOCIAL_BLADE_TOKEN
        self.base_url = (base_url or SOCIAL_BLADE_BASE_URL).rstrip('/')
        self.history = history or SOCIAL_BLADE_HISTORY

        if not self.client_id or not self.token:
            raise SocialBladeConfigError(
                "Social Blade 자격 증명이 필요합니다. "
                "환경변수 SOCIAL_BLADE_CLIENT_ID / SOCIAL_BLADE_TOKEN을 설정하거나 생성자에 전달하세요."
            )

        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """재시도 로직이 포함된 HTTP 세션 생성"""
        session = requests.Session()

        retry_strategy = Retry(
            total=MAX_RETRIES,
            backoff_factor=BACKOFF_FACTOR,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"]
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

        return session

    def _request(self, path: str, params: Dict) -> Dict:
        """
        API 요청 수행

        Returns:
            응답의 data 블록

        Raises:
            SocialBladeAPIError: HTTP 오류 / 응답 status.success == false / 네트워크 오류
        """
        url = f"{self.base_url}/{path}"
        headers = {"clientid": self.client_id, "token": self.token}

        try:
            response = self.session.get(url, params=params, headers=headers, timeout=REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            raise SocialBladeAPIError(f"네트워크 오류: {str(e)}")

        if response.status_code != 200:
            raise SocialBladeAPIError(
                f"Social Blade API 오류: HTTP {response.status_code}",
                status_code=response.status_code
            )

        try:
            body = response.json()
        except ValueError:
            raise SocialBladeAPIError("응답을 JSON으로 해석할 수 없습니다", status_code=response.status_code)

        status = body.get("status") or {}
        if not status.get("success", False):
            raise SocialBladeAPIError(
                f"API 오류: {status.get('error') or 'Unknown error'}",
                status_code=status.get("status")
            )

        credits = (body.get("info") or {}).get("credits", {}).get("available")
        if credits is not None:
            logger.debug(f"남은 크레딧: {credits}")

        return body.get("data") or {}

    def get_statistics(self, platform, query: str) -> Dict:
        """
        플랫폼 통계 조회

        Args:
            platform: 플랫폼 (Platform 또는 태그 문자열)
            query: 사용자명 / 핸들 / 채널 ID

        Returns:
            원본 통계 payload
        """
        platform = Platform.from_tag(platform)
        path_name = platform.value.lower()
        if path_name not in SUPPORTED_PROVIDER_PLATFORMS:
            raise SocialBladeAPIError(f"제공자가 지원하지 않는 플랫폼: {platform.value}")

        params = {"query": query, "history": self.history, "allow-stale": "false"}
        logger.info(f"Social Blade 조회: {platform.value}/{query}")
        return self._request(f"{path_name}/statistics", params)

    def fetch_by_url(self, url: str) -> Tuple[Dict, Platform]:
        """
        프로필 URL로 통계 조회
        조회가 실패하면 사용자명 변형을 순서대로 시도합니다.

        Returns:
            (payload, platform)

        Raises:
            UnsupportedPlatformError: 지원하지 않는 URL
            SocialBladeAPIError: 사용자명 추출 실패 또는 모든 변형 조회 실패
        """
        platform = detect_platform(url)
        username = extract_username(url, platform)
        if not username:
            raise SocialBladeAPIError(f"URL에서 사용자명을 찾을 수 없습니다: {url}")

        last_error: Optional[SocialBladeAPIError] = None
        for candidate in username_variations(username):
            try:
                payload = self.get_statistics(platform, candidate)
            except SocialBladeAPIError as e:
                if e.status_code not in (400, 404):
                    raise
                logger.warning(f"{candidate} 조회 실패, 다음 변형 시도: {e}")
                last_error = e
                continue

            payload.setdefault("url", url)
            return payload, platform

        raise last_error
