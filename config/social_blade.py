"""
통계 제공자(Social Blade Matrix API) 설정
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# API 기본 설정
SOCIAL_BLADE_BASE_URL = os.getenv("SOCIAL_BLADE_BASE_URL", "https://matrix.sbapis.com/b")

# 환경 변수에서 자격 증명 로드
SOCIAL_BLADE_CLIENT_ID: Optional[str] = os.getenv("SOCIAL_BLADE_CLIENT_ID")
SOCIAL_BLADE_TOKEN: Optional[str] = os.getenv("SOCIAL_BLADE_TOKEN")

# 히스토리 범위 (default / extended / archive)
SOCIAL_BLADE_HISTORY = os.getenv("SOCIAL_BLADE_HISTORY", "default")

# 요청 설정
REQUEST_TIMEOUT = 30  # 초
MAX_RETRIES = 3
BACKOFF_FACTOR = 1.0

# 지원 플랫폼 (API 경로명)
SUPPORTED_PROVIDER_PLATFORMS = ["youtube", "instagram", "facebook", "tiktok", "twitter"]
