"""
엔진 예외 정의
"""


class KOLEngineError(Exception):
    """스코어링 엔진 에러"""


class UnsupportedPlatformError(KOLEngineError):
    """지원하지 않는 플랫폼 태그"""
    def __init__(self, platform):
        super().__init__(f"지원하지 않는 플랫폼입니다: {platform!r}")
        self.platform = platform


class MalformedInputError(KOLEngineError):
    """필수 식별 필드 누락 등 입력 형식 오류"""
    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field
