"""
외부 연동 서비스
================

social_blade_client.py:
- SocialBladeClient: 통계 제공자 API에서 플랫폼별 원본 payload 조회

export_service.py:
- export_report_summary: 표준 리포트 -> 사람이 읽을 수 있는 라벨의 평면 요약
"""
