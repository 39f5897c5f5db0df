"""
API 모듈 - KOL 리포트 표준화 / 브랜드 매칭 REST API
"""
