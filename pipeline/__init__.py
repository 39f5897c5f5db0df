"""
인플루언서 일괄 분석 파이프라인
==============================

batch.py:
- BatchAnalyzer: URL/payload 목록을 표준 리포트로 일괄 변환
- 항목별 상태 추적 (pending -> processing -> completed | error)
- 진행률 콜백, 실패 격리, 선택적 스레드 풀 병렬 처리
"""

from .batch import BatchAnalyzer, BatchItem, BatchResult, ItemStatus

__all__ = [
    'BatchAnalyzer',
    'BatchItem',
    'BatchResult',
    'ItemStatus'
]
