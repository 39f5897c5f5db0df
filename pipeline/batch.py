"""
Batch Orchestrator - 여러 인플루언서 일괄 분석
=============================================

항목별 상태: pending -> processing -> completed | error
- 한 항목의 실패가 나머지 항목을 막지 않습니다. (실패 사유는 항목별로 보존)
- 항목 처리 후마다 진행률 콜백을 호출합니다.
- max_workers > 1이면 스레드 풀로 병렬 처리하며, 결과 순서는 입력 순서를 유지합니다.

입력 항목:
- 프로필 URL 문자열 -> fetcher(url)로 원본 payload 조회
- dict {'payload': ..., 'platform': ..., 'url': ...} -> 조회 없이 바로 표준화
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from config.scoring import ScoringConfig
from modules.platforms import Platform
from modules.analyzers import AnalyzerSet
from modules.report_assembler import DataSource, StandardizedKOLReport, standardize_report

logger = logging.getLogger(__name__)


Fetcher = Callable[[str], Tuple[Dict, Platform]]
BatchInput = Union[str, Mapping[str, Any]]


class ItemStatus(str, Enum):
    PENDING = 'pending'
    PROCESSING = 'processing'
    COMPLETED = 'completed'
    ERROR = 'error'


@dataclass
class BatchItem:
    """일괄 처리 항목 상태"""
    index: int
    source: BatchInput
    status: ItemStatus = ItemStatus.PENDING
    report: Optional[StandardizedKOLReport] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def label(self) -> str:
        if isinstance(self.source, str):
            return self.source
        return str(self.source.get('url') or self.source.get('id') or f'#{self.index + 1}')

    def to_dict(self) -> Dict:
        return {
            'index': self.index,
            'source': self.label,
            'status': self.status.value,
            'report': self.report.to_dict() if self.report else None,
            'error': self.error,
            'error_kind': self.error_kind
        }


@dataclass
class BatchResult:
    items: List[BatchItem] = field(default_factory=list)

    @property
    def success(self) -> int:
        return sum(1 for item in self.items if item.status == ItemStatus.COMPLETED)

    @property
    def failed(self) -> int:
        return sum(1 for item in self.items if item.status == ItemStatus.ERROR)

    @property
    def reports(self) -> List[StandardizedKOLReport]:
        return [item.report for item in self.items if item.report is not None]

    def summary(self) -> Dict[str, int]:
        return {'total': len(self.items), 'success': self.success, 'failed': self.failed}

    def to_dict(self) -> Dict:
        return {
            'summary': self.summary(),
            'items': [item.to_dict() for item in self.items]
        }


ProgressCallback = Callable[[int, int, BatchItem], None]


class BatchAnalyzer:
    """
    일괄 분석 실행기

    사용법:
        client = SocialBladeClient()
        batch = BatchAnalyzer(fetcher=client.fetch_by_url, progress_callback=print_progress)
        result = batch.run(["https://www.youtube.com/@a", "https://www.instagram.com/b"])
        result.summary()  # {'total': 2, 'success': 2, 'failed': 0}
    """

    def __init__(
        self,
        fetcher: Optional[Fetcher] = None,
        data_source: Union[DataSource, str] = DataSource.PROVIDER_AGGREGATED,
        config: Optional[ScoringConfig] = None,
        analyzers: Optional[AnalyzerSet] = None,
        max_workers: int = 1,
        progress_callback: Optional[ProgressCallback] = None
    ):
        self.fetcher = fetcher
        self.data_source = DataSource(data_source)
        self.config = config
        self.analyzers = analyzers
        self.max_workers = max(1, int(max_workers))
        self.progress_callback = progress_callback

        self._lock = threading.Lock()
        self._done = 0
        self._total = 0

    def _resolve(self, source: BatchInput) -> Tuple[Any, Any, Optional[str]]:
        """입력 항목 -> (payload, platform, url)"""
        if isinstance(source, str):
            if self.fetcher is None:
                raise ValueError("URL 입력을 처리하려면 fetcher가 필요합니다")
            payload, platform = self.fetcher(source)
            return payload, platform, source
        if isinstance(source, Mapping):
            return source.get('payload'), source.get('platform'), source.get('url')
        raise TypeError(f"지원하지 않는 입력 형식: {type(source).__name__}")

    def process_item(self, item: BatchItem) -> BatchItem:
        """단일 항목 처리 (예외는 항목 상태로 기록)"""
        item.status = ItemStatus.PROCESSING
        try:
            payload, platform, url = self._resolve(item.source)
            if url and isinstance(payload, dict) and not payload.get('url'):
                payload = dict(payload, url=url)
            item.report = standardize_report(
                payload, platform,
                data_source=self.data_source,
                config=self.config,
                analyzers=self.analyzers
            )
            item.status = ItemStatus.COMPLETED
        except Exception as e:
            item.status = ItemStatus.ERROR
            item.error = str(e)
            item.error_kind = type(e).__name__
            logger.error(f"항목 {item.index + 1} 분석 실패 ({item.label}): {e}")

        self._report_progress(item)
        return item

    def _report_progress(self, item: BatchItem) -> None:
        with self._lock:
            self._done += 1
            done = self._done
        logger.info(f"진행률: {done}/{self._total} ({item.label}: {item.status.value})")
        if self.progress_callback:
            self.progress_callback(done, self._total, item)

    def run(self, sources: Sequence[BatchInput]) -> BatchResult:
        """
        일괄 분석 실행

        Args:
            sources: URL 문자열 또는 payload dict 목록

        Returns:
            BatchResult (입력 순서 유지)
        """
        items = [BatchItem(index=i, source=source) for i, source in enumerate(sources)]
        self._total = len(items)
        self._done = 0

        logger.info(f"일괄 분석 시작: {self._total}건 (workers={self.max_workers})")

        if self.max_workers == 1 or self._total <= 1:
            for item in items:
                self.process_item(item)
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                list(executor.map(self.process_item, items))

        result = BatchResult(items=items)
        logger.info(f"일괄 분석 완료: 성공 {result.success}건, 실패 {result.failed}건")
        return result
