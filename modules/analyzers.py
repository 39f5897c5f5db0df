"""
Analyzer Set - 4개 하위 분석기 묶음
각 분석기는 (record, metrics, prior) -> dict 형태의 순수 함수이며,
AnalyzerSet의 필드를 교체해 다른 구현(통계/NLP 기반 등)으로 바꿀 수 있습니다.
"""

from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional

from .normalizer import RawPlatformRecord
from .audience_analyzer import analyze_audience
from .content_analyzer import analyze_content
from .business_analyzer import analyze_business
from .risk_analyzer import analyze_risk


Analyzer = Callable[[RawPlatformRecord, Dict, Optional[Dict]], Dict]

# 실행 순서 (뒤 분석기는 앞 분석기 결과를 prior로 받음)
ANALYZER_ORDER = ('audience', 'content', 'business', 'risk')


@dataclass(frozen=True)
class AnalyzerSet:
    audience: Analyzer = analyze_audience
    content: Analyzer = analyze_content
    business: Analyzer = analyze_business
    risk: Analyzer = analyze_risk

    def run(self, record: RawPlatformRecord, metrics: Dict) -> Dict[str, Dict]:
        """
        분석기를 순서대로 실행합니다.

        Returns:
            {'audience': ..., 'content': ..., 'business': ..., 'risk': ...}
        """
        results: Dict[str, Dict] = {}
        for name in ANALYZER_ORDER:
            analyzer = getattr(self, name)
            results[name] = analyzer(record, metrics, dict(results))
        return results

    def with_overrides(self, **analyzers: Analyzer) -> 'AnalyzerSet':
        """일부 분석기만 교체한 새 AnalyzerSet"""
        return replace(self, **analyzers)


DEFAULT_ANALYZERS = AnalyzerSet()
