"""
Report Assembler Module - 표준 리포트 조립
정규화 -> 지표 -> 분석기 -> 평가 결과를 StandardizedKOLReport로 묶고,
매칭 결과를 InfluencerMatchScore로 포장합니다.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from config.scoring import SCHEMA_VERSION, ScoringConfig, DEFAULT_SCORING_CONFIG
from .normalizer import RawPlatformRecord, OPTIONAL_FIELDS, normalize_record
from .metrics import extract_metrics
from .analyzers import AnalyzerSet, DEFAULT_ANALYZERS
from .evaluator import evaluate_dimensions
from .brand_profile import BrandProfile
from .matcher import MatchCandidate, calculate_brand_match

logger = logging.getLogger(__name__)


class DataSource(str, Enum):
    PROVIDER_AGGREGATED = 'provider_aggregated'
    AI_DERIVED = 'ai_derived'
    MANUAL = 'manual'
    HYBRID = 'hybrid'


# 데이터 출처별 기본 정확도
SOURCE_ACCURACY = {
    DataSource.PROVIDER_AGGREGATED: 85.0,
    DataSource.AI_DERIVED: 70.0,
    DataSource.MANUAL: 75.0,
    DataSource.HYBRID: 80.0,
}

SOURCE_ANALYST = {
    DataSource.PROVIDER_AGGREGATED: 'hybrid',
    DataSource.AI_DERIVED: 'ai',
    DataSource.MANUAL: 'human',
    DataSource.HYBRID: 'hybrid',
}

DEFAULT_FRESHNESS = 95.0

QUALITY_KEYS = ('completeness', 'accuracy', 'freshness', 'reliability')


@dataclass
class StandardizedKOLReport:
    id: str
    name: str
    platform: str
    url: str
    metrics: Dict = field(default_factory=dict)
    evaluation: Dict = field(default_factory=dict)
    audience: Dict = field(default_factory=dict)
    content: Dict = field(default_factory=dict)
    business: Dict = field(default_factory=dict)
    risk: Dict = field(default_factory=dict)
    metadata: Dict = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'platform': self.platform,
            'url': self.url,
            'metrics': self.metrics,
            'evaluation': self.evaluation,
            'audience': self.audience,
            'content': self.content,
            'business': self.business,
            'risk': self.risk,
            'metadata': self.metadata
        }


@dataclass
class InfluencerMatchScore:
    influencer_id: str
    brand_id: str
    overall_score: float
    category_scores: Dict[str, float]
    detailed_analysis: Dict
    recommendations: List[str] = field(default_factory=list)
    risk_factors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'influencer_id': self.influencer_id,
            'brand_id': self.brand_id,
            'overall_score': self.overall_score,
            'category_scores': dict(self.category_scores),
            'detailed_analysis': self.detailed_analysis,
            'recommendations': list(self.recommendations),
            'risk_factors': list(self.risk_factors)
        }


def _timestamp(value: Optional[datetime]) -> str:
    value = value or datetime.now(timezone.utc)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def calculate_completeness(record: RawPlatformRecord) -> float:
    """관측된 선택 필드 비율 (0-100)"""
    observed = sum(1 for name in OPTIONAL_FIELDS if record.has(name))
    return round(100 * observed / len(OPTIONAL_FIELDS), 1)


def build_metadata(record: RawPlatformRecord, data_source: DataSource, analyses: Dict,
                   config: ScoringConfig, quality: Optional[Mapping[str, float]] = None,
                   generated_at: Optional[datetime] = None) -> Dict:
    """
    리포트 메타데이터 생성

    quality를 넘기면 해당 항목은 호출자가 측정한 값을 사용합니다.
    """
    confidences = [result.get('confidence', 50.0) for result in analyses.values()]
    reliability = round(sum(confidences) / len(confidences), 1) if confidences else 50.0

    figures = {
        'completeness': calculate_completeness(record),
        'accuracy': SOURCE_ACCURACY[data_source],
        'freshness': DEFAULT_FRESHNESS,
        'reliability': reliability,
    }
    for key, value in (quality or {}).items():
        if key in figures and value is not None:
            figures[key] = round(max(0.0, min(100.0, float(value))), 1)

    confidence = round(sum(figures.values()) / len(figures), 1)
    stamp = _timestamp(generated_at)

    return {
        'data_source': data_source.value,
        'generated_at': stamp,
        'last_updated': stamp,
        'quality': figures,
        'analyst': {
            'type': SOURCE_ANALYST[data_source],
            'confidence': confidence
        },
        'analyzer_confidence': {name: result.get('confidence', 50.0) for name, result in analyses.items()},
        'missing_fields': list(record.missing_fields),
        'version': SCHEMA_VERSION,
        'scoring_version': config.version
    }


def assemble_report(record: RawPlatformRecord,
                    data_source: Union[DataSource, str] = DataSource.PROVIDER_AGGREGATED,
                    config: Optional[ScoringConfig] = None,
                    analyzers: Optional[AnalyzerSet] = None,
                    quality: Optional[Mapping[str, float]] = None,
                    generated_at: Optional[datetime] = None) -> StandardizedKOLReport:
    """
    정규화 레코드로 표준 리포트를 조립합니다.

    Args:
        record: 정규화 레코드
        data_source: 데이터 출처
        config: 스코어링 설정
        analyzers: 분석기 묶음 (교체용)
        quality: 호출자가 측정한 품질 수치 (선택)
        generated_at: 생성 시각 (기본: 현재 UTC)

    Returns:
        StandardizedKOLReport
    """
    data_source = DataSource(data_source)
    config = config or DEFAULT_SCORING_CONFIG
    analyzers = analyzers or DEFAULT_ANALYZERS

    metrics = extract_metrics(record)
    analyses = analyzers.run(record, metrics)
    evaluation = evaluate_dimensions(record, metrics, analyses, config)

    report = StandardizedKOLReport(
        id=record.id,
        name=record.display_name or record.username,
        platform=record.platform.value,
        url=record.url,
        metrics=metrics,
        evaluation=evaluation,
        audience=analyses['audience'],
        content=analyses['content'],
        business=analyses['business'],
        risk=analyses['risk'],
        metadata=build_metadata(record, data_source, analyses, config, quality, generated_at)
    )

    logger.debug(f"리포트 조립 완료: {report.platform}/{report.id} grade={evaluation['grade']}")
    return report


def standardize_report(payload: Any, platform,
                       data_source: Union[DataSource, str] = DataSource.PROVIDER_AGGREGATED,
                       config: Optional[ScoringConfig] = None,
                       analyzers: Optional[AnalyzerSet] = None,
                       quality: Optional[Mapping[str, float]] = None,
                       generated_at: Optional[datetime] = None) -> StandardizedKOLReport:
    """
    제공자 payload -> 표준 리포트 (정규화 포함)

    Raises:
        UnsupportedPlatformError, MalformedInputError
    """
    record = normalize_record(payload, platform)
    return assemble_report(record, data_source, config, analyzers, quality, generated_at)


def _as_candidate(influencer: Union[StandardizedKOLReport, MatchCandidate, Mapping]) -> MatchCandidate:
    if isinstance(influencer, MatchCandidate):
        return influencer
    if isinstance(influencer, StandardizedKOLReport):
        return MatchCandidate.from_report(influencer.to_dict())
    if 'evaluation' in influencer and 'metrics' in influencer:
        return MatchCandidate.from_report(influencer)
    return MatchCandidate.from_profile(influencer)


def assemble_match_score(influencer: Union[StandardizedKOLReport, MatchCandidate, Mapping],
                         brand: BrandProfile,
                         config: Optional[ScoringConfig] = None) -> InfluencerMatchScore:
    """
    인플루언서(리포트/프로필)와 브랜드의 매칭 결과 생성

    리포트는 읽기만 하며 수정하지 않습니다.
    """
    candidate = _as_candidate(influencer)
    result = calculate_brand_match(candidate, brand, config)

    return InfluencerMatchScore(
        influencer_id=candidate.id,
        brand_id=brand.id,
        overall_score=result['overall_score'],
        category_scores=result['category_scores'],
        detailed_analysis=result['detailed_analysis'],
        recommendations=result['recommendations'],
        risk_factors=result['risk_factors']
    )


def rank_matches(influencers: Iterable, brand: BrandProfile,
                 config: Optional[ScoringConfig] = None,
                 top_k: Optional[int] = None) -> List[InfluencerMatchScore]:
    """
    여러 인플루언서를 매칭 점수 순으로 정렬합니다. (동점은 id 순)

    Args:
        influencers: 리포트/프로필 목록
        brand: 브랜드 프로필
        config: 스코어링 설정
        top_k: 상위 N개만 반환

    Returns:
        InfluencerMatchScore 리스트
    """
    scores = [assemble_match_score(item, brand, config) for item in influencers]
    scores.sort(key=lambda s: (-s.overall_score, s.influencer_id))
    return scores[:top_k] if top_k is not None else scores
