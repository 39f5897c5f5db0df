"""
API 라우터 - KOL 리포트 표준화 / 브랜드 매칭 API
===============================================

엔드포인트:
- GET  /platforms: 지원 플랫폼 및 플랫폼별 조회 테이블
- GET  /scoring-config: 현재 스코어링 설정 (가중치, 등급 사다리)
- POST /reports: 원본 payload 또는 프로필 URL -> 표준 리포트
- POST /reports/batch: 여러 URL/payload 일괄 분석
- POST /match: 브랜드 프로필 + 인플루언서 -> 매칭 점수
- POST /reports/export: 표준 리포트 -> 내보내기용 요약
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
import logging

from config.scoring import ScoringConfig, load_scoring_config
from modules.errors import KOLEngineError
from modules.platforms import Platform, FOLLOWER_FIELDS, PLATFORM_CONTENT_TYPES
from modules.brand_profile import BrandProfile
from modules.report_assembler import DataSource, standardize_report, assemble_match_score
from pipeline.batch import BatchAnalyzer
from services.social_blade_client import SocialBladeClient, SocialBladeAPIError, SocialBladeConfigError
from services.export_service import export_report_summary

logger = logging.getLogger(__name__)

router = APIRouter()


# ============== Pydantic 모델 ==============

class ReportRequest(BaseModel):
    """리포트 생성 요청 (payload + platform 또는 url)"""
    payload: Optional[Dict[str, Any]] = None
    platform: Optional[str] = None
    url: Optional[str] = None
    data_source: Optional[str] = None
    quality: Optional[Dict[str, float]] = None  # 호출자가 측정한 품질 수치


class BatchEntry(BaseModel):
    payload: Dict[str, Any]
    platform: str
    url: Optional[str] = None


class BatchRequest(BaseModel):
    """일괄 분석 요청"""
    urls: List[str] = Field(default_factory=list)
    items: List[BatchEntry] = Field(default_factory=list)
    data_source: Optional[str] = None
    max_workers: int = 1


class MatchRequest(BaseModel):
    """매칭 요청 (report: 표준 리포트, influencer: 평면 프로필 중 하나)"""
    brand: Dict[str, Any]
    report: Optional[Dict[str, Any]] = None
    influencer: Optional[Dict[str, Any]] = None


class ExportRequest(BaseModel):
    report: Dict[str, Any]


# ============== 의존성 ==============

_scoring_config: ScoringConfig = None
_client: Optional[SocialBladeClient] = None


def init_routes(scoring_config: ScoringConfig = None, client: SocialBladeClient = None):
    """라우터 초기화"""
    global _scoring_config, _client

    _scoring_config = scoring_config or load_scoring_config()
    _client = client
    logger.info(f"스코어링 설정 버전: {_scoring_config.version}")


def _get_config() -> ScoringConfig:
    global _scoring_config
    if _scoring_config is None:
        _scoring_config = load_scoring_config()
    return _scoring_config


def _get_client() -> SocialBladeClient:
    """통계 제공자 클라이언트 (지연 생성)"""
    global _client
    if _client is None:
        try:
            _client = SocialBladeClient()
        except SocialBladeConfigError as e:
            raise HTTPException(status_code=503, detail=str(e))
    return _client


def _data_source(value: Optional[str], default: DataSource) -> DataSource:
    if not value:
        return default
    try:
        return DataSource(value)
    except ValueError:
        allowed = ', '.join(s.value for s in DataSource)
        raise HTTPException(status_code=400, detail=f"data_source 값이 올바르지 않습니다 (허용: {allowed})")


# ============== 메타 API ==============

@router.get("/platforms")
async def get_platforms():
    """지원 플랫폼"""
    return {
        "platforms": [
            {
                "name": platform.value,
                "follower_field": FOLLOWER_FIELDS[platform],
                "content_types": list(PLATFORM_CONTENT_TYPES[platform])
            }
            for platform in Platform
        ]
    }


@router.get("/scoring-config")
async def get_scoring_config():
    """현재 스코어링 설정"""
    return _get_config().to_dict()


# ============== 리포트 API ==============

@router.post("/reports")
def create_report(request: ReportRequest):
    """
    표준 리포트 생성

    - payload + platform: 전달된 원본 데이터를 그대로 표준화
    - url: 통계 제공자에서 조회 후 표준화
    """
    if request.payload is not None:
        if not request.platform:
            raise HTTPException(status_code=400, detail="payload에는 platform이 필요합니다")
        payload, platform = dict(request.payload), request.platform
        if request.url and not payload.get("url"):
            payload["url"] = request.url
        default_source = DataSource.MANUAL
    elif request.url:
        try:
            payload, platform = _get_client().fetch_by_url(request.url)
        except KOLEngineError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except SocialBladeAPIError as e:
            logger.error(f"통계 제공자 조회 실패: {e}")
            raise HTTPException(status_code=502, detail=str(e))
        default_source = DataSource.PROVIDER_AGGREGATED
    else:
        raise HTTPException(status_code=400, detail="payload 또는 url이 필요합니다")

    try:
        report = standardize_report(
            payload, platform,
            data_source=_data_source(request.data_source, default_source),
            config=_get_config(),
            quality=request.quality
        )
    except KOLEngineError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return report.to_dict()


@router.post("/reports/batch")
def create_reports_batch(request: BatchRequest):
    """일괄 분석 (실패 항목은 error 상태로 결과에 포함)"""
    if not request.urls and not request.items:
        raise HTTPException(status_code=400, detail="urls 또는 items가 필요합니다")

    fetcher = _get_client().fetch_by_url if request.urls else None
    sources = list(request.urls) + [
        {"payload": item.payload, "platform": item.platform, "url": item.url}
        for item in request.items
    ]

    batch = BatchAnalyzer(
        fetcher=fetcher,
        data_source=_data_source(request.data_source, DataSource.PROVIDER_AGGREGATED),
        config=_get_config(),
        max_workers=min(max(1, request.max_workers), 8)
    )
    return batch.run(sources).to_dict()


@router.post("/reports/export")
async def export_report(request: ExportRequest):
    """리포트 요약 내보내기"""
    try:
        return export_report_summary(request.report)
    except (KeyError, TypeError) as e:
        raise HTTPException(status_code=400, detail=f"리포트 형식이 올바르지 않습니다: {e}")


# ============== 매칭 API ==============

@router.post("/match")
async def match_brand(request: MatchRequest):
    """브랜드-인플루언서 매칭 점수"""
    influencer = request.report or request.influencer
    if influencer is None:
        raise HTTPException(status_code=400, detail="report 또는 influencer가 필요합니다")

    try:
        brand = BrandProfile.from_dict(request.brand)
        score = assemble_match_score(influencer, brand, _get_config())
    except KOLEngineError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except KeyError as e:
        raise HTTPException(status_code=400, detail=f"리포트 형식이 올바르지 않습니다: {e}")

    return score.to_dict()
