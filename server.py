"""
KOL 리포트 표준화 / 브랜드 매칭 엔진 - FastAPI 서버
=================================================

파이프라인:
1. 수집: 통계 제공자 payload (또는 AI/수동 입력 데이터)
2. 정규화: 플랫폼별 필드를 하나의 레코드로 통일
3. 지표: 팔로워, 참여율, 구간별 성장, 게시 주기
4. 분석: 오디언스 / 콘텐츠 / 비즈니스 / 리스크
5. 평가: 8대 차원 점수, 가중 점수, 등급, 추천 단계
6. 매칭: 브랜드 프로필과의 5개 카테고리 적합도

실행: python server.py
API 문서: http://localhost:8000/docs
"""

import os
import sys
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# 경로 설정
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, BASE_DIR)

from config.scoring import SCHEMA_VERSION, load_scoring_config
from api.routes import router, init_routes

logging.basicConfig(level=logging.INFO)


# ============== 설정 ==============

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))


# ============== 앱 생성 ==============

app = FastAPI(
    title="KOL 리포트 표준화 엔진",
    description="멀티 플랫폼 인플루언서 데이터 표준화, 평가, 브랜드 매칭 API",
    version="1.0.0"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 스코어링 설정 및 라우터 초기화
SCORING_CONFIG = load_scoring_config()
init_routes(SCORING_CONFIG)
app.include_router(router, prefix="/api")


@app.get("/health")
async def health_check():
    """헬스 체크"""
    return {
        "status": "healthy",
        "schema_version": SCHEMA_VERSION,
        "scoring_version": SCORING_CONFIG.version
    }


# ============== 서버 실행 ==============

def main():
    """서버 실행"""
    import uvicorn

    print()
    print("=" * 50)
    print("  KOL 리포트 표준화 엔진")
    print("=" * 50)
    print(f"  서버 주소: http://localhost:{PORT}")
    print(f"  API 문서:  http://localhost:{PORT}/docs")
    print("  종료하려면 Ctrl+C를 누르세요")
    print("=" * 50)
    print()

    uvicorn.run(
        "server:app",
        host=HOST,
        port=PORT,
        reload=True,
        log_level="info"
    )


if __name__ == "__main__":
    main()
