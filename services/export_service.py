"""
리포트 내보내기 서비스
표준 리포트를 사람이 읽을 수 있는 라벨의 평면 요약으로 변환합니다.
"""
from typing import Dict, List, Mapping, Union

from modules.report_assembler import StandardizedKOLReport


DIMENSION_LABELS = {
    'brand_fit': '브랜드 적합도',
    'content_quality': '콘텐츠 품질',
    'engagement_rate': '참여율 점수',
    'audience_profile': '오디언스 프로필',
    'professionalism': '전문성',
    'business_ability': '비즈니스 역량',
    'brand_safety': '브랜드 안전성',
    'stability': '안정성',
}

RECOMMENDATION_LABELS = {
    'strongly_recommended': '강력 추천',
    'recommended': '추천',
    'conditional': '조건부 추천',
    'not_recommended': '비추천',
}

RISK_LABELS = {'low': '낮음', 'medium': '보통', 'high': '높음'}

DATA_SOURCE_LABELS = {
    'provider_aggregated': '통계 제공자',
    'ai_derived': 'AI 분석',
    'manual': '수동 입력',
    'hybrid': '혼합',
}


def export_report_summary(report: Union[StandardizedKOLReport, Mapping]) -> Dict[str, Dict]:
    """
    리포트 -> 평면 요약

    Args:
        report: StandardizedKOLReport 또는 to_dict() 결과

    Returns:
        {'기본 정보', '평가 차원', '비즈니스 가치', '리스크 평가', '리포트 정보'}
    """
    data = report.to_dict() if isinstance(report, StandardizedKOLReport) else report

    metrics = data['metrics']
    evaluation = data['evaluation']
    business = data['business']
    risk = data['risk']
    metadata = data['metadata']

    market_value = business['market_value']
    quality = metadata['quality']

    return {
        '기본 정보': {
            '이름': data['name'],
            '플랫폼': data['platform'],
            'URL': data['url'],
            '팔로워': metrics['followers_display'],
            '참여율': f"{metrics['engagement_rate']:.2f}%",
            '종합 점수': evaluation['overall_score'],
            '가중 점수': evaluation['weighted_score'],
            '등급': evaluation['grade'],
            '추천': RECOMMENDATION_LABELS.get(evaluation['recommendation'], evaluation['recommendation']),
        },
        '평가 차원': {
            DIMENSION_LABELS.get(name, name): score
            for name, score in evaluation['dimensions'].items()
        },
        '비즈니스 가치': {
            '시장 가치': (f"CPM ${market_value['estimated_cpm']:.2f} / "
                      f"CPV ${market_value['estimated_cpv']:.4f} / "
                      f"CPE ${market_value['estimated_cpe']:.3f}"),
            '협업 제안': ', '.join(business['recommendation']['suitable_campaigns']),
            '예산 범위': business['recommendation']['budget_range'],
            'ROI 잠재력': market_value['roi_potential'],
        },
        '리스크 평가': {
            '종합 리스크': RISK_LABELS.get(risk['overall'], risk['overall']),
            '리스크 요인': list(risk['concerns']),
            '완화 방안': list(risk['mitigation']),
        },
        '리포트 정보': {
            '생성 시각': metadata['generated_at'],
            '데이터 출처': DATA_SOURCE_LABELS.get(metadata['data_source'], metadata['data_source']),
            '데이터 품질': round(sum(quality.values()) / len(quality), 1),
            '버전': metadata['version'],
        },
    }


def export_report_rows(reports: List[Union[StandardizedKOLReport, Mapping]]) -> List[Dict]:
    """여러 리포트의 기본 정보 + 평가 차원을 한 행씩 평면화 (표 내보내기용)"""
    rows = []
    for report in reports:
        summary = export_report_summary(report)
        row = dict(summary['기본 정보'])
        row.update(summary['평가 차원'])
        row['종합 리스크'] = summary['리스크 평가']['종합 리스크']
        rows.append(row)
    return rows
