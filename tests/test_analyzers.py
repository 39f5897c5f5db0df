"""Tests for the audience, content, business and risk analyzers."""

import pytest

from modules.normalizer import normalize_record
from modules.metrics import extract_metrics
from modules.analyzers import ANALYZER_ORDER, AnalyzerSet, DEFAULT_ANALYZERS
from modules.audience_analyzer import analyze_audience
from modules.content_analyzer import (
    analyze_content,
    calculate_brand_safety,
    describe_frequency,
    grade_safety_score,
)
from modules.business_analyzer import analyze_business, budget_range
from modules.risk_analyzer import analyze_risk, classify_risk


def _prepare(payload, platform):
    record = normalize_record(payload, platform)
    return record, extract_metrics(record)


def _walk_numbers(data, path=''):
    if isinstance(data, dict):
        for key, value in data.items():
            yield from _walk_numbers(value, f'{path}.{key}')
    elif isinstance(data, (int, float)) and not isinstance(data, bool):
        yield path, data


@pytest.fixture
def youtube_analyses(youtube_payload):
    record, metrics = _prepare(youtube_payload, 'YouTube')
    return record, metrics, DEFAULT_ANALYZERS.run(record, metrics)


@pytest.fixture
def bare_analyses():
    record, metrics = _prepare({'id': 'bare-account'}, 'Instagram')
    return record, metrics, DEFAULT_ANALYZERS.run(record, metrics)


class TestAudienceAnalyzer:

    def test_geography(self, youtube_analyses):
        _, _, analyses = youtube_analyses
        geography = analyses['audience']['geography']

        assert geography['primary'] == 'KR'
        assert geography['asian_markets'] == {'KR': 55.0, 'JP': 10.0}
        assert geography['global_reach'] == {'KR': 55.0, 'US': 20.0, 'JP': 10.0}
        assert geography['unknown'] == 15.0

    def test_percentage_groups_at_most_100(self, youtube_analyses):
        _, _, analyses = youtube_analyses
        audience = analyses['audience']

        assert sum(audience['demographics'].values()) <= 100
        assert sum(audience['gender'].values()) <= 100
        assert sum(audience['geography']['global_reach'].values()) <= 100
        assert audience['demographics']['age_18_24'] == 40.0
        assert audience['gender']['female'] == 70.0

    def test_quality_and_purchasing_power(self, youtube_analyses):
        _, _, analyses = youtube_analyses
        audience = analyses['audience']

        assert audience['quality_score'] == 80.0
        assert audience['purchasing_power'] == 'high'
        assert audience['confidence'] == 100.0

    def test_missing_data_is_neutral(self, bare_analyses):
        _, _, analyses = bare_analyses
        audience = analyses['audience']

        assert audience['geography']['primary'] == 'unknown'
        assert audience['geography']['unknown'] == 100.0
        assert audience['quality_score'] == 50.0
        assert audience['purchasing_power'] == 'medium'
        assert audience['interests'] == []
        assert audience['confidence'] == 25.0


class TestContentAnalyzer:

    def test_shape(self, youtube_analyses):
        _, _, analyses = youtube_analyses
        content = analyses['content']

        assert content['styles'] == ['educational', 'friendly']
        assert content['categories'][0] == 'beauty'
        assert set(content['quality']) == {'creativity', 'production', 'storytelling', 'authenticity'}
        assert content['recent']['main_topics'] == ['beauty tutorials', 'skincare', 'lifestyle']
        assert content['recent']['trending_hashtags'][0] == '#skincare'
        assert content['recent']['average_engagement'] == 4.2
        assert content['recent']['content_frequency'] == '주 3.5회'

    def test_grade_drives_safety(self, youtube_analyses):
        _, _, analyses = youtube_analyses
        safety = analyses['content']['brand_safety']

        assert safety['safety_score'] == 90.0
        assert safety['risk_level'] == 'low'
        assert safety['concerns'] == []

    def test_risk_keywords_without_grade(self):
        record = normalize_record({'id': 'a', 'bio': 'casino nights'}, 'Twitter')
        safety = calculate_brand_safety(record, ['gambling'])

        assert safety['safety_score'] == 65.0
        assert safety['risk_level'] == 'medium'
        assert safety['concerns'] == ['도박 관련 콘텐츠']

    def test_kids_content_flagged(self):
        record = normalize_record({'id': 'a', 'made_for_kids': True}, 'YouTube')
        safety = calculate_brand_safety(record, [])
        assert any('아동' in concern for concern in safety['concerns'])

    @pytest.mark.parametrize('grade,expected', [
        ('A+', 90.0), ('A', 90.0), ('B-', 75.0), ('C', 60.0), ('D', 40.0), ('', 40.0),
    ])
    def test_grade_safety_ladder(self, grade, expected):
        assert grade_safety_score(grade) == expected

    def test_describe_frequency(self):
        assert describe_frequency(0) == '알 수 없음'
        assert describe_frequency(14) == '하루 2.0회'

    def test_missing_data_is_neutral(self, bare_analyses):
        _, _, analyses = bare_analyses
        content = analyses['content']

        assert content['quality']['creativity'] == 50.0
        assert content['quality']['storytelling'] == 50.0
        assert content['quality']['authenticity'] == 50.0
        assert content['recent']['main_topics'] == []
        assert content['confidence'] == 25.0


class TestBusinessAnalyzer:

    @pytest.mark.parametrize('followers,tier', [
        (5_000, 'micro'),
        (10_000, 'small'),
        (200_000, 'medium'),
        (600_000, 'large'),
        (1_200_000, 'premium'),
    ])
    def test_budget_range(self, followers, tier):
        assert budget_range(followers)['tier'] == tier

    def test_recommendation(self, youtube_analyses):
        _, _, analyses = youtube_analyses
        business = analyses['business']

        assert business['recommendation']['budget_range'] == '$50,000+'
        assert '브랜드 인지도 캠페인' in business['recommendation']['suitable_campaigns']
        assert '제품 리뷰/언박싱' in business['recommendation']['suitable_campaigns']
        assert business['conversion']['traffic_driving'] == 90.0
        assert business['market_value']['estimated_cpm'] > 0
        assert business['market_value']['estimated_cpe'] > 0

    def test_reads_prior_results(self, youtube_payload):
        record, metrics = _prepare(youtube_payload, 'YouTube')
        prior = DEFAULT_ANALYZERS.run(record, metrics)
        low_power = dict(prior['audience'], purchasing_power='low')

        high = analyze_business(record, metrics, prior)
        low = analyze_business(record, metrics, dict(prior, audience=low_power))
        assert low['market_value']['estimated_cpm'] < high['market_value']['estimated_cpm']

    def test_standalone_call_computes_prior(self, youtube_analyses):
        record, metrics, analyses = youtube_analyses
        assert analyze_business(record, metrics) == analyses['business']


class TestRiskAnalyzer:

    @pytest.mark.parametrize('peak,tier', [(60, 'high'), (59.9, 'medium'), (35, 'medium'), (10, 'low')])
    def test_classify_by_max_factor(self, peak, tier):
        assert classify_risk({'content_risk': 0.0, 'legal_risk': peak}) == tier

    def test_factors(self, youtube_analyses):
        _, _, analyses = youtube_analyses
        risk = analyses['risk']

        assert set(risk['factors']) == {'content_risk', 'reputation_risk', 'legal_risk', 'brand_fit_risk'}
        assert risk['factors']['content_risk'] == 10.0
        assert risk['factors']['legal_risk'] == 10.0
        assert risk['overall'] == classify_risk(risk['factors'])
        assert risk['mitigation'][0] == '명확한 협업 계약 조건 수립'

    def test_gambling_raises_legal_risk(self):
        record, metrics = _prepare({'id': 'a', 'bio': 'daily casino and poker streams'}, 'Twitter')
        risk = DEFAULT_ANALYZERS.run(record, metrics)['risk']

        assert risk['factors']['legal_risk'] == 40.0
        assert risk['overall'] in ('medium', 'high')
        assert '도박 관련 콘텐츠' in risk['concerns']

    def test_standalone_call_computes_prior(self, youtube_analyses):
        record, metrics, analyses = youtube_analyses
        assert analyze_risk(record, metrics) == analyses['risk']


class TestAnalyzerSet:

    def test_all_scores_within_range(self, youtube_analyses, bare_analyses):
        for _, _, analyses in (youtube_analyses, bare_analyses):
            for path, value in _walk_numbers(analyses):
                if 'market_value' in path:
                    continue
                assert 0 <= value <= 100, path

    def test_runs_in_order(self, youtube_payload):
        record, metrics = _prepare(youtube_payload, 'YouTube')
        seen = []

        def recorder(name):
            def analyzer(record, metrics, prior=None):
                seen.append((name, sorted(prior)))
                return {'confidence': 50.0}
            return analyzer

        analyzers = AnalyzerSet(**{name: recorder(name) for name in ANALYZER_ORDER})
        analyzers.run(record, metrics)

        assert seen == [
            ('audience', []),
            ('content', ['audience']),
            ('business', ['audience', 'content']),
            ('risk', ['audience', 'business', 'content']),
        ]

    def test_with_overrides(self, youtube_payload):
        record, metrics = _prepare(youtube_payload, 'YouTube')

        def flat_audience(record, metrics, prior=None):
            result = analyze_audience(record, metrics, prior)
            result['quality_score'] = 10.0
            return result

        analyzers = DEFAULT_ANALYZERS.with_overrides(audience=flat_audience)
        assert analyzers.run(record, metrics)['audience']['quality_score'] == 10.0
        assert analyzers.content is analyze_content
        assert DEFAULT_ANALYZERS.audience is analyze_audience
