"""Tests for the HTTP API."""

import inspect

import pytest
from fastapi.testclient import TestClient

from api import routes
from services import social_blade_client
from services.social_blade_client import SocialBladeAPIError
from server import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def no_provider(monkeypatch):
    monkeypatch.setattr(routes, '_client', None)
    monkeypatch.setattr(social_blade_client, 'SOCIAL_BLADE_CLIENT_ID', None)
    monkeypatch.setattr(social_blade_client, 'SOCIAL_BLADE_TOKEN', None)


class FailingProvider:
    def fetch_by_url(self, url):
        raise SocialBladeAPIError('Social Blade API 오류: HTTP 500', status_code=500)


class TestMeta:

    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    def test_platforms(self, client):
        platforms = client.get('/api/platforms').json()['platforms']
        names = [p['name'] for p in platforms]

        assert names == ['YouTube', 'Instagram', 'Facebook', 'TikTok', 'Twitter']
        assert platforms[0]['follower_field'] == 'subscribers'

    def test_scoring_config(self, client):
        data = client.get('/api/scoring-config').json()
        assert data['dimension_weights']['content_quality'] == 0.2
        assert len(data['grade_thresholds']) == 10


class TestReports:

    def test_create_from_payload(self, client, youtube_payload):
        response = client.post('/api/reports', json={'payload': youtube_payload, 'platform': 'YouTube'})
        data = response.json()

        assert response.status_code == 200
        assert data['id'] == 'UC_glow'
        assert data['evaluation']['dimensions']['brand_safety'] == 90.0
        assert data['metadata']['data_source'] == 'manual'

    def test_data_source_override(self, client, youtube_payload):
        response = client.post('/api/reports', json={
            'payload': youtube_payload, 'platform': 'YouTube',
            'data_source': 'ai_derived', 'quality': {'freshness': 60}
        })
        metadata = response.json()['metadata']

        assert metadata['data_source'] == 'ai_derived'
        assert metadata['quality']['freshness'] == 60.0

    def test_unknown_platform(self, client, youtube_payload):
        response = client.post('/api/reports', json={'payload': youtube_payload, 'platform': 'Vine'})
        assert response.status_code == 400

    def test_invalid_data_source(self, client, youtube_payload):
        response = client.post('/api/reports', json={
            'payload': youtube_payload, 'platform': 'YouTube', 'data_source': 'rumor'
        })
        assert response.status_code == 400

    def test_empty_request(self, client):
        assert client.post('/api/reports', json={}).status_code == 400

    def test_url_without_credentials(self, client, no_provider):
        response = client.post('/api/reports', json={'url': 'https://www.youtube.com/@glowwithmina'})
        assert response.status_code == 503

    def test_provider_failure(self, client, monkeypatch):
        monkeypatch.setattr(routes, '_client', FailingProvider())
        response = client.post('/api/reports', json={'url': 'https://www.youtube.com/@glowwithmina'})
        assert response.status_code == 502

    def test_batch(self, client, youtube_payload):
        response = client.post('/api/reports/batch', json={
            'items': [
                {'payload': youtube_payload, 'platform': 'YouTube'},
                {'payload': youtube_payload, 'platform': 'Vine'},
            ]
        })
        data = response.json()

        assert response.status_code == 200
        assert data['summary'] == {'total': 2, 'success': 1, 'failed': 1}
        assert data['items'][1]['error_kind'] == 'UnsupportedPlatformError'

    def test_batch_requires_input(self, client):
        assert client.post('/api/reports/batch', json={}).status_code == 400

    def test_provider_handlers_run_in_threadpool(self):
        assert not inspect.iscoroutinefunction(routes.create_report)
        assert not inspect.iscoroutinefunction(routes.create_reports_batch)

    def test_export(self, client, youtube_payload):
        report = client.post('/api/reports', json={'payload': youtube_payload, 'platform': 'YouTube'}).json()
        response = client.post('/api/reports/export', json={'report': report})

        assert response.status_code == 200
        assert response.json()['기본 정보']['팔로워'] == '1.2M'

    def test_export_rejects_partial_report(self, client):
        response = client.post('/api/reports/export', json={'report': {'id': 'x'}})
        assert response.status_code == 400


class TestMatch:

    def test_match_report(self, client, youtube_payload, brand_data):
        report = client.post('/api/reports', json={'payload': youtube_payload, 'platform': 'YouTube'}).json()
        response = client.post('/api/match', json={'brand': brand_data, 'report': report})
        data = response.json()

        assert response.status_code == 200
        assert data['influencer_id'] == 'UC_glow'
        assert data['brand_id'] == 'brand-001'
        assert 0 <= data['overall_score'] <= 1

    def test_match_profile(self, client, instagram_profile, brand_data):
        response = client.post('/api/match', json={'brand': brand_data, 'influencer': instagram_profile})
        assert response.status_code == 200
        assert response.json()['category_scores']['market_reach'] > 0

    def test_invalid_brand(self, client, instagram_profile, brand_data):
        brand_data['brandTone']['personality'] = 'grumpy'
        response = client.post('/api/match', json={'brand': brand_data, 'influencer': instagram_profile})
        assert response.status_code == 400

    def test_missing_influencer(self, client, brand_data):
        assert client.post('/api/match', json={'brand': brand_data}).status_code == 400
