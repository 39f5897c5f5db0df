"""Tests for the statistics provider client with a stubbed HTTP session."""

import pytest
import requests

from modules.errors import UnsupportedPlatformError
from modules.platforms import Platform
from services import social_blade_client
from services.social_blade_client import (
    SocialBladeAPIError,
    SocialBladeClient,
    SocialBladeConfigError,
    username_variations,
)


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError('no json')
        return self._body


class FakeSession:
    """Returns queued responses and records each request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({'url': url, 'params': params, 'headers': headers, 'timeout': timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def ok(data):
    return FakeResponse(200, {'status': {'success': True, 'status': 200}, 'data': data})


def not_found():
    return FakeResponse(200, {'status': {'success': False, 'status': 404, 'error': 'User not found'}})


def _client(*responses):
    return SocialBladeClient(client_id='cid', token='tok', base_url='https://api.test/b/',
                             session=FakeSession(*responses))


class TestClientSetup:

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.setattr(social_blade_client, 'SOCIAL_BLADE_CLIENT_ID', None)
        monkeypatch.setattr(social_blade_client, 'SOCIAL_BLADE_TOKEN', None)

        with pytest.raises(SocialBladeConfigError):
            SocialBladeClient()

    def test_default_session_mounts_retries(self):
        client = SocialBladeClient(client_id='cid', token='tok')
        adapter = client.session.get_adapter('https://matrix.sbapis.com')
        assert adapter.max_retries.total == 3

    def test_username_variations(self):
        assert username_variations('@MrBeast') == ['@MrBeast', 'MrBeast', 'mrbeast']
        assert username_variations('plain') == ['plain']


class TestGetStatistics:

    def test_request_shape(self):
        client = _client(ok({'id': {'id': 'UC1'}}))
        data = client.get_statistics('YouTube', 'mrbeast')

        call = client.session.calls[0]
        assert data == {'id': {'id': 'UC1'}}
        assert call['url'] == 'https://api.test/b/youtube/statistics'
        assert call['params']['query'] == 'mrbeast'
        assert call['headers'] == {'clientid': 'cid', 'token': 'tok'}
        assert call['timeout'] == 30

    def test_http_error(self):
        client = _client(FakeResponse(500))
        with pytest.raises(SocialBladeAPIError) as exc:
            client.get_statistics(Platform.TIKTOK, 'dancer')
        assert exc.value.status_code == 500

    def test_unsuccessful_status(self):
        client = _client(not_found())
        with pytest.raises(SocialBladeAPIError) as exc:
            client.get_statistics(Platform.INSTAGRAM, 'ghost')
        assert exc.value.status_code == 404
        assert 'User not found' in str(exc.value)

    def test_invalid_json(self):
        client = _client(FakeResponse(200, None))
        with pytest.raises(SocialBladeAPIError):
            client.get_statistics(Platform.TWITTER, 'someone')

    def test_network_error(self):
        client = _client(requests.exceptions.ConnectionError('refused'))
        with pytest.raises(SocialBladeAPIError, match='네트워크 오류'):
            client.get_statistics(Platform.FACEBOOK, 'page')


class TestFetchByUrl:

    def test_returns_payload_and_platform(self):
        client = _client(ok({'id': {'id': 'UC1', 'username': 'glowwithmina'}}))
        payload, platform = client.fetch_by_url('https://www.youtube.com/@glowwithmina')

        assert platform is Platform.YOUTUBE
        assert payload['url'] == 'https://www.youtube.com/@glowwithmina'

    def test_tries_username_variations(self):
        client = _client(not_found(), ok({'id': {'id': 'UC1'}}))
        payload, _ = client.fetch_by_url('https://www.youtube.com/@MrBeast')

        queries = [call['params']['query'] for call in client.session.calls]
        assert queries == ['MrBeast', 'mrbeast']
        assert payload['id']['id'] == 'UC1'

    def test_all_variations_fail(self):
        client = _client(not_found(), not_found())
        with pytest.raises(SocialBladeAPIError) as exc:
            client.fetch_by_url('https://www.tiktok.com/@Dancer')
        assert exc.value.status_code == 404

    def test_server_error_is_not_retried_with_variations(self):
        client = _client(FakeResponse(503), ok({}))
        with pytest.raises(SocialBladeAPIError):
            client.fetch_by_url('https://www.youtube.com/@MrBeast')
        assert len(client.session.calls) == 1

    def test_unsupported_url(self):
        client = _client()
        with pytest.raises(UnsupportedPlatformError):
            client.fetch_by_url('https://example.com/someone')
