"""Tests for the batch orchestrator."""

import pytest

from modules.errors import UnsupportedPlatformError
from modules.platforms import Platform
from pipeline.batch import BatchAnalyzer, BatchItem, BatchResult, ItemStatus
from services.social_blade_client import SocialBladeAPIError


URLS = [
    'https://www.youtube.com/@glowwithmina',
    'https://www.youtube.com/@broken',
    'https://www.instagram.com/daily.chloe',
]


@pytest.fixture
def fetcher(youtube_payload, instagram_profile):
    responses = {
        URLS[0]: (youtube_payload, Platform.YOUTUBE),
        URLS[1]: ('<html>not json</html>', Platform.YOUTUBE),
        URLS[2]: (instagram_profile, Platform.INSTAGRAM),
    }

    def fetch(url):
        return responses[url]
    return fetch


class TestBatchAnalyzer:

    def test_failure_does_not_block_others(self, fetcher):
        result = BatchAnalyzer(fetcher=fetcher).run(URLS)

        assert result.summary() == {'total': 3, 'success': 2, 'failed': 1}
        assert [item.status for item in result.items] == [
            ItemStatus.COMPLETED, ItemStatus.ERROR, ItemStatus.COMPLETED
        ]
        assert result.items[1].error_kind == 'MalformedInputError'
        assert result.items[1].report is None
        assert [r.platform for r in result.reports] == ['YouTube', 'Instagram']

    def test_progress_callback(self, fetcher):
        calls = []
        batch = BatchAnalyzer(
            fetcher=fetcher,
            progress_callback=lambda done, total, item: calls.append((done, total, item.status))
        )
        batch.run(URLS)

        assert calls == [
            (1, 3, ItemStatus.COMPLETED),
            (2, 3, ItemStatus.ERROR),
            (3, 3, ItemStatus.COMPLETED),
        ]

    def test_parallel_preserves_order(self, fetcher):
        result = BatchAnalyzer(fetcher=fetcher, max_workers=3).run(URLS)

        assert [item.index for item in result.items] == [0, 1, 2]
        assert [item.source for item in result.items] == URLS
        assert result.summary()['success'] == 2

    def test_provider_error_is_isolated(self, youtube_payload):
        def fetch(url):
            if 'instagram' in url:
                raise SocialBladeAPIError('API 오류: not found', status_code=404)
            return youtube_payload, Platform.YOUTUBE

        result = BatchAnalyzer(fetcher=fetch).run(URLS[::2])

        assert result.summary() == {'total': 2, 'success': 1, 'failed': 1}
        assert result.items[1].error_kind == 'SocialBladeAPIError'
        assert 'not found' in result.items[1].error

    def test_payload_items_without_fetcher(self, youtube_payload):
        sources = [
            {'payload': youtube_payload, 'platform': 'YouTube'},
            {'payload': youtube_payload, 'platform': 'Vine', 'url': 'https://vine.co/x'},
            'https://www.youtube.com/@needs-fetcher',
        ]
        result = BatchAnalyzer(data_source='manual').run(sources)

        assert [item.status for item in result.items] == [
            ItemStatus.COMPLETED, ItemStatus.ERROR, ItemStatus.ERROR
        ]
        assert result.items[1].error_kind == UnsupportedPlatformError.__name__
        assert result.items[2].error_kind == 'ValueError'
        assert result.items[0].report.metadata['data_source'] == 'manual'

    def test_url_is_stamped_on_report(self, youtube_payload):
        result = BatchAnalyzer().run([
            {'payload': dict(youtube_payload), 'platform': 'YouTube', 'url': 'https://youtu.be/custom'}
        ])
        assert result.reports[0].url == 'https://youtu.be/custom'

    def test_empty_batch(self):
        result = BatchAnalyzer().run([])
        assert result.summary() == {'total': 0, 'success': 0, 'failed': 0}


class TestBatchSerialization:

    def test_item_labels(self):
        assert BatchItem(index=0, source='https://a').label == 'https://a'
        assert BatchItem(index=4, source={'payload': {}}).label == '#5'

    def test_result_to_dict(self, fetcher):
        data = BatchAnalyzer(fetcher=fetcher).run(URLS).to_dict()

        assert data['summary']['failed'] == 1
        assert data['items'][1]['status'] == 'error'
        assert data['items'][1]['report'] is None
        assert data['items'][0]['report']['id'] == 'UC_glow'

    def test_empty_result(self):
        assert BatchResult().reports == []
