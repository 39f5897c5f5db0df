"""Pytest configuration and shared fixtures."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


FIXED_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def _posts():
    """Four posts two days apart with varied counts."""
    rows = [
        ('2024-01-01T10:00:00Z', 48000, 1900, 610000, 'Morning skincare routine #skincare #ad'),
        ('2024-01-03T10:00:00Z', 52000, 2300, 700000, 'Beauty tutorial for beginners #beauty #tutorial'),
        ('2024-01-05T10:00:00Z', 39000, 1500, 520000, 'Honest review of a new serum #skincare'),
        ('2024-01-07T10:00:00Z', 61000, 2800, 830000, 'Lifestyle vlog in Seoul #daily #vlog'),
    ]
    return [
        {'timestamp': ts, 'like_count': likes, 'comments_count': comments, 'views': views, 'caption': caption}
        for ts, likes, comments, views, caption in rows
    ]


@pytest.fixture
def youtube_payload():
    """Provider-shaped YouTube payload: 1.2M subscribers, 4.2% engagement, grade A."""
    return {
        'id': {'id': 'UC_glow', 'username': 'glowwithmina', 'display_name': 'Glow with Mina'},
        'general': {'geo': {'country': 'KR'}},
        'statistics': {
            'total': {
                'subscribers': 1_200_000,
                'views': 240_000_000,
                'uploads': 400,
                'engagement_rate': 4.2,
            },
            'growth': {
                'subs': {'1': 1000, '7': 7000, '30': 30000, '90': 80000, '365': 300000},
                'uploads': {'30': 15},
            },
        },
        'misc': {'grade': {'grade': 'A'}, 'sb_verified': True, 'made_for_kids': False},
        'audience': {
            'countries': {'KR': 55, 'US': 20, 'JP': 10},
            'age': {'18-24': 40, '25-34': 35, '35-44': 15},
            'gender': {'female': 70, 'male': 30},
        },
        'contentTopics': ['beauty tutorials', 'skincare', 'lifestyle'],
        'contentStyle': ['educational', 'friendly'],
        'recent_posts': _posts(),
    }


@pytest.fixture
def instagram_profile():
    """AI-derived flat profile payload."""
    return {
        'name': 'daily.chloe',
        'platform': 'Instagram',
        'url': 'https://www.instagram.com/daily.chloe',
        'followers': '85K',
        'engagementRate': '2.5',
        'contentTopics': 'fashion, ootd, travel',
        'contentStyle': ['casual', 'modern'],
        'audienceLocation': 'Taiwan, Hong Kong',
    }


@pytest.fixture
def brand_data():
    return {
        'id': 'brand-001',
        'name': 'Dewy Lab',
        'industry': 'beauty',
        'brandTone': {
            'personality': 'friendly',
            'communicationStyle': 'educational',
            'visualStyle': 'minimalist',
            'keywords': ['beauty', 'skincare'],
        },
        'targetAudience': {
            'ageRanges': ['18-24', '25-34'],
            'gender': 'female_dominant',
            'locations': ['KR'],
            'interests': ['skincare', 'lifestyle'],
            'incomeLevel': 'middle',
        },
        'campaignGoals': [{'type': 'awareness', 'priority': 'high'}],
        'preferredContentTypes': ['video', 'reel'],
        'targetMarkets': ['KR', 'JP'],
        'budgetRange': 'large',
    }


@pytest.fixture
def fixed_time():
    return FIXED_TIME
