"""Tests for brand profiles and brand-influencer matching."""

import copy

import pytest

from config.scoring import MATCH_WEIGHTS
from modules.errors import MalformedInputError
from modules.platforms import Platform
from modules.brand_profile import (
    AgeRange,
    BrandPersonality,
    BrandProfile,
    BudgetRange,
    CommunicationStyle,
    GenderDistribution,
    GoalType,
)
from modules.matcher import (
    MatchCandidate,
    calculate_brand_match,
    calculate_keyword_overlap,
    calculate_location_match,
    calculate_personality_match,
    follower_ladder,
    identify_risk_factors,
)
from modules.report_assembler import assemble_match_score, rank_matches, standardize_report


def _numbers(data):
    if isinstance(data, dict):
        for value in data.values():
            yield from _numbers(value)
    elif isinstance(data, (int, float)) and not isinstance(data, bool):
        yield data


@pytest.fixture
def brand(brand_data):
    return BrandProfile.from_dict(brand_data)


@pytest.fixture
def youtube_report(youtube_payload, fixed_time):
    return standardize_report(youtube_payload, 'YouTube', generated_at=fixed_time)


class TestBrandProfile:

    def test_camel_case(self, brand):
        assert brand.id == 'brand-001'
        assert brand.brand_tone.personality is BrandPersonality.FRIENDLY
        assert brand.brand_tone.communication_style is CommunicationStyle.EDUCATIONAL
        assert brand.brand_tone.keywords == ('beauty', 'skincare')
        assert brand.target_audience.age_ranges == (AgeRange.YOUNG_ADULTS, AgeRange.ADULTS)
        assert brand.target_audience.gender is GenderDistribution.FEMALE_DOMINANT
        assert brand.campaign_goals[0].type is GoalType.AWARENESS
        assert brand.budget_range is BudgetRange.LARGE

    def test_home_market_defaults_to_first_target(self, brand):
        assert brand.target_markets == ('KR', 'JP')
        assert brand.home_market == 'KR'

    def test_snake_case_and_defaults(self):
        brand = BrandProfile.from_dict({
            'id': 7,
            'brand_tone': {'personality': 'Luxury'},
            'campaign_goals': ['sales'],
            'target_markets': 'TW, HK',
        })
        assert brand.id == '7'
        assert brand.brand_tone.personality is BrandPersonality.LUXURIOUS
        assert brand.brand_tone.communication_style is CommunicationStyle.CONVERSATIONAL
        assert brand.campaign_goals[0].type is GoalType.SALES
        assert brand.home_market == 'TW'

    def test_to_dict_round_trip(self, brand):
        assert BrandProfile.from_dict(brand.to_dict()) == brand

    def test_missing_id(self, brand_data):
        del brand_data['id']
        with pytest.raises(MalformedInputError) as exc:
            BrandProfile.from_dict(brand_data)
        assert exc.value.field == 'brand.id'

    def test_invalid_enum(self, brand_data):
        brand_data['brandTone']['personality'] = 'grumpy'
        with pytest.raises(MalformedInputError) as exc:
            BrandProfile.from_dict(brand_data)
        assert exc.value.field == 'personality'

    def test_goal_without_type(self, brand_data):
        brand_data['campaignGoals'] = [{'priority': 'high'}]
        with pytest.raises(MalformedInputError):
            BrandProfile.from_dict(brand_data)

    def test_not_a_mapping(self):
        with pytest.raises(MalformedInputError):
            BrandProfile.from_dict('brand-001')


class TestSubScores:

    def test_keyword_overlap_partial(self, brand):
        candidate = MatchCandidate(
            id='c1', platform=Platform.YOUTUBE, content_topics=('beauty tutorials', 'lifestyle')
        )
        assert calculate_keyword_overlap(candidate, brand) == 0.5

    def test_keyword_overlap_without_keywords(self):
        brand = BrandProfile.from_dict({'id': 'b'})
        candidate = MatchCandidate(id='c1', platform=Platform.YOUTUBE, content_topics=('beauty',))
        assert calculate_keyword_overlap(candidate, brand) == 0.5

    def test_location_neutral_without_targets(self):
        brand = BrandProfile.from_dict({'id': 'b'})
        candidate = MatchCandidate(id='c1', platform=Platform.TIKTOK, audience_location='Taiwan')
        assert calculate_location_match(candidate, brand) == 0.5

    def test_location_hit_and_miss(self, brand):
        hit = MatchCandidate(id='c1', platform=Platform.TIKTOK, audience_location='KR, US')
        miss = MatchCandidate(id='c2', platform=Platform.TIKTOK, audience_location='Brazil')
        assert calculate_location_match(hit, brand) == 0.9
        assert calculate_location_match(miss, brand) == 0.3

    def test_location_miss_for_bare_report(self, fixed_time):
        report = standardize_report({'id': 'bare'}, 'Instagram', generated_at=fixed_time)
        candidate = MatchCandidate.from_report(report.to_dict())
        norway = BrandProfile.from_dict({'id': 'b', 'targetAudience': {'locations': ['NO']}})

        assert candidate.audience_location == ''
        assert calculate_location_match(candidate, norway) == 0.3

    def test_sophisticated_personality(self):
        brand = BrandProfile.from_dict({'id': 'b', 'brandTone': {'personality': 'sophisticated'}})
        professional = MatchCandidate(id='c1', platform=Platform.YOUTUBE, content_styles=('professional',))
        playful = MatchCandidate(id='c2', platform=Platform.YOUTUBE, content_styles=('playful',))

        assert brand.brand_tone.personality is BrandPersonality.SOPHISTICATED
        assert calculate_personality_match(professional, brand) == 0.8
        assert calculate_personality_match(playful, brand) == 0.3

    @pytest.mark.parametrize('followers,expected', [
        (1_200_000, 0.9), (1_000_000, 0.8), (600_000, 0.8), (200_000, 0.7), (60_000, 0.6), (50_000, 0.4),
    ])
    def test_follower_ladder(self, followers, expected):
        assert follower_ladder(followers) == expected

    def test_unobserved_counts_are_not_risks(self, brand):
        unknown = MatchCandidate(id='c1', platform=Platform.INSTAGRAM)
        small = MatchCandidate(id='c2', platform=Platform.INSTAGRAM, followers=5_000, engagement_rate=0.5)

        assert identify_risk_factors(unknown, brand) == []
        assert len(identify_risk_factors(small, brand)) == 2


class TestBrandMatch:

    def test_youtube_engagement_category(self, youtube_report, brand):
        result = assemble_match_score(youtube_report, brand)
        engagement = result.detailed_analysis['engagement_analysis']

        assert engagement['reach_potential'] == 0.9
        assert engagement['engagement_rate'] == 0.8
        assert result.influencer_id == 'UC_glow'
        assert result.brand_id == 'brand-001'

    def test_scores_on_unit_scale(self, youtube_report, brand, instagram_profile):
        for influencer in (youtube_report, instagram_profile):
            result = assemble_match_score(influencer, brand).to_dict()

            assert 0 <= result['overall_score'] <= 1
            assert set(result['category_scores']) == set(MATCH_WEIGHTS)
            assert all(0 <= value <= 1 for value in _numbers(result['category_scores']))
            assert all(0 <= value <= 1 for value in _numbers(result['detailed_analysis']))

    def test_overall_is_weighted_average(self, youtube_report, brand):
        result = assemble_match_score(youtube_report, brand)
        expected = sum(result.category_scores[name] * w for name, w in MATCH_WEIGHTS.items())
        assert result.overall_score == pytest.approx(expected, abs=0.01)

    def test_recommendations(self, youtube_report, brand):
        result = assemble_match_score(youtube_report, brand)

        assert len(result.recommendations) == 3
        assert any('KR' in text for text in result.recommendations)
        assert result.risk_factors == []

    def test_report_is_not_modified(self, youtube_report, brand):
        before = copy.deepcopy(youtube_report.to_dict())
        assemble_match_score(youtube_report.to_dict(), brand)
        assert youtube_report.to_dict() == before

    def test_candidate_from_report(self, youtube_report):
        candidate = MatchCandidate.from_report(youtube_report.to_dict())

        assert candidate.platform is Platform.YOUTUBE
        assert candidate.audience_location == 'KR, US, JP'
        assert candidate.primary_location == 'KR'
        assert candidate.age_distribution['18-24'] == 40.0
        assert candidate.monthly_growth == 30000
        assert candidate.brand_safety == 90.0

    def test_candidate_from_profile(self, instagram_profile):
        candidate = MatchCandidate.from_profile(instagram_profile)

        assert candidate.id == 'https://www.instagram.com/daily.chloe'
        assert candidate.platform is Platform.INSTAGRAM
        assert candidate.followers == 85_000
        assert candidate.engagement_rate == 2.5
        assert candidate.primary_location == 'Taiwan'
        assert candidate.consistency is None

    def test_custom_match_weights(self, youtube_report, brand):
        from config.scoring import ScoringConfig

        weights = {name: 0.0 for name in MATCH_WEIGHTS}
        weights['engagement_potential'] = 1.0
        config = ScoringConfig(version='engagement-only', match_weights=weights)

        result = calculate_brand_match(MatchCandidate.from_report(youtube_report.to_dict()), brand, config)
        assert result['overall_score'] == result['category_scores']['engagement_potential']

    def test_rank_matches(self, youtube_report, instagram_profile, brand):
        ranked = rank_matches([instagram_profile, youtube_report], brand)

        assert [m.influencer_id for m in ranked] == ['UC_glow', 'https://www.instagram.com/daily.chloe']
        assert len(rank_matches([instagram_profile, youtube_report], brand, top_k=1)) == 1
        assert rank_matches([instagram_profile, youtube_report], brand, top_k=0) == []
