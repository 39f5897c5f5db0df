"""Tests for the versioned scoring configuration."""

import json

import pytest

from config.scoring import (
    CONFIG_ENV_VAR,
    DEFAULT_SCORING_CONFIG,
    DIMENSION_WEIGHTS,
    MATCH_WEIGHTS,
    ScoringConfig,
    ScoringConfigError,
    load_scoring_config,
)


class TestScoringConfig:

    def test_defaults(self):
        config = ScoringConfig()
        assert config.dimension_weights == DIMENSION_WEIGHTS
        assert config.match_weights == MATCH_WEIGHTS
        assert sum(MATCH_WEIGHTS.values()) == pytest.approx(1.0)

    def test_weights_must_sum_to_one(self):
        weights = dict(DIMENSION_WEIGHTS, stability=0.15)
        with pytest.raises(ScoringConfigError, match='합계'):
            ScoringConfig(dimension_weights=weights)

    def test_keys_must_match(self):
        weights = dict(MATCH_WEIGHTS)
        weights['virality'] = weights.pop('market_reach')
        with pytest.raises(ScoringConfigError, match='키 불일치'):
            ScoringConfig(match_weights=weights)

    def test_negative_weight(self):
        weights = dict(MATCH_WEIGHTS, brand_tone_match=0.45, audience_match=0.05, market_reach=-0.05,
                       engagement_potential=0.35)
        with pytest.raises(ScoringConfigError):
            ScoringConfig(match_weights=weights)

    def test_thresholds_must_descend(self):
        with pytest.raises(ScoringConfigError):
            ScoringConfig(grade_thresholds=((50, 'C-'), (90, 'A+')))

    def test_from_dict_fills_defaults(self):
        config = ScoringConfig.from_dict({'version': '1.1-ab'})
        assert config.version == '1.1-ab'
        assert config.dimension_weights == DIMENSION_WEIGHTS

    def test_to_dict_is_loadable(self):
        data = DEFAULT_SCORING_CONFIG.to_dict()
        assert ScoringConfig.from_dict(data) == DEFAULT_SCORING_CONFIG


class TestLoadScoringConfig:

    def test_default_without_path(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert load_scoring_config() is DEFAULT_SCORING_CONFIG

    def test_from_file(self, tmp_path):
        path = tmp_path / 'weights.json'
        weights = {name: 0.2 for name in MATCH_WEIGHTS}
        path.write_text(json.dumps({'version': 'ab-2', 'match_weights': weights}), encoding='utf-8')

        config = load_scoring_config(str(path))
        assert config.version == 'ab-2'
        assert config.match_weights['market_reach'] == 0.2

    def test_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / 'weights.json'
        path.write_text(json.dumps({'version': 'env'}), encoding='utf-8')
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert load_scoring_config().version == 'env'

    def test_invalid_file(self, tmp_path):
        path = tmp_path / 'weights.json'
        path.write_text(json.dumps({'dimension_weights': {'brand_fit': 1.0}}), encoding='utf-8')

        with pytest.raises(ScoringConfigError):
            load_scoring_config(str(path))
