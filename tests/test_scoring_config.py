"""
Tests de la configuration de scoring et de sa validation optionnelle.
"""

import logging
from dataclasses import FrozenInstanceError

import pytest

from clearseller.scoring.product_scorer import ProductScoringEngine
from clearseller.scoring.scoring_config import (
    DEFAULT_CONFIG,
    PotentialBands,
    ScoreWeights,
    ScoringConfig,
    ScoringConfigError,
    SubScoreLadders,
)
from clearseller.signals.signal_models import ProductSignal


class TestDefaults:

    def test_default_weights_sum_to_one(self):
        assert DEFAULT_CONFIG.weights.total == pytest.approx(1.0)

    def test_default_thresholds(self):
        assert DEFAULT_CONFIG.winner_threshold == 70
        assert DEFAULT_CONFIG.potential_bands == PotentialBands(high=75, medium=50)
        assert DEFAULT_CONFIG.minimum_criteria.min_reviews == 500
        assert DEFAULT_CONFIG.minimum_criteria.min_rating == 4.3
        assert DEFAULT_CONFIG.minimum_criteria.max_price == 50.0

    def test_defaults_are_valid(self):
        assert DEFAULT_CONFIG.validate() is True

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_CONFIG.weights.reviews = 0.5


class TestWithOverrides:

    def test_returns_new_instance(self):
        custom = DEFAULT_CONFIG.with_overrides(winner_threshold=60)

        assert custom.winner_threshold == 60
        assert DEFAULT_CONFIG.winner_threshold == 70
        assert custom.weights == DEFAULT_CONFIG.weights

    def test_unknown_field_raises(self):
        with pytest.raises(TypeError):
            DEFAULT_CONFIG.with_overrides(not_a_field=1)


class TestValidate:

    def test_negative_weight(self):
        config = ScoringConfig(weights=ScoreWeights(reviews=-0.1))
        with pytest.raises(ScoringConfigError, match="weights.reviews"):
            config.validate()

    def test_non_numeric_weight(self):
        config = ScoringConfig(weights=ScoreWeights(rating="0.2"))
        with pytest.raises(ScoringConfigError):
            config.validate()

    def test_nan_threshold(self):
        config = ScoringConfig(winner_threshold=float("nan"))
        with pytest.raises(ScoringConfigError):
            config.validate()

    def test_inverted_bands(self):
        config = ScoringConfig(potential_bands=PotentialBands(high=40, medium=60))
        with pytest.raises(ScoringConfigError, match="potential_bands"):
            config.validate()

    def test_negative_markup(self):
        config = ScoringConfig(platform_markup_multipliers={"aliexpress": -1.0})
        with pytest.raises(ScoringConfigError, match="aliexpress"):
            config.validate()

    def test_unordered_ascending_ladder(self):
        ladders = SubScoreLadders(review_thresholds=((500, 30), (100, 10)))
        with pytest.raises(ScoringConfigError, match="review_thresholds"):
            ScoringConfig(ladders=ladders).validate()

    def test_profit_ladder_must_be_descending(self):
        ladders = SubScoreLadders(profit_thresholds=((10, 80), (50, 20)))
        with pytest.raises(ScoringConfigError, match="profit_thresholds"):
            ScoringConfig(ladders=ladders).validate()

    def test_weight_sum_only_warns(self, caplog):
        config = ScoringConfig(weights=ScoreWeights(reviews=1, rating=1, orders=1, profit=1))

        with caplog.at_level(logging.WARNING, logger="clearseller.scoring.scoring_config"):
            assert config.validate() is True

        assert "Somme des poids" in caplog.text

    def test_weight_sum_within_tolerance(self, caplog):
        config = ScoringConfig(weights=ScoreWeights(reviews=0.305))

        with caplog.at_level(logging.WARNING, logger="clearseller.scoring.scoring_config"):
            config.validate()

        assert "Somme des poids" not in caplog.text


class TestEngineDoesNotValidate:
    """Le scorer accepte n'importe quelle configuration, sans la corriger."""

    def test_invalid_config_still_scores(self):
        config = ScoringConfig(weights=ScoreWeights(reviews=-1, rating=0, orders=0, profit=0))
        analysis = ProductScoringEngine(config).analyze(ProductSignal(review_count=20_000))

        assert analysis.total_score == -100
        assert analysis.is_winner is False
