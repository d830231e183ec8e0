"""
Unit Tests: Crowd Level Mapping

Tests wait-time thresholds, labels and recommendations.
"""

import pytest

from parksync.processor.crowd_levels import (
    crowd_level_description,
    crowd_level_for_wait_time,
    crowd_recommendation,
)


class TestCrowdLevelForWaitTime:
    """Threshold boundaries for crowd_level_for_wait_time()."""

    @pytest.mark.parametrize('wait,expected', [
        (0, 2), (19, 2),
        (20, 4), (25, 4),
        (26, 6), (31, 6),
        (32, 8), (37, 8),
        (38, 10), (120, 10),
    ])
    def test_boundaries(self, wait, expected):
        assert crowd_level_for_wait_time(wait) == expected

    def test_monotonic_and_in_vocabulary(self):
        levels = [crowd_level_for_wait_time(w) for w in range(0, 90)]
        assert levels == sorted(levels)
        assert set(levels) == {2, 4, 6, 8, 10}


class TestDescriptionsAndRecommendations:

    @pytest.mark.parametrize('level,label', [
        (2, "Very Low"), (4, "Low"), (6, "Moderate"), (8, "High"), (10, "Very High"),
    ])
    def test_description(self, level, label):
        assert crowd_level_description(level) == label

    def test_recommendation_per_bucket(self):
        assert crowd_recommendation(2) == "Perfect day to visit! Very short wait times expected."
        assert crowd_recommendation(4) == "Great day to visit with manageable crowds."
        assert crowd_recommendation(6) == "Moderate crowds. Plan your must-do attractions early."
        assert crowd_recommendation(8) == (
            "Busy day. Arrive early and consider Lightning Lanes for popular attractions."
        )
        assert crowd_recommendation(10) == (
            "Very busy day. Early arrival and strategic planning highly recommended."
        )

    def test_odd_levels_fall_into_next_bucket(self):
        assert crowd_level_description(3) == "Low"
        assert crowd_level_description(9) == "Very High"
