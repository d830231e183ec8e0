"""
Park Sync - Crowd Level Mapping
Converts a predicted average wait time into a 2/4/6/8/10 crowd level with a
human description and a visit recommendation.
"""

# Upper bound (inclusive) of average wait minutes for each crowd level
WAIT_TIME_THRESHOLDS = (
    (19, 2),
    (25, 4),
    (31, 6),
    (37, 8),
)
MAX_CROWD_LEVEL = 10

CROWD_LEVEL_DESCRIPTIONS = (
    (2, "Very Low"),
    (4, "Low"),
    (6, "Moderate"),
    (8, "High"),
)
MAX_CROWD_LEVEL_DESCRIPTION = "Very High"

CROWD_RECOMMENDATIONS = (
    (2, "Perfect day to visit! Very short wait times expected."),
    (4, "Great day to visit with manageable crowds."),
    (6, "Moderate crowds. Plan your must-do attractions early."),
    (8, "Busy day. Arrive early and consider Lightning Lanes for popular attractions."),
)
MAX_CROWD_RECOMMENDATION = "Very busy day. Early arrival and strategic planning highly recommended."


def crowd_level_for_wait_time(wait_time_minutes: int) -> int:
    """
    Map an average wait time to a crowd level.

    Examples:
        >>> crowd_level_for_wait_time(19)
        2
        >>> crowd_level_for_wait_time(20)
        4
        >>> crowd_level_for_wait_time(38)
        10
    """
    for upper_bound, level in WAIT_TIME_THRESHOLDS:
        if wait_time_minutes <= upper_bound:
            return level
    return MAX_CROWD_LEVEL


def crowd_level_description(level: int) -> str:
    """Human label for a crowd level."""
    for upper_bound, description in CROWD_LEVEL_DESCRIPTIONS:
        if level <= upper_bound:
            return description
    return MAX_CROWD_LEVEL_DESCRIPTION


def crowd_recommendation(level: int) -> str:
    """Visit recommendation for a crowd level."""
    for upper_bound, recommendation in CROWD_RECOMMENDATIONS:
        if level <= upper_bound:
            return recommendation
    return MAX_CROWD_RECOMMENDATION
