"""Tests for worker career progression."""

import pytest

from karirkita.core.career import level_for, record_completed_job
from karirkita.core.models import UserProfile, UserState


@pytest.mark.parametrize(("experience", "level"), [(0, 1), (25, 1), (99, 1), (100, 2), (250, 3), (1000, 11)])
def test_level_is_floor_of_experience_over_hundred_plus_one(experience: int, level: int) -> None:
    """Career level follows experience // 100 + 1 without a cap."""
    if level_for(experience) != level:
        msg = f"level_for({experience}) = {level_for(experience)}, expected {level}"
        raise AssertionError(msg)


def test_fourth_completed_job_reaches_level_two() -> None:
    """Four jobs at 25 experience each cross the first level boundary."""
    user = UserState(id="user-1", profile=UserProfile(rating=4.0))
    for _ in range(4):
        record_completed_job(user, 25, 0.05, 5.0)
    if (user.experience, user.career_level, user.profile.jobs_completed) != (100, 2, 4):
        msg = f"Unexpected progress: {user.experience=}, {user.career_level=}, {user.profile.jobs_completed=}"
        raise AssertionError(msg)
    if user.profile.rating != pytest.approx(4.2):
        msg = f"Expected rating 4.2, got {user.profile.rating}"
        raise AssertionError(msg)


def test_rating_is_capped_at_five() -> None:
    """Rating never exceeds the maximum."""
    user = UserState(id="user-1", profile=UserProfile(rating=4.98))
    record_completed_job(user, 25, 0.05, 5.0)
    record_completed_job(user, 25, 0.05, 5.0)
    if user.profile.rating != 5.0:
        msg = f"Expected rating capped at 5.0, got {user.profile.rating}"
        raise AssertionError(msg)
