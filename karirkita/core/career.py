"""Worker career progression."""

from karirkita.core.models import UserState

EXPERIENCE_PER_LEVEL = 100


def level_for(experience: int) -> int:
    """Return the career level reached with the given experience."""
    return experience // EXPERIENCE_PER_LEVEL + 1


def record_completed_job(user: UserState, experience_gain: int, rating_step: float, max_rating: float) -> None:
    """Credit the user with one completed job: experience, level, job count and rating."""
    user.experience += experience_gain
    user.career_level = level_for(user.experience)
    user.profile.jobs_completed += 1
    user.profile.rating = round(min(max_rating, user.profile.rating + rating_step), 2)
