"""Job state machine: enforces valid lifecycle transitions.

Job lifecycle:
    OPEN -> ASSIGNED -> SUBMITTED -> COMPLETED
    ASSIGNED -> OPEN        (worker abandons the job)
    SUBMITTED -> OPEN       (AI evaluation rejects the submission)
    SUBMITTED -> ASSIGNED   (employer sends the work back)

COMPLETED is terminal. Preconditions that depend on the wallet or the session (balance, ownership, active job) are
checked by the session; this module only knows which edges exist.
"""

from karirkita.core.errors import InvalidTransitionError
from karirkita.core.models import Job, JobStatus

_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.OPEN: frozenset({JobStatus.ASSIGNED}),
    JobStatus.ASSIGNED: frozenset({JobStatus.SUBMITTED, JobStatus.OPEN}),
    JobStatus.SUBMITTED: frozenset({JobStatus.COMPLETED, JobStatus.OPEN, JobStatus.ASSIGNED}),
    JobStatus.COMPLETED: frozenset(),
}


class JobStateMachine:
    """Validates and applies job status transitions."""

    @staticmethod
    def can_transition(current: JobStatus, target: JobStatus) -> bool:
        """Return whether ``current -> target`` is an edge of the lifecycle."""
        return target in _TRANSITIONS.get(current, frozenset())

    @staticmethod
    def transition(job: Job, target: JobStatus) -> None:
        """Move the job to ``target`` or raise InvalidTransitionError leaving it untouched."""
        if not JobStateMachine.can_transition(job.status, target):
            allowed = ", ".join(sorted(s.value for s in _TRANSITIONS.get(job.status, frozenset())))
            msg = (
                f"Invalid job transition for {job.id}: {job.status.value} -> {target.value}. "
                f"Allowed from {job.status.value}: [{allowed}]"
            )
            raise InvalidTransitionError(msg)
        job.status = target

    @staticmethod
    def is_terminal(status: JobStatus) -> bool:
        """Check whether no transition leaves the status."""
        return not _TRANSITIONS.get(status)

    @staticmethod
    def valid_transitions(status: JobStatus) -> set[JobStatus]:
        """Return the set of statuses reachable in one step."""
        return set(_TRANSITIONS.get(status, frozenset()))
