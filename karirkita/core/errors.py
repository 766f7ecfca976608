"""Exception hierarchy for the KarirKita marketplace."""


class MarketplaceError(Exception):
    """Base class for every error raised by the marketplace core."""


class ValidationError(MarketplaceError):
    """An action was rejected before any state changed (balance, minimums, empty input, wrong role)."""


class JobNotFoundError(MarketplaceError):
    """No job with the requested id exists in the session pool."""

    def __init__(self, job_id: str) -> None:
        """Initialize the error with the missing job id."""
        super().__init__(f"Job not found: {job_id}")
        self.job_id = job_id


class InvalidTransitionError(MarketplaceError):
    """A job lifecycle transition is not allowed from the job's current state."""


class AgentError(MarketplaceError):
    """The AI agent could not be reached or failed while answering."""


class AgentResponseError(AgentError):
    """The AI agent answered, but the answer does not match the expected schema."""
