"""Core package: provides models, settings, errors, the wallet ledger, the job state machine and shared utilities."""

from .errors import AgentError, InvalidTransitionError, JobNotFoundError, MarketplaceError, ValidationError  # noqa: F401
from .models import Job, JobStatus, Transaction, UserState, Wallet  # noqa: F401
from .settings import Settings  # noqa: F401
from .state_machine import JobStateMachine  # noqa: F401
from .utils import get_logger  # noqa: F401
