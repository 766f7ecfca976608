"""Pydantic models for the KarirKita marketplace.

This module defines the session state shared by every component: jobs and their lifecycle status, the wallet with its
append-only transaction history, the user profile and career state, and the shapes exchanged with the AI agent.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

SYSTEM_EMPLOYER_ID = "system"
DEFAULT_AVATAR = "https://api.dicebear.com/7.x/avataaars/svg?seed=Felix"


class JobStatus(StrEnum):
    """Lifecycle status of a job."""

    OPEN = "OPEN"
    ASSIGNED = "ASSIGNED"
    SUBMITTED = "SUBMITTED"
    COMPLETED = "COMPLETED"


class Difficulty(StrEnum):
    """Difficulty label of a job."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class TransactionType(StrEnum):
    """Kind of wallet ledger entry."""

    DEPOSIT = "DEPOSIT"
    EARNING = "EARNING"
    PAYMENT = "PAYMENT"


class UserRole(StrEnum):
    """Role the session user plays in the marketplace."""

    WORKER = "WORKER"
    EMPLOYER = "EMPLOYER"


class PaymentMethod(StrEnum):
    """E-wallet channel used for deposits."""

    GOPAY = "GOPAY"
    OVO = "OVO"


class SubmissionOutcome(StrEnum):
    """What happened to a submission once it left the worker."""

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PENDING_REVIEW = "PENDING_REVIEW"
    EVALUATION_ERROR = "EVALUATION_ERROR"


class Job(BaseModel):
    """A unit of work with a fixed reward and a lifecycle status."""

    id: str
    title: str
    description: str
    reward: int = Field(gt=0)
    difficulty: Difficulty
    category: str
    status: JobStatus = JobStatus.OPEN
    employer_id: str
    worker_id: str | None = None
    location: str | None = None
    time_limit: str | None = None
    image_url: str | None = None
    submission_text: str | None = None
    feedback: str | None = None

    @property
    def is_system(self) -> bool:
        """Whether the job was generated by the AI agent and is evaluated automatically."""
        return self.employer_id == SYSTEM_EMPLOYER_ID


class Transaction(BaseModel):
    """Immutable wallet ledger entry; the amount is signed."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: TransactionType
    amount: int
    date: str
    description: str


class Wallet(BaseModel):
    """Virtual balance plus its transaction history, newest first."""

    balance: int = 0
    transactions: list[Transaction] = Field(default_factory=list)


class UserProfile(BaseModel):
    """Public profile of the session user."""

    name: str = ""
    avatar: str = DEFAULT_AVATAR
    skills: list[str] = Field(default_factory=list)
    location: str = ""
    rating: float = Field(default=5.0, ge=0, le=5)
    jobs_completed: int = 0


class UserState(BaseModel):
    """Everything the session knows about its single user."""

    id: str
    role: UserRole | None = None
    wallet: Wallet = Field(default_factory=Wallet)
    career_level: int = 1
    experience: int = 0
    profile: UserProfile = Field(default_factory=UserProfile)


class GeneratedJob(BaseModel):
    """Job listing as returned by the job generation agent."""

    id: str
    title: str
    description: str
    reward: int = Field(gt=0)
    difficulty: Difficulty
    category: str
    status: str


class Evaluation(BaseModel):
    """Pass/fail judgment of a submission with explanatory feedback."""

    success: bool
    feedback: str


class SubmissionResult(BaseModel):
    """Result of submitting work for a job."""

    job: Job
    outcome: SubmissionOutcome
    feedback: str = ""
