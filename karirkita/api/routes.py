"""FastAPI endpoints for the KarirKita marketplace API.

This module maps every user action of the marketplace (choosing a role, depositing, taking and submitting jobs,
posting and reviewing jobs) onto one endpoint. Routes only translate HTTP into session calls; domain errors raised by
the session are turned into HTTP errors by the handlers registered in ``main.create_app``.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from karirkita.agents.base import BaseAgent
from karirkita.api.dependencies import get_agent, get_session
from karirkita.core.models import Job, PaymentMethod, SubmissionResult, Transaction, UserRole, UserState, Wallet
from karirkita.core.utils import get_logger
from karirkita.services.marketplace import DEFAULT_TIME_LIMIT, MarketplaceSession

router = APIRouter()
logger = get_logger("karirkita.api")


class RoleRequest(BaseModel):
    """Body of a role selection; ``null`` goes back to role selection."""

    role: UserRole | None


class ProfileUpdate(BaseModel):
    """Partial profile update."""

    name: str | None = None
    location: str | None = None
    skills: list[str] | str | None = None
    avatar: str | None = None


class DepositRequest(BaseModel):
    """Wallet top-up through an e-wallet channel."""

    amount: int
    method: PaymentMethod = PaymentMethod.GOPAY


class JobPostRequest(BaseModel):
    """Custom job published by an employer."""

    title: str
    description: str
    reward: int = 100_000
    location: str = ""
    time_limit: str = DEFAULT_TIME_LIMIT
    image_url: str | None = None


class SubmissionRequest(BaseModel):
    """Work handed in for the active job."""

    submission_text: str = Field(default="")


class RejectRequest(BaseModel):
    """Employer feedback attached to a rejected submission."""

    feedback: str = ""


@router.get(
    "/health",
    summary="Health check",
    description="Simple health check endpoint. Returns status ok.",
    response_description="Status ok.",
    responses={200: {"description": "API is healthy.", "content": {"application/json": {"example": {"status": "ok"}}}}},
)
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/me", response_model=UserState, summary="Current user state")
async def get_me(session: MarketplaceSession = Depends(get_session)) -> UserState:
    """Return the session user: role, wallet, career progress and profile."""
    return session.user


@router.post("/me/role", response_model=UserState, summary="Choose worker or employer role")
async def choose_role(body: RoleRequest, session: MarketplaceSession = Depends(get_session)) -> UserState:
    """Choose the role to play, or reset it with ``null``."""
    if body.role is None:
        session.reset_role()
    else:
        session.choose_role(body.role)
    return session.user


@router.patch("/me/profile", response_model=UserState, summary="Update profile")
async def update_profile(body: ProfileUpdate, session: MarketplaceSession = Depends(get_session)) -> UserState:
    """Update name, location, skills or avatar."""
    session.update_profile(name=body.name, location=body.location, skills=body.skills, avatar=body.avatar)
    return session.user


@router.get("/wallet", response_model=Wallet, summary="Wallet balance and history")
async def get_wallet(session: MarketplaceSession = Depends(get_session)) -> Wallet:
    """Return the wallet with its transactions, newest first."""
    return session.user.wallet


@router.post(
    "/wallet/deposit",
    response_model=Transaction,
    status_code=201,
    summary="Deposit into the wallet",
    description=(
        "Top up the wallet via GOPAY or OVO.\n\n"
        "**Response:**\n"
        "- 201 Created: the recorded DEPOSIT transaction.\n"
        "- 400 Bad Request: amount below the minimum deposit (Rp 100,000)."
    ),
)
async def deposit(body: DepositRequest, session: MarketplaceSession = Depends(get_session)) -> Transaction:
    """Deposit money into the wallet."""
    logger.info(f"Deposit request: amount={body.amount}, method={body.method.value}")
    return session.deposit(body.amount, body.method)


@router.get("/jobs", response_model=list[Job], summary="Open jobs")
async def list_open_jobs(session: MarketplaceSession = Depends(get_session)) -> list[Job]:
    """List the jobs a worker can apply for."""
    return session.open_jobs()


@router.post(
    "/jobs",
    response_model=Job,
    status_code=201,
    summary="Post a custom job",
    description=(
        "Publish a job as an employer. The wallet balance not yet promised to other open jobs must cover the "
        "reward; funds are only deducted when the submission is approved.\n\n"
        "**Response:**\n"
        "- 201 Created: the new OPEN job.\n"
        "- 400 Bad Request: wrong role, empty fields or insufficient balance."
    ),
)
async def post_job(body: JobPostRequest, session: MarketplaceSession = Depends(get_session)) -> Job:
    """Post a custom job."""
    return session.post_job(
        title=body.title,
        description=body.description,
        reward=body.reward,
        location=body.location,
        time_limit=body.time_limit,
        image_url=body.image_url,
    )


@router.post(
    "/jobs/refresh",
    response_model=list[Job],
    summary="Generate new system jobs",
    description=(
        "Ask the AI agent for a fresh batch of jobs tailored to the user's career level. Open system jobs from "
        "earlier batches are replaced; employer jobs and jobs already taken are kept.\n\n"
        "**Response:**\n"
        "- 200 OK: the newly generated jobs (possibly empty when the agent answer was unusable).\n"
        "- 502 Bad Gateway: the agent could not be reached."
    ),
)
async def refresh_jobs(
    session: MarketplaceSession = Depends(get_session),
    agent: BaseAgent = Depends(get_agent),
) -> list[Job]:
    """Regenerate the system jobs."""
    return await session.refresh_jobs(agent)


@router.get("/jobs/active", response_model=Job, summary="Active job")
async def get_active_job(session: MarketplaceSession = Depends(get_session)) -> Job:
    """Return the job the worker is currently doing."""
    job = session.active_job
    if job is None:
        raise HTTPException(404, "No active job")
    return job


@router.post("/jobs/active/abandon", response_model=Job, summary="Abandon the active job")
async def abandon_active_job(session: MarketplaceSession = Depends(get_session)) -> Job:
    """Give up the active job and reopen it."""
    return session.abandon()


@router.get("/jobs/reviews", response_model=list[Job], summary="Submissions awaiting review")
async def list_pending_reviews(session: MarketplaceSession = Depends(get_session)) -> list[Job]:
    """List the employer's jobs with a submission waiting for approval."""
    return session.pending_reviews()


@router.get("/jobs/{job_id}", response_model=Job, summary="Job details")
async def get_job(job_id: str, session: MarketplaceSession = Depends(get_session)) -> Job:
    """Return one job from the pool."""
    return session.get_job(job_id)


@router.post(
    "/jobs/{job_id}/apply",
    response_model=Job,
    summary="Take a job",
    description=(
        "Take an open job as a worker. Requires a wallet balance of at least Rp 50,000 as job insurance and no "
        "other active job.\n\n"
        "**Response:**\n"
        "- 200 OK: the ASSIGNED job.\n"
        "- 400 Bad Request: insufficient balance, wrong role or another active job.\n"
        "- 404 Not Found: unknown job.\n"
        "- 409 Conflict: the job is not open."
    ),
)
async def apply_for_job(job_id: str, session: MarketplaceSession = Depends(get_session)) -> Job:
    """Apply for a job."""
    return session.apply(job_id)


@router.post(
    "/jobs/{job_id}/submit",
    response_model=SubmissionResult,
    summary="Submit work",
    description=(
        "Hand in work for the active job. System jobs are evaluated by the AI agent immediately; custom jobs wait "
        "for the employer. The outcome is one of APPROVED, REJECTED, PENDING_REVIEW or EVALUATION_ERROR."
    ),
)
async def submit_job(
    job_id: str,
    body: SubmissionRequest,
    session: MarketplaceSession = Depends(get_session),
    agent: BaseAgent = Depends(get_agent),
) -> SubmissionResult:
    """Submit work for a job."""
    return await session.submit(job_id, body.submission_text, agent)


@router.post("/jobs/{job_id}/evaluate", response_model=SubmissionResult, summary="Retry AI evaluation")
async def retry_evaluation(
    job_id: str,
    session: MarketplaceSession = Depends(get_session),
    agent: BaseAgent = Depends(get_agent),
) -> SubmissionResult:
    """Evaluate again a system job whose evaluation did not complete."""
    return await session.retry_evaluation(job_id, agent)


@router.post("/jobs/{job_id}/approve", response_model=Job, summary="Approve and release payment")
async def approve_job(job_id: str, session: MarketplaceSession = Depends(get_session)) -> Job:
    """Approve a submission and pay the reward."""
    return session.approve(job_id)


@router.post("/jobs/{job_id}/reject", response_model=Job, summary="Send work back for revision")
async def reject_job(
    job_id: str,
    body: RejectRequest | None = None,
    session: MarketplaceSession = Depends(get_session),
) -> Job:
    """Reject a submission with feedback."""
    return session.reject(job_id, body.feedback if body else "")
