"""Marketplace session: the single controller that owns the user state and the job pool.

Every user action (deposit, apply, submit, post, approve, ...) is a method on MarketplaceSession. Actions validate
their preconditions first and raise ValidationError, JobNotFoundError or InvalidTransitionError before touching any
state. The only suspension points are the calls to the AI agent, which run in a worker thread so the event loop keeps
serving reads while a generation or evaluation is in flight.
"""

import asyncio

from karirkita.agents.base import BaseAgent
from karirkita.core import ledger
from karirkita.core.career import record_completed_job
from karirkita.core.errors import AgentError, InvalidTransitionError, JobNotFoundError, ValidationError
from karirkita.core.models import (
    SYSTEM_EMPLOYER_ID,
    Difficulty,
    Job,
    JobStatus,
    PaymentMethod,
    SubmissionOutcome,
    SubmissionResult,
    Transaction,
    TransactionType,
    UserRole,
    UserState,
)
from karirkita.core.settings import Settings
from karirkita.core.state_machine import JobStateMachine
from karirkita.core.utils import get_logger, new_id

logger = get_logger("karirkita.session")

SYSTEM_JOB_LOCATION = "Remote"
SYSTEM_JOB_TIME_LIMIT = "48 Hours"
CUSTOM_JOB_CATEGORY = "Custom"
DEFAULT_TIME_LIMIT = "24 Hours"
DEFAULT_REVISION_FEEDBACK = "Revision requested by the employer."


class MarketplaceSession:
    """State and transitions of one interactive marketplace session."""

    def __init__(self, settings: Settings, user_id: str | None = None) -> None:
        """Start a session with an empty wallet, a default profile and no jobs."""
        self.settings = settings
        self.user = UserState(id=user_id or new_id("user", length=4))
        self.jobs: list[Job] = []
        self.active_job_id: str | None = None
        self._evaluating: set[str] = set()

    # --- Queries ---

    @property
    def active_job(self) -> Job | None:
        """The job the worker is currently doing, if any."""
        if self.active_job_id is None:
            return None
        return self.get_job(self.active_job_id)

    def get_job(self, job_id: str) -> Job:
        """Return the job with the given id or raise JobNotFoundError."""
        for job in self.jobs:
            if job.id == job_id:
                return job
        raise JobNotFoundError(job_id)

    def open_jobs(self) -> list[Job]:
        """Jobs a worker can apply for."""
        return [job for job in self.jobs if job.status == JobStatus.OPEN]

    def posted_jobs(self) -> list[Job]:
        """Jobs posted by the session user as an employer."""
        return [job for job in self.jobs if job.employer_id == self.user.id]

    def pending_reviews(self) -> list[Job]:
        """Submitted jobs waiting for the session user's approval."""
        return [job for job in self.posted_jobs() if job.status == JobStatus.SUBMITTED]

    def committed_funds(self) -> int:
        """Sum of rewards the session user has promised on jobs not yet paid out."""
        return sum(job.reward for job in self.posted_jobs() if job.status != JobStatus.COMPLETED)

    # --- Profile and wallet ---

    def choose_role(self, role: UserRole | None) -> None:
        """Pick the role to play; ``None`` returns to role selection."""
        self.user.role = role
        logger.info(f"User {self.user.id} role set to {role.value if role else 'none'}")

    def reset_role(self) -> None:
        """Go back to role selection (the "switch role" control)."""
        self.choose_role(None)

    def update_profile(
        self,
        name: str | None = None,
        location: str | None = None,
        skills: list[str] | str | None = None,
        avatar: str | None = None,
    ) -> None:
        """Update the given profile fields; a comma separated skills string is split and trimmed."""
        if name is not None:
            if not name.strip():
                msg = "Profile name must not be empty"
                raise ValidationError(msg)
            self.user.profile.name = name.strip()
        if location is not None:
            self.user.profile.location = location.strip()
        if skills is not None:
            if isinstance(skills, str):
                skills = skills.split(",")
            self.user.profile.skills = [skill.strip() for skill in skills if skill.strip()]
        if avatar is not None:
            self.user.profile.avatar = avatar

    def deposit(self, amount: int, method: PaymentMethod) -> Transaction:
        """Top up the wallet; amounts below the minimum deposit are rejected."""
        return ledger.deposit(self.user.wallet, amount, method, self.settings.min_deposit)

    # --- Worker actions ---

    async def refresh_jobs(self, agent: BaseAgent) -> list[Job]:
        """Replace the open system jobs with a fresh batch from the agent and return the new jobs.

        Employer-posted jobs and system jobs a worker already holds stay in the pool. Concurrent refreshes are not
        cancelled; whichever answer arrives last wins.
        """
        level = self.user.career_level
        logger.info(f"Requesting new system jobs for level {level}")
        try:
            generated = await asyncio.to_thread(agent.generate_jobs, level)
        except AgentError:
            logger.exception("Job generation failed")
            raise
        new_jobs = [
            Job(
                id=new_id("job"),
                title=item.title,
                description=item.description,
                reward=item.reward,
                difficulty=item.difficulty,
                category=item.category,
                status=JobStatus.OPEN,
                employer_id=SYSTEM_EMPLOYER_ID,
                location=SYSTEM_JOB_LOCATION,
                time_limit=SYSTEM_JOB_TIME_LIMIT,
            )
            for item in generated
        ]
        kept = [job for job in self.jobs if not (job.is_system and job.status == JobStatus.OPEN)]
        self.jobs = kept + new_jobs
        logger.info(f"Job pool refreshed: {len(new_jobs)} new system job(s), {len(self.jobs)} total")
        return new_jobs

    def apply(self, job_id: str) -> Job:
        """Take an open job; requires the minimum balance that insures the job."""
        self._require_role(UserRole.WORKER)
        job = self.get_job(job_id)
        if self.active_job_id is not None:
            msg = f"Finish or abandon your active job {self.active_job_id} before taking another"
            raise ValidationError(msg)
        self._require_transition(job, JobStatus.ASSIGNED)
        minimum = self.settings.min_apply_balance
        if self.user.wallet.balance < minimum:
            msg = f"Minimum balance of Rp {minimum:,} required for job insurance."
            logger.warning(f"Rejected apply for {job.id}: balance {self.user.wallet.balance} < {minimum}")
            raise ValidationError(msg)
        JobStateMachine.transition(job, JobStatus.ASSIGNED)
        job.worker_id = self.user.id
        job.feedback = None
        self.active_job_id = job.id
        logger.info(f"Job {job.id} assigned to {self.user.id}")
        return job

    async def submit(self, job_id: str, submission_text: str, agent: BaseAgent) -> SubmissionResult:
        """Hand in work for the active job.

        System jobs are evaluated by the agent straight away; custom jobs wait for the employer. Either way the
        active job is released.
        """
        self._require_role(UserRole.WORKER)
        job = self.get_job(job_id)
        if self.active_job_id != job.id:
            msg = f"Job {job.id} is not your active job"
            raise ValidationError(msg)
        if not submission_text.strip():
            msg = "Submission must not be empty"
            raise ValidationError(msg)
        JobStateMachine.transition(job, JobStatus.SUBMITTED)
        job.submission_text = submission_text
        self.active_job_id = None
        logger.info(f"Job {job.id} submitted by {self.user.id}")
        if not job.is_system:
            return SubmissionResult(
                job=job,
                outcome=SubmissionOutcome.PENDING_REVIEW,
                feedback="Submission sent to Employer for approval!",
            )
        return await self._evaluate(job, agent)

    async def retry_evaluation(self, job_id: str, agent: BaseAgent) -> SubmissionResult:
        """Evaluate again a system job whose earlier evaluation failed to complete."""
        self._require_role(UserRole.WORKER)
        job = self.get_job(job_id)
        if not job.is_system or job.status != JobStatus.SUBMITTED or job.worker_id != self.user.id:
            msg = f"Job {job.id} has no submission of yours awaiting evaluation"
            raise InvalidTransitionError(msg)
        if job.id in self._evaluating:
            msg = f"Job {job.id} is already being evaluated"
            raise ValidationError(msg)
        return await self._evaluate(job, agent)

    def abandon(self) -> Job:
        """Give up the active job and put it back on the board."""
        job = self.active_job
        if job is None:
            msg = "There is no active job to abandon"
            raise ValidationError(msg)
        JobStateMachine.transition(job, JobStatus.OPEN)
        job.worker_id = None
        self.active_job_id = None
        logger.info(f"Job {job.id} abandoned by {self.user.id}")
        return job

    # --- Employer actions ---

    def post_job(
        self,
        title: str,
        description: str,
        reward: int,
        location: str = "",
        time_limit: str = DEFAULT_TIME_LIMIT,
        image_url: str | None = None,
    ) -> Job:
        """Publish a custom job; the balance not yet promised to other jobs must cover the reward."""
        self._require_role(UserRole.EMPLOYER)
        if not title.strip() or not description.strip():
            msg = "Job title and description must not be empty"
            raise ValidationError(msg)
        if reward <= 0:
            msg = "Job reward must be positive"
            raise ValidationError(msg)
        available = self.user.wallet.balance - self.committed_funds()
        if available < reward:
            msg = "Insufficient balance to guarantee payment."
            logger.warning(f"Rejected job post: reward {reward} exceeds available balance {available}")
            raise ValidationError(msg)
        job = Job(
            id=new_id("job"),
            title=title.strip(),
            description=description.strip(),
            reward=reward,
            difficulty=Difficulty.MEDIUM,
            category=CUSTOM_JOB_CATEGORY,
            status=JobStatus.OPEN,
            employer_id=self.user.id,
            location=location,
            time_limit=time_limit,
            image_url=image_url,
        )
        self.jobs.insert(0, job)
        logger.info(f"Job {job.id} posted by {self.user.id} with reward {reward}")
        return job

    def approve(self, job_id: str) -> Job:
        """Accept a submission and pay the reward out of the wallet."""
        job = self._owned_submission(job_id)
        if self.user.wallet.balance < job.reward:
            msg = f"Insufficient balance to release payment of Rp {job.reward:,}"
            logger.warning(f"Rejected approval of {job.id}: balance {self.user.wallet.balance} < {job.reward}")
            raise ValidationError(msg)
        JobStateMachine.transition(job, JobStatus.COMPLETED)
        ledger.apply_transaction(self.user.wallet, TransactionType.PAYMENT, -job.reward, f"Paid for job: {job.title}")
        logger.info(f"Job {job.id} approved; payment released to {job.worker_id}")
        return job

    def reject(self, job_id: str, feedback: str = "") -> Job:
        """Send a submission back to its worker for another attempt."""
        job = self._owned_submission(job_id)
        JobStateMachine.transition(job, JobStatus.ASSIGNED)
        job.submission_text = None
        job.feedback = feedback.strip() or DEFAULT_REVISION_FEEDBACK
        # The worker may be this same user after a role switch.
        if job.worker_id == self.user.id and self.active_job_id is None:
            self.active_job_id = job.id
        logger.info(f"Job {job.id} returned to {job.worker_id} for revision")
        return job

    # --- Internals ---

    async def _evaluate(self, job: Job, agent: BaseAgent) -> SubmissionResult:
        self._evaluating.add(job.id)
        try:
            evaluation = await asyncio.to_thread(agent.evaluate_job_task, job, job.submission_text or "")
        except AgentError as exc:
            logger.exception(f"Evaluation of {job.id} failed; job stays {job.status.value}")
            return SubmissionResult(
                job=job,
                outcome=SubmissionOutcome.EVALUATION_ERROR,
                feedback=f"Evaluation error: {exc}",
            )
        finally:
            self._evaluating.discard(job.id)
        if job.status != JobStatus.SUBMITTED:
            msg = f"Job {job.id} is {job.status.value}, no longer awaiting evaluation"
            logger.warning(f"Discarding evaluation of {job.id}: status changed to {job.status.value}")
            raise InvalidTransitionError(msg)
        if evaluation.success:
            self._settle_completion(job)
            job.feedback = evaluation.feedback
            return SubmissionResult(job=job, outcome=SubmissionOutcome.APPROVED, feedback=evaluation.feedback)
        JobStateMachine.transition(job, JobStatus.OPEN)
        job.worker_id = None
        job.submission_text = None
        job.feedback = evaluation.feedback
        logger.info(f"Job {job.id} rejected by evaluation and reopened")
        return SubmissionResult(job=job, outcome=SubmissionOutcome.REJECTED, feedback=evaluation.feedback)

    def _settle_completion(self, job: Job) -> None:
        """Complete a job on the worker side: status, earning and career progress."""
        JobStateMachine.transition(job, JobStatus.COMPLETED)
        ledger.apply_transaction(self.user.wallet, TransactionType.EARNING, job.reward, f"Completed: {job.title}")
        record_completed_job(
            self.user,
            self.settings.experience_per_job,
            self.settings.rating_step,
            self.settings.max_rating,
        )
        logger.info(
            f"Job {job.id} completed: experience={self.user.experience}, level={self.user.career_level}, "
            f"rating={self.user.profile.rating}"
        )

    def _owned_submission(self, job_id: str) -> Job:
        self._require_role(UserRole.EMPLOYER)
        job = self.get_job(job_id)
        if job.employer_id != self.user.id:
            msg = f"Job {job.id} was not posted by {self.user.id}"
            raise InvalidTransitionError(msg)
        if job.status != JobStatus.SUBMITTED:
            msg = f"Job {job.id} is {job.status.value}, not awaiting review"
            raise InvalidTransitionError(msg)
        return job

    def _require_role(self, role: UserRole) -> None:
        if self.user.role != role:
            msg = f"This action requires the {role.value} role"
            raise ValidationError(msg)

    @staticmethod
    def _require_transition(job: Job, target: JobStatus) -> None:
        if not JobStateMachine.can_transition(job.status, target):
            msg = f"Job {job.id} is {job.status.value} and cannot become {target.value}"
            raise InvalidTransitionError(msg)
