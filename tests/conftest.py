"""Shared fixtures: settings, a scripted agent standing in for the LLM, a fresh session and an API client."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from karirkita.agents.base import BaseAgent
from karirkita.api.dependencies import get_agent
from karirkita.core.models import Difficulty, Evaluation, GeneratedJob, Job
from karirkita.core.settings import Settings
from karirkita.services.marketplace import MarketplaceSession
from main import create_app


def make_generated_job(idx: int, reward: int = 50_000, difficulty: Difficulty = Difficulty.EASY) -> GeneratedJob:
    """Build a listing as the generation agent would return it."""
    return GeneratedJob(
        id=str(idx),
        title=f"Generated job {idx}",
        description=f"Deliver item {idx}",
        reward=reward,
        difficulty=difficulty,
        category="Writing",
        status="OPEN",
    )


class ScriptedAgent(BaseAgent):
    """Agent that answers from preset values instead of calling an LLM."""

    def __init__(self) -> None:
        """Start with one easy job and an approving evaluation."""
        self.jobs: list[GeneratedJob] = [make_generated_job(1)]
        self.evaluation = Evaluation(success=True, feedback="Great work")
        self.error: Exception | None = None
        self.levels: list[int] = []
        self.evaluated: list[tuple[str, str]] = []

    def generate_jobs(self, level: int) -> list[GeneratedJob]:
        """Return the preset jobs, or raise the preset error."""
        self.levels.append(level)
        if self.error is not None:
            raise self.error
        return list(self.jobs)

    def evaluate_job_task(self, job: Job, submission_text: str) -> Evaluation:
        """Return the preset evaluation, or raise the preset error."""
        self.evaluated.append((job.id, submission_text))
        if self.error is not None:
            raise self.error
        return self.evaluation


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with logs written to a temporary directory."""
    return Settings(log_file=str(tmp_path / "logs" / "karirkita.log"))


@pytest.fixture
def agent() -> ScriptedAgent:
    """A scripted agent with default answers."""
    return ScriptedAgent()


@pytest.fixture
def session(settings: Settings) -> MarketplaceSession:
    """A fresh marketplace session."""
    return MarketplaceSession(settings, user_id="user-test")


@pytest.fixture
def client(settings: Settings, agent: ScriptedAgent) -> TestClient:
    """API client on a fresh app whose agent dependency is the scripted agent."""
    app = create_app(settings)
    app.dependency_overrides[get_agent] = lambda: agent
    return TestClient(app)
