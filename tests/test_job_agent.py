"""Tests for GroqJobAgent output handling, using a fake Groq client."""

import json
from types import SimpleNamespace

import pytest

from karirkita.agents.job_agent import GroqJobAgent
from karirkita.agents.registry import AgentRegistry
from karirkita.core.errors import AgentError, AgentResponseError
from karirkita.core.models import Difficulty, Job
from karirkita.core.settings import Settings

JOBS_PAYLOAD = {
    "jobs": [
        {
            "id": "a1",
            "title": "Product descriptions",
            "description": "Write five product descriptions",
            "reward": 75000,
            "difficulty": "Easy",
            "category": "Writing",
            "status": "OPEN",
        },
        {
            "id": "a2",
            "title": "Sales dashboard",
            "description": "Summarise monthly sales in a table",
            "reward": 450000,
            "difficulty": "Hard",
            "category": "Data Analysis",
            "status": "OPEN",
        },
    ]
}


class FakeCompletions:
    """Stands in for ``client.chat.completions``; streams the preset text in small chunks."""

    def __init__(self, text: str, error: Exception | None = None) -> None:
        """Store the answer text (or the error to raise)."""
        self.text = text
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs: object) -> object:
        """Record the call and return a chunk stream or a whole completion."""
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if kwargs.get("stream"):
            return [
                SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=self.text[i : i + 7]))])
                for i in range(0, len(self.text), 7)
            ]
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.text))])


def _agent(text: str, error: Exception | None = None, *, stream: bool = True) -> tuple[GroqJobAgent, FakeCompletions]:
    completions = FakeCompletions(text, error)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    settings = Settings(groq_stream=stream, jobs_per_batch=2)
    return GroqJobAgent(client, settings), completions


def _job() -> Job:
    return Job(
        id="job-1",
        title="Product descriptions",
        description="Write five product descriptions",
        reward=75_000,
        difficulty=Difficulty.EASY,
        category="Writing",
        employer_id="system",
    )


@pytest.mark.parametrize("stream", [True, False])
def test_generate_jobs_parses_listings(stream: bool) -> None:  # noqa: FBT001
    """A well-formed answer becomes validated listings, streamed or not."""
    agent, completions = _agent(json.dumps(JOBS_PAYLOAD), stream=stream)
    jobs = agent.generate_jobs(3)
    if [job.id for job in jobs] != ["a1", "a2"]:
        msg = f"Unexpected jobs: {jobs}"
        raise AssertionError(msg)
    if jobs[1].difficulty != Difficulty.HARD or jobs[1].reward != 450_000:
        msg = f"Unexpected second job: {jobs[1]}"
        raise AssertionError(msg)
    prompt = completions.calls[0]["messages"][1]["content"]
    if "experience level 3" not in prompt or "Generate 2" not in prompt:
        msg = f"Prompt should carry the level and batch size: {prompt}"
        raise AssertionError(msg)


def test_generate_jobs_accepts_bare_list_after_reasoning() -> None:
    """Reasoning blocks and surrounding chatter are skipped."""
    text = "<think>Let me think {about} it</think>Sure! " + json.dumps(JOBS_PAYLOAD["jobs"]) + " Enjoy."
    agent, _ = _agent(text)
    if len(agent.generate_jobs(1)) != len(JOBS_PAYLOAD["jobs"]):
        msg = "Expected both jobs from a bare JSON list"
        raise AssertionError(msg)


@pytest.mark.parametrize(
    "text",
    [
        "I cannot help with that.",
        '{"jobs": [{"id": "x", "title": "No reward"}]}',
        '{"jobs": [{"id": "x", "title": "t", "description": "d", "reward": 1000, '
        '"difficulty": "Impossible", "category": "c", "status": "OPEN"}]}',
        '{"jobs": "none"}',
    ],
)
def test_malformed_generation_yields_no_jobs(text: str) -> None:
    """Unusable answers never crash generation."""
    agent, _ = _agent(text)
    if agent.generate_jobs(1) != []:
        msg = f"Expected no jobs for {text!r}"
        raise AssertionError(msg)


def test_generation_transport_failure_raises_agent_error() -> None:
    """A failing API call surfaces as AgentError."""
    agent, _ = _agent("", error=ConnectionError("network down"))
    with pytest.raises(AgentError, match="Groq API call failed"):
        agent.generate_jobs(1)


def test_evaluate_returns_success_and_feedback() -> None:
    """The evaluation prompt carries job and submission; the answer is parsed."""
    agent, completions = _agent('```json\n{"success": true, "feedback": "Nicely done"}\n```')
    evaluation = agent.evaluate_job_task(_job(), "Five descriptions attached")
    if not evaluation.success or evaluation.feedback != "Nicely done":
        msg = f"Unexpected evaluation: {evaluation}"
        raise AssertionError(msg)
    prompt = completions.calls[0]["messages"][1]["content"]
    if '"Product descriptions"' not in prompt or "Five descriptions attached" not in prompt:
        msg = f"Prompt should carry the job title and the submission: {prompt}"
        raise AssertionError(msg)


@pytest.mark.parametrize("text", ["no json here", '{"verdict": "pass"}', '{"success": "maybe", "feedback": 3}'])
def test_evaluate_with_unparseable_answer_raises_response_error(text: str) -> None:
    """Schema mismatches are typed parse errors."""
    agent, _ = _agent(text)
    with pytest.raises(AgentResponseError):
        agent.evaluate_job_task(_job(), "work")


def test_evaluate_transport_failure_is_not_a_response_error() -> None:
    """Transport failures are AgentError but not AgentResponseError."""
    agent, _ = _agent("", error=TimeoutError("slow"))
    with pytest.raises(AgentError) as exc_info:
        agent.evaluate_job_task(_job(), "work")
    if isinstance(exc_info.value, AgentResponseError):
        msg = "Transport failures must not be reported as parse errors"
        raise AssertionError(msg)


def test_malformed_whole_completion_raises_agent_error() -> None:
    """A non-streamed completion without choices is reported as an agent failure."""
    agent, completions = _agent("", stream=False)
    completions.create = lambda **kwargs: SimpleNamespace(choices=[])  # noqa: ARG005
    with pytest.raises(AgentError, match="malformed completion"):
        agent.evaluate_job_task(_job(), "work")


def test_registry_builds_the_configured_agent() -> None:
    """The API builds its agent from the backend name in the settings."""
    client = SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions("[]")))
    settings = Settings(agent_name="groq")
    agent = AgentRegistry.create(settings, client)
    if not isinstance(agent, GroqJobAgent) or agent.llm_client is not client or agent.settings is not settings:
        msg = f"Expected a GroqJobAgent wired to the given client, got {agent!r}"
        raise AssertionError(msg)
    if "groq" not in AgentRegistry.available():
        msg = f"Expected 'groq' among {AgentRegistry.available()}"
        raise AssertionError(msg)
    with pytest.raises(AgentError, match="No AI backend named 'missing'"):
        AgentRegistry.create(Settings(agent_name="missing"), client)


def test_registry_refuses_a_second_class_under_the_same_name() -> None:
    """Backend names are unique; registering the same class again is harmless."""
    AgentRegistry.register("groq")(GroqJobAgent)

    class OtherAgent(GroqJobAgent):
        pass

    with pytest.raises(ValueError, match="already taken by GroqJobAgent"):
        AgentRegistry.register("groq")(OtherAgent)
    if AgentRegistry.get("groq") is not GroqJobAgent:
        msg = "The original registration must survive"
        raise AssertionError(msg)
