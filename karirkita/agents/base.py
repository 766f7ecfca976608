"""Base agent abstraction for the AI collaborator.

This module defines the abstract base class for the agents that generate job listings and evaluate worker
submissions. The marketplace session only talks to this interface, so any LLM backend (or a scripted stand-in) can be
plugged in.
"""

from abc import ABC, abstractmethod

from karirkita.core.models import Evaluation, GeneratedJob, Job


class BaseAgent(ABC):
    """Abstract base class for all agents."""

    @abstractmethod
    def generate_jobs(self, level: int) -> list[GeneratedJob]:
        """Generate job listings suited to a career level; malformed answers yield an empty list."""

    @abstractmethod
    def evaluate_job_task(self, job: Job, submission_text: str) -> Evaluation:
        """Judge a submission for a job; raises AgentError on transport or parse failure."""
