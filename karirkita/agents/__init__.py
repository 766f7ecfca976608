"""Agents package: provides agent registry, base class, and the LLM agent for job generation and evaluation."""

from .base import BaseAgent  # noqa: F401
from .job_agent import GroqJobAgent  # noqa: F401
from .registry import AgentRegistry  # noqa: F401
