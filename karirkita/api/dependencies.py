"""FastAPI dependencies for DI (settings, session, agent).

This module provides dependency injection helpers for settings, the marketplace session and agent instantiation,
enabling modular and testable API endpoints. Tests swap the agent through ``app.dependency_overrides``.
"""

from fastapi import Request
from groq import Groq

from karirkita.agents.base import BaseAgent
from karirkita.agents.registry import AgentRegistry
from karirkita.core.settings import get_settings
from karirkita.services.marketplace import MarketplaceSession


def get_agent() -> BaseAgent:
    """Provide the configured agent instance for dependency injection."""
    settings = get_settings()
    return AgentRegistry.create(settings, Groq(api_key=settings.groq_api_key))


def get_session(request: Request) -> MarketplaceSession:
    """Provide the marketplace session owned by the running application."""
    return request.app.state.session
