"""Lookup of the AI backends by the name configured in ``Settings.agent_name``.

Backends register themselves with the ``AgentRegistry.register`` class decorator when their module is imported; the
API builds the configured one per request with ``AgentRegistry.create``.
"""

from collections.abc import Callable
from typing import ClassVar

from karirkita.agents.base import BaseAgent
from karirkita.core.errors import AgentError
from karirkita.core.settings import Settings


class AgentRegistry:
    """Backend name to agent class mapping."""

    _agents: ClassVar[dict[str, type[BaseAgent]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[BaseAgent]], type[BaseAgent]]:
        """Class decorator registering an agent under ``name``; a name can only be taken by one class."""

        def decorator(agent_cls: type[BaseAgent]) -> type[BaseAgent]:
            existing = cls._agents.get(name)
            if existing is not None and existing is not agent_cls:
                msg = f"Agent name '{name}' is already taken by {existing.__name__}"
                raise ValueError(msg)
            cls._agents[name] = agent_cls
            return agent_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> type[BaseAgent]:
        """Return the agent class registered under ``name``."""
        if name not in cls._agents:
            msg = f"No AI backend named '{name}' (configured: {', '.join(cls.available()) or 'none'})"
            raise AgentError(msg)
        return cls._agents[name]

    @classmethod
    def create(cls, settings: Settings, llm_client: object) -> BaseAgent:
        """Build the backend selected by ``settings.agent_name`` around an LLM client."""
        return cls.get(settings.agent_name)(llm_client, settings)

    @classmethod
    def available(cls) -> list[str]:
        """Registered backend names, sorted."""
        return sorted(cls._agents)
