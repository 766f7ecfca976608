"""JobAgent: LLM-backed job generation and submission evaluation.

This module defines the GroqJobAgent class, which uses a Groq-hosted language model to write job listings tailored to
a worker's career level and to judge submitted work. Model output is free text; the agent pulls the first JSON value
out of it and validates it against the pydantic schemas before anything reaches the marketplace session.
"""

import json
import re
from typing import Any

import pydantic

from karirkita.agents.base import BaseAgent
from karirkita.agents.prompts import (
    EVALUATE_PROMPT_LOG_LABEL,
    EVALUATE_SYSTEM_PROMPT,
    EVALUATE_USER_PROMPT_TEMPLATE,
    GENERATE_PROMPT_LOG_LABEL,
    GENERATE_SYSTEM_PROMPT,
    GENERATE_USER_PROMPT_TEMPLATE,
)
from karirkita.agents.registry import AgentRegistry
from karirkita.core.errors import AgentError, AgentResponseError
from karirkita.core.models import Evaluation, GeneratedJob, Job
from karirkita.core.settings import Settings
from karirkita.core.utils import get_color, get_logger

MAX_OUTPUT_LOG_LEN = 300

logger = get_logger("karirkita.agent")

_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL)
_GENERATED_JOBS = pydantic.TypeAdapter(list[GeneratedJob])


@AgentRegistry.register("groq")
class GroqJobAgent(BaseAgent):
    """Agent responsible for LLM-based job generation and evaluation."""

    def __init__(self, llm_client: object, settings: Settings) -> None:
        """Initialize the GroqJobAgent with an LLM client and settings."""
        self.llm_client = llm_client
        self.settings = settings

    def generate_jobs(self, level: int) -> list[GeneratedJob]:
        """Ask the LLM for job listings suited to ``level``.

        Transport failures raise AgentError. Output without JSON, or JSON that does not match the listing schema,
        is logged and yields an empty list.
        """
        cyan = get_color("cyan")
        reset = get_color("reset")
        logger.info(f"{cyan}PROMPT: {GENERATE_PROMPT_LOG_LABEL} (level={level}){reset}")
        user_prompt = GENERATE_USER_PROMPT_TEMPLATE.format(count=self.settings.jobs_per_batch, level=level)
        raw_output = self._complete(GENERATE_SYSTEM_PROMPT, user_prompt)
        data = self._extract_json(raw_output)
        if data is None:
            logger.warning("No JSON found in job generation output; returning no jobs")
            return []
        if isinstance(data, dict):
            data = data.get("jobs", [])
        try:
            jobs = _GENERATED_JOBS.validate_python(data)
        except pydantic.ValidationError as exc:
            logger.warning(f"Generated jobs do not match the listing schema: {exc.error_count()} error(s)")
            return []
        logger.info(f"AGENT: Generated {len(jobs)} job(s) for level {level}")
        return jobs

    def evaluate_job_task(self, job: Job, submission_text: str) -> Evaluation:
        """Ask the LLM whether ``submission_text`` fulfils ``job``."""
        cyan = get_color("cyan")
        reset = get_color("reset")
        logger.info(f"{cyan}PROMPT: {EVALUATE_PROMPT_LOG_LABEL} (job={job.id}){reset}")
        user_prompt = EVALUATE_USER_PROMPT_TEMPLATE.format(
            title=job.title,
            description=job.description,
            submission=submission_text,
        )
        raw_output = self._complete(EVALUATE_SYSTEM_PROMPT, user_prompt)
        data = self._extract_json(raw_output)
        if data is None:
            msg = "No JSON found in evaluation output"
            logger.error(f"AGENT: {msg}")
            raise AgentResponseError(msg)
        try:
            evaluation = Evaluation.model_validate(data)
        except pydantic.ValidationError as exc:
            msg = f"Evaluation output does not match the expected schema: {data}"
            logger.exception(f"AGENT: {msg}")
            raise AgentResponseError(msg) from exc
        logger.info(f"AGENT: Evaluation for {job.id}: success={evaluation.success}")
        return evaluation

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send one chat completion request and return the raw text answer."""
        yellow = get_color("yellow")
        green = get_color("green")
        reset = get_color("reset")
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        try:
            logger.info(f"{yellow}AGENT: Calling LLM...{reset}")
            completion = self.llm_client.chat.completions.create(
                model=self.settings.groq_model,
                messages=messages,
                temperature=self.settings.groq_temperature,
                max_completion_tokens=self.settings.groq_max_completion_tokens,
                top_p=self.settings.groq_top_p,
                stream=self.settings.groq_stream,
                stop=self.settings.groq_stop,
            )
        except Exception as exc:
            msg = f"Groq API call failed: {exc}"
            logger.exception(msg)
            raise AgentError(msg) from exc
        if self.settings.groq_stream:
            raw_output = self._collect_llm_output(completion)
        else:
            try:
                raw_output = completion.choices[0].message.content or ""
            except Exception as exc:
                msg = f"Groq returned a malformed completion: {exc}"
                logger.exception(msg)
                raise AgentError(msg) from exc
        shown = raw_output if len(raw_output) <= MAX_OUTPUT_LOG_LEN else raw_output[: MAX_OUTPUT_LOG_LEN - 3] + "..."
        logger.info(f"{green}OUTPUT: {shown}{reset}")
        return raw_output

    def _collect_llm_output(self, completion: object) -> str:
        """Collect the full output from the LLM completion stream."""
        raw_output = ""
        try:
            for chunk in completion:
                text = chunk.choices[0].delta.content or ""
                raw_output += text
        except Exception as exc:
            msg = f"Groq streaming error: {exc}"
            logger.exception(msg)
            raise AgentError(msg) from exc
        return raw_output

    @staticmethod
    def _extract_json(raw_output: str) -> Any:
        """Return the first JSON object or array embedded in the LLM output, or None."""
        text = _THINK_BLOCK.sub("", raw_output)
        decoder = json.JSONDecoder()
        for match in re.finditer(r"[\[{]", text):
            try:
                value, _ = decoder.raw_decode(text, match.start())
            except json.JSONDecodeError:
                continue
            return value
        return None
