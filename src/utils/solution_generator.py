"""AI tutor for exam questions.

This module provides the SolutionGenerator class which asks the configured
chat model for step-by-step solutions and topic revision summaries.
"""

import logging
from typing import Any, Optional

from core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

SOLUTION_PROMPT_TEMPLATE = """You are an expert {subject} tutor. A student has asked the following question from their exam paper:

Question: {question}

Please provide a detailed, step-by-step solution that:
1. Explains the concept clearly
2. Shows all working steps
3. Provides the final answer
4. Includes any relevant formulas or theories

Keep the explanation student-friendly and educational."""

SUMMARY_PROMPT_TEMPLATE = """Provide a concise summary of the following {subject}topic for exam preparation:

Topic: {topic}

Include:
- Key concepts
- Important formulas (if applicable)
- Common exam questions
- Quick revision points"""

SOLUTION_FAILED_MESSAGE = "Failed to generate AI solution. Please try again."
SUMMARY_FAILED_MESSAGE = "Failed to summarize topic"
NOT_CONFIGURED_ERROR = "AI provider is not configured. Set GEMINI_API_KEY."


class SolutionGenerator:
    """Generates exam solutions and topic summaries with a chat model.

    The chat model is created once at startup (see ``config.build_tutor_llm``)
    and handed in here; this class holds no global state.
    """

    def __init__(self, llm: Optional[Any] = None):
        """Initialize the generator.

        Args:
            llm: LangChain chat model. None means no provider is configured
                and every call fails with UpstreamError.
        """
        self.llm = llm

    def build_solution_prompt(self, question: str, subject: Optional[str] = None) -> str:
        return SOLUTION_PROMPT_TEMPLATE.format(
            subject=subject or "academic", question=question
        )

    def build_summary_prompt(self, topic: str, subject: Optional[str] = None) -> str:
        return SUMMARY_PROMPT_TEMPLATE.format(
            subject=f"{subject} " if subject else "", topic=topic
        )

    async def _complete(self, prompt: str, failure_message: str) -> str:
        if self.llm is None:
            raise UpstreamError(failure_message, NOT_CONFIGURED_ERROR)
        try:
            response = await self.llm.ainvoke(prompt)
        except Exception as e:
            logger.error("AI provider call failed: %s", e, exc_info=True)
            raise UpstreamError(failure_message, str(e)) from e
        # LangChain returns an AIMessage
        content = response.content if hasattr(response, "content") else str(response)
        if not isinstance(content, str):
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part)
                for part in content
            )
        if not content.strip():
            raise UpstreamError(failure_message, "AI provider returned an empty response")
        return content

    async def generate_solution(self, question: str, subject: Optional[str] = None) -> str:
        """Generate a step-by-step solution for an exam question.

        Args:
            question: Question text.
            subject: Optional subject hint used to pick the tutor persona.

        Returns:
            The answer text.

        Raises:
            UpstreamError: If the provider is missing or fails.
        """
        return await self._complete(
            self.build_solution_prompt(question, subject), SOLUTION_FAILED_MESSAGE
        )

    async def summarize_topic(self, topic: str, subject: Optional[str] = None) -> str:
        """Generate a revision summary for a topic.

        Raises:
            UpstreamError: If the provider is missing or fails.
        """
        return await self._complete(
            self.build_summary_prompt(topic, subject), SUMMARY_FAILED_MESSAGE
        )
