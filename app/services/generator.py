# app/services/generator.py
# 질문/피드백 생성기. OpenAI 구현과 키가 없을 때 쓰는 fallback 구현 두 가지.

import logging
from typing import List, Optional, Protocol

from openai import OpenAI

from app.config import Settings
from app.errors import CollaboratorError

logger = logging.getLogger(__name__)

DEFAULT_FEEDBACK = "Great answer! Keep practicing to improve further."


def fallback_question(topic: str, difficulty: str) -> str:
    return f"What is {topic}? Explain with examples. ({difficulty} level)"


QUESTION_PROMPT = """
Generate a {difficulty} level interview question about {topic}.
{avoid}
Return only the question, no additional text.
"""

FEEDBACK_PROMPT = """
As an interview expert, evaluate this answer:
Question: {question}
Answer: {answer}
Topic: {topic}
Difficulty: {difficulty}

Provide constructive feedback (max 150 words) and rate from 1-10.
"""


class QuestionFeedbackGenerator(Protocol):
    def generate_question(self, topic: str, difficulty: str, previous_questions: List[str]) -> str: ...

    def generate_feedback(self, question: str, answer: str, topic: str, difficulty: str) -> str: ...


class FallbackGenerator:
    """OPENAI_API_KEY가 없을 때 사용하는 고정 문구 생성기"""

    def generate_question(self, topic: str, difficulty: str, previous_questions: List[str]) -> str:
        return fallback_question(topic, difficulty)

    def generate_feedback(self, question: str, answer: str, topic: str, difficulty: str) -> str:
        return DEFAULT_FEEDBACK


class OpenAIGenerator:

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        timeout: float = 15.0,
        client: Optional[OpenAI] = None,
    ):
        # 재시도 없음, 타임아웃은 호출 단위로 제한
        self.client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model

    def _complete(self, prompt: str, temperature: float) -> str:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise CollaboratorError(f"openai request failed: {e!r}") from e

        content = (completion.choices[0].message.content or "").strip()
        if not content:
            raise CollaboratorError("openai returned empty content")
        return content

    def generate_question(self, topic: str, difficulty: str, previous_questions: List[str]) -> str:
        avoid = ""
        if previous_questions:
            avoid = f"Avoid these topics: {', '.join(previous_questions)}"
        prompt = QUESTION_PROMPT.format(difficulty=difficulty, topic=topic, avoid=avoid)
        return self._complete(prompt, temperature=0.7)

    def generate_feedback(self, question: str, answer: str, topic: str, difficulty: str) -> str:
        prompt = FEEDBACK_PROMPT.format(
            question=question,
            answer=answer,
            topic=topic,
            difficulty=difficulty,
        )
        return self._complete(prompt, temperature=0.2)


def build_generator(settings: Settings) -> QuestionFeedbackGenerator:
    if settings.openai_api_key:
        logger.info("[GENERATOR] using OpenAI model=%s", settings.openai_model)
        return OpenAIGenerator(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout=settings.generator_timeout_sec,
        )

    logger.info("[GENERATOR] OPENAI_API_KEY not set - using fallback responses")
    return FallbackGenerator()
