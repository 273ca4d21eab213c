"""
Content provider - the generative backend behind every cache miss.

The state machine only depends on the ContentProvider protocol; the Gemini
implementation below is the production wiring.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from omnilearn import prompts
from omnilearn.errors import ContentProviderError
from omnilearn.gemini_client import GeminiClient
from omnilearn.images import WikimediaImageFinder
from omnilearn.schemas import (
    Difficulty,
    LessonContentResponse,
    LessonImage,
    LessonsResponse,
    Quiz,
    QuizResponse,
    SubtopicsResponse,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class ContentProvider(Protocol):
    async def generate_subtopics(self, topic: str, difficulty: Difficulty, count: int) -> list[str]: ...

    async def generate_lessons(self, topic: str, subtopic: str, difficulty: Difficulty, count: int) -> list[str]: ...

    async def generate_lesson_content(self, topic: str, subtopic: str, lesson: str, difficulty: Difficulty) -> str: ...

    async def find_lesson_image(self, topic: str, lesson: str) -> LessonImage | None: ...

    async def generate_quiz(self, lesson_content: str) -> Quiz: ...


class JsonGenerator(Protocol):
    async def generate_json(self, *, system: str, user: str, schema: dict[str, Any]) -> dict[str, Any]: ...


class ImageFinder(Protocol):
    async def find(self, topic: str, lesson: str) -> LessonImage | None: ...


def _clean_titles(titles: list[str], count: int) -> list[str]:
    """Strip, drop blanks and duplicates, keep order, cap at count."""
    out: list[str] = []
    for t in titles:
        t = (t or "").strip()
        if t and t not in out:
            out.append(t)
    return out[:count]


class GeminiContentProvider:
    def __init__(self, client: JsonGenerator | None = None, image_finder: ImageFinder | None = None) -> None:
        self._client = client
        self._image_finder = image_finder or WikimediaImageFinder()

    def _get_client(self, operation: str) -> JsonGenerator:
        # Built on first use so browsing cached courses works without credentials.
        if self._client is None:
            try:
                self._client = GeminiClient()
            except RuntimeError as e:
                raise ContentProviderError(operation, str(e)) from e
        return self._client

    async def _generate(self, operation: str, model: type[M], *, system: str, user: str) -> M:
        client = self._get_client(operation)
        try:
            data = await client.generate_json(system=system, user=user, schema=model.model_json_schema())
            return model.model_validate(data)
        except ContentProviderError:
            raise
        except ValidationError as e:
            raise ContentProviderError(operation, f"malformed model output ({e.error_count()} error(s))") from e
        except Exception as e:
            raise ContentProviderError(operation, str(e)) from e

    async def generate_subtopics(self, topic: str, difficulty: Difficulty, count: int) -> list[str]:
        resp = await self._generate(
            "subtopics",
            SubtopicsResponse,
            system=prompts.SUBTOPICS_SYSTEM,
            user=prompts.subtopics_prompt(topic, difficulty.value, count),
        )
        subtopics = _clean_titles(resp.subtopics, count)
        if not subtopics:
            raise ContentProviderError("subtopics", "model returned no subtopics")
        return subtopics

    async def generate_lessons(self, topic: str, subtopic: str, difficulty: Difficulty, count: int) -> list[str]:
        resp = await self._generate(
            "lessons",
            LessonsResponse,
            system=prompts.LESSONS_SYSTEM,
            user=prompts.lessons_prompt(topic, subtopic, difficulty.value, count),
        )
        return _clean_titles(resp.lessons, count)

    async def generate_lesson_content(self, topic: str, subtopic: str, lesson: str, difficulty: Difficulty) -> str:
        resp = await self._generate(
            "content",
            LessonContentResponse,
            system=prompts.CONTENT_SYSTEM,
            user=prompts.content_prompt(topic, subtopic, lesson, difficulty.value),
        )
        markdown = resp.markdown.strip()
        if not markdown:
            raise ContentProviderError("content", "model returned an empty lesson")
        return markdown

    async def find_lesson_image(self, topic: str, lesson: str) -> LessonImage | None:
        return await self._image_finder.find(topic, lesson)

    async def generate_quiz(self, lesson_content: str) -> Quiz:
        resp = await self._generate(
            "quiz",
            QuizResponse,
            system=prompts.QUIZ_SYSTEM,
            user=prompts.quiz_prompt(lesson_content),
        )
        questions = [
            {
                "id": idx,
                "question": q.question.strip(),
                "options": [{"id": o.id.strip(), "text": o.text.strip()} for o in q.options],
                "correctOptionId": q.correctOptionId.strip(),
            }
            for idx, q in enumerate(resp.questions, start=1)
        ]
        try:
            return Quiz.model_validate({"title": resp.title, "questions": questions})
        except ValidationError as e:
            logger.warning("Rejected quiz from model: %s", e)
            raise ContentProviderError("quiz", "model returned an invalid quiz") from e


def make_content_provider() -> GeminiContentProvider:
    return GeminiContentProvider(image_finder=WikimediaImageFinder())
