"""In-process stand-ins for the content provider."""

from __future__ import annotations

import asyncio

from omnilearn.errors import ContentProviderError
from omnilearn.schemas import Difficulty, LessonImage, Quiz

CORRECT = ["A", "B", "C", "D", "A"]


def make_quiz(correct: list[str] | None = None) -> Quiz:
    correct = correct or CORRECT
    return Quiz.model_validate(
        {
            "title": "Check",
            "questions": [
                {
                    "id": i + 1,
                    "question": f"Question {i + 1}?",
                    "options": [{"id": label, "text": f"Option {label}"} for label in "ABCD"],
                    "correctOptionId": correct[i],
                }
                for i in range(5)
            ],
        }
    )


def make_image(lesson: str) -> LessonImage:
    return LessonImage(
        url=f"https://img.example/{lesson}.png",
        title=lesson,
        author="Jane Doe",
        sourceUrl=f"https://commons.example/File:{lesson}.png",
        license="CC BY-SA 4.0",
    )


class FakeContentProvider:
    """
    Deterministic provider. Put an operation name in `failing` to make it raise;
    set `gate` to hold every call until the event is set.
    """

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.failing: set[str] = set()
        self.with_images = True
        self.lessons_override: list[str] | None = None
        self.gate: asyncio.Event | None = None

    async def _enter(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if self.gate is not None:
            await self.gate.wait()
        if operation in self.failing:
            raise ContentProviderError(operation, "provider unavailable")

    def count(self, operation: str) -> int:
        return sum(1 for c in self.calls if c[0] == operation)

    async def generate_subtopics(self, topic: str, difficulty: Difficulty, count: int) -> list[str]:
        await self._enter("subtopics", topic, difficulty, count)
        return [f"{topic} {i}" for i in range(1, count + 1)]

    async def generate_lessons(self, topic: str, subtopic: str, difficulty: Difficulty, count: int) -> list[str]:
        await self._enter("lessons", topic, subtopic, difficulty, count)
        if self.lessons_override is not None:
            return list(self.lessons_override)
        return [f"{subtopic} / lesson {i}" for i in range(1, count + 1)]

    async def generate_lesson_content(self, topic: str, subtopic: str, lesson: str, difficulty: Difficulty) -> str:
        await self._enter("content", topic, subtopic, lesson, difficulty)
        return f"## {lesson}\n\nAbout {lesson} [1].\n\n### References\n1. A source"

    async def find_lesson_image(self, topic: str, lesson: str) -> LessonImage | None:
        await self._enter("image", topic, lesson)
        return make_image(lesson) if self.with_images else None

    async def generate_quiz(self, lesson_content: str) -> Quiz:
        await self._enter("quiz", lesson_content)
        return make_quiz()
