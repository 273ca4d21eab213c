from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

MIN_COUNT = 1
MAX_COUNT = 20
DEFAULT_COUNT = 10
QUIZ_LENGTH = 5
OPTIONS_PER_QUESTION = 4


def clamp_count(value: int) -> int:
    return min(max(int(value), MIN_COUNT), MAX_COUNT)


class Difficulty(str, Enum):
    basic = "Basic"
    medium = "Medium"
    high = "High"


class Step(str, Enum):
    dashboard = "DASHBOARD"
    input = "INPUT"
    subtopics = "SUBTOPICS"
    lessons = "LESSONS"
    content = "CONTENT"
    quiz = "QUIZ"


class LessonImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1)
    title: str = ""
    author: str = ""
    sourceUrl: str = Field(..., min_length=1)
    license: str = ""


QuizScore = Annotated[int, Field(ge=0, le=QUIZ_LENGTH)]


class Course(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    topic: str
    difficulty: Difficulty
    subtopicCount: int = Field(DEFAULT_COUNT, ge=MIN_COUNT, le=MAX_COUNT)
    lessonCount: int = Field(DEFAULT_COUNT, ge=MIN_COUNT, le=MAX_COUNT)
    createdAt: int = 0
    subtopics: list[str] = Field(default_factory=list)
    lessonsCache: dict[str, list[str]] = Field(default_factory=dict)
    contentCache: dict[str, str] = Field(default_factory=dict)
    imageCache: dict[str, LessonImage] = Field(default_factory=dict)
    completedQuizzes: dict[str, QuizScore] = Field(default_factory=dict)


class QuizOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Option label, e.g. 'A'")
    text: str


class QuizQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    question: str
    options: list[QuizOption] = Field(..., min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION)
    correctOptionId: str

    @model_validator(mode="after")
    def _check_options(self) -> QuizQuestion:
        labels = [o.id for o in self.options]
        if len(set(labels)) != len(labels):
            raise ValueError(f"question {self.id}: option labels must be unique")
        if self.correctOptionId not in labels:
            raise ValueError(f"question {self.id}: correct option {self.correctOptionId!r} is not an option")
        return self


class Quiz(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    questions: list[QuizQuestion] = Field(..., min_length=QUIZ_LENGTH, max_length=QUIZ_LENGTH)

    @model_validator(mode="after")
    def _check_ids(self) -> Quiz:
        ids = [q.id for q in self.questions]
        if len(set(ids)) != len(ids):
            raise ValueError("question ids must be unique within a quiz")
        return self


# Shapes requested from the model. Wrapped in objects because JSON mode wants an object root.


class SubtopicsResponse(BaseModel):
    subtopics: list[str]


class LessonsResponse(BaseModel):
    lessons: list[str]


class LessonContentResponse(BaseModel):
    markdown: str = Field(..., description="Lesson body in Markdown with headings, [n] citations and a References section")


class QuizOptionDraft(BaseModel):
    id: str = Field(..., description="Option label: A, B, C or D")
    text: str


class QuizQuestionDraft(BaseModel):
    question: str
    options: list[QuizOptionDraft]
    correctOptionId: str


class QuizResponse(BaseModel):
    title: str = ""
    questions: list[QuizQuestionDraft]


# HTTP surface


class CreateCourseRequest(BaseModel):
    topic: str
    difficulty: Difficulty = Difficulty.basic
    subtopicCount: int = DEFAULT_COUNT
    lessonCount: int = DEFAULT_COUNT


class SelectSubtopicRequest(BaseModel):
    subtopic: str = Field(..., min_length=1)


class SelectLessonRequest(BaseModel):
    lesson: str = Field(..., min_length=1)


class QuizAnswerRequest(BaseModel):
    questionId: int
    optionId: str = Field(..., min_length=1)


class CourseProgress(BaseModel):
    completed: int
    total: int
    percent: int
    passed: dict[str, bool] = Field(default_factory=dict)


class NarrationResponse(BaseModel):
    lesson: str
    text: str


class QuizSessionView(BaseModel):
    selectedAnswers: dict[int, str]
    submitted: bool
    score: int
    canSubmit: bool


class AppSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: Step
    activeCourseId: str | None = None
    selectedSubtopic: str | None = None
    selectedLesson: str | None = None
    currentQuiz: Quiz | None = None
    isLoading: bool = False
    loadingMessage: str = ""
    error: str | None = None
    courses: list[Course] = Field(default_factory=list)
    quiz: QuizSessionView
