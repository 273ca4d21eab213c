from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fakes import FakeContentProvider  # noqa: E402

from omnilearn.controller import LearningController  # noqa: E402
from omnilearn.course_store import CourseStore  # noqa: E402
from omnilearn.storage import InMemoryStorage  # noqa: E402


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def store(storage: InMemoryStorage) -> CourseStore:
    counter = iter(range(1, 10_000))
    return CourseStore(storage, clock=lambda: 1_700_000_000_000, id_factory=lambda: f"course-{next(counter)}")


@pytest.fixture
def provider() -> FakeContentProvider:
    return FakeContentProvider()


@pytest.fixture
def controller(store: CourseStore, provider: FakeContentProvider) -> LearningController:
    return LearningController(store, provider)
