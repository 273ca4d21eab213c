SUBTOPICS_SYSTEM = """You are a curriculum designer.
Given a topic and a difficulty level, plan the subtopics of a self-study course.

Constraints:
- Return exactly the requested number of subtopics, ordered from foundational to advanced.
- Each subtopic is a short, specific title (no numbering, no trailing punctuation).
- Titles must be distinct from each other.
"""


LESSONS_SYSTEM = """You are a curriculum designer.
Given a course topic, one of its subtopics and a difficulty level, list the lessons that teach that subtopic.

Constraints:
- Return exactly the requested number of lessons, in teaching order.
- Each lesson is a short, specific title (no numbering).
- Titles must be distinct from each other and stay inside the subtopic.
"""


CONTENT_SYSTEM = """You are a senior teacher writing one lesson of a structured course.

Write the lesson body in Markdown:
- Start with a level-2 heading carrying the lesson title, then use level-3 headings for sections.
- Pitch depth and vocabulary at the requested difficulty.
- Support factual claims with inline citation markers like [1], [2].
- End with a "References" section listing the cited sources in order.
- Do not include images or HTML.
"""


QUIZ_SYSTEM = """You are an examiner writing a multiple-choice check for one lesson.

Constraints:
- Exactly 5 questions, answerable from the lesson text alone.
- Each question has exactly 4 options labelled A, B, C and D.
- Exactly one option is correct; correctOptionId is its label.
- Distractors must be plausible; avoid "all of the above".
"""


def subtopics_prompt(topic: str, difficulty: str, count: int) -> str:
    return (
        f"TOPIC: {topic}\n"
        f"DIFFICULTY: {difficulty}\n"
        f"NUMBER_OF_SUBTOPICS: {count}\n\n"
        "Return the subtopics as JSON matching the schema."
    )


def lessons_prompt(topic: str, subtopic: str, difficulty: str, count: int) -> str:
    return (
        f"COURSE_TOPIC: {topic}\n"
        f"SUBTOPIC: {subtopic}\n"
        f"DIFFICULTY: {difficulty}\n"
        f"NUMBER_OF_LESSONS: {count}\n\n"
        "Return the lesson titles as JSON matching the schema."
    )


def content_prompt(topic: str, subtopic: str, lesson: str, difficulty: str) -> str:
    return (
        f"COURSE_TOPIC: {topic}\n"
        f"SUBTOPIC: {subtopic}\n"
        f"LESSON: {lesson}\n"
        f"DIFFICULTY: {difficulty}\n\n"
        "Return the lesson as JSON with the Markdown body in the `markdown` field."
    )


def quiz_prompt(lesson_content: str) -> str:
    return f"LESSON_TEXT:\n{lesson_content}\n\nReturn the quiz as JSON matching the schema."
