"""Ordered question table driving the CV interview."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Tuple, Union

from .cv_schema import ProjectEntry

SKIP_TOKEN = "skip"

FieldPath = Tuple[Union[str, int], ...]

# Returned by a transform to leave the target field untouched.
KEEP_CURRENT = object()

Transform = Callable[[str], object]


def keep_text(raw: str) -> str:
    return raw.strip()


def skippable_text(raw: str) -> object:
    """Store the trimmed answer unless the user declined with ``skip``."""

    value = raw.strip()
    if value.lower() == SKIP_TOKEN:
        return KEEP_CURRENT
    return value


def split_skills(raw: str) -> List[str]:
    """Split a comma separated list, trimming each token.

    Empty tokens produced by doubled or trailing commas are kept.
    """

    return [token.strip() for token in raw.split(",")]


def parse_project(raw: str) -> ProjectEntry:
    """Parse ``name, description, tech, tech, ...`` into a project entry."""

    segments = raw.split(",")
    name = segments[0].strip() if segments else ""
    description = segments[1].strip() if len(segments) > 1 else ""
    return ProjectEntry(
        name=name,
        description=description,
        tech_stack=[segment.strip() for segment in segments[2:]],
    )


@dataclass(frozen=True, slots=True)
class InterviewQuestion:
    """One interview step: what to ask and where the answer goes."""

    prompt: str
    path: FieldPath
    transform: Transform = keep_text


DEFAULT_QUESTIONS: Tuple[InterviewQuestion, ...] = (
    InterviewQuestion(
        "Let's start building your CV! What's your full name?",
        ("personal_info", "full_name"),
    ),
    InterviewQuestion(
        "What's your email address?",
        ("personal_info", "email"),
    ),
    InterviewQuestion(
        "What's your phone number?",
        ("personal_info", "phone"),
    ),
    InterviewQuestion(
        "What's your address?",
        ("personal_info", "address"),
    ),
    InterviewQuestion(
        "Share your LinkedIn profile URL (or type 'skip').",
        ("personal_info", "linkedin"),
        skippable_text,
    ),
    InterviewQuestion(
        "Share your portfolio/website (or type 'skip').",
        ("personal_info", "portfolio"),
        skippable_text,
    ),
    InterviewQuestion(
        "Write a short professional summary about yourself (2-3 sentences).",
        ("summary",),
    ),
    InterviewQuestion(
        "List your key skills (comma-separated).",
        ("skills",),
        split_skills,
    ),
    InterviewQuestion(
        "What's your most recent job title?",
        ("experience", 0, "job_title"),
    ),
    InterviewQuestion(
        "Which company did/do you work for?",
        ("experience", 0, "company"),
    ),
    InterviewQuestion(
        "Job start date (Month/Year)?",
        ("experience", 0, "start_date"),
    ),
    InterviewQuestion(
        "Job end date (or type 'Present').",
        ("experience", 0, "end_date"),
    ),
    InterviewQuestion(
        "Describe your role & key achievements in this job.",
        ("experience", 0, "description"),
    ),
    InterviewQuestion(
        "What's your highest degree or qualification?",
        ("education", 0, "degree"),
    ),
    InterviewQuestion(
        "Which institution/university did you study at?",
        ("education", 0, "institution"),
    ),
    InterviewQuestion(
        "Education start year?",
        ("education", 0, "start_date"),
    ),
    InterviewQuestion(
        "Education end year (or expected)?",
        ("education", 0, "end_date"),
    ),
    InterviewQuestion(
        "Tell me about a project: name, short description, and tech stack "
        "used (comma-separated).",
        ("projects", 0),
        parse_project,
    ),
)
