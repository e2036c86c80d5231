"""Structured CV document assembled by the interview."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, cast


class DocumentShapeError(ValueError):
    """Raised when a payload does not match the CV document structure."""


@dataclass(slots=True)
class PersonalInfo:
    """Contact block at the top of the CV."""

    full_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    linkedin: str = ""
    portfolio: str = ""


@dataclass(slots=True)
class ExperienceEntry:
    job_title: str = ""
    company: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


@dataclass(slots=True)
class EducationEntry:
    degree: str = ""
    institution: str = ""
    start_date: str = ""
    end_date: str = ""


def _empty_strings() -> List[str]:
    return []


@dataclass(slots=True)
class ProjectEntry:
    name: str = ""
    description: str = ""
    tech_stack: List[str] = field(default_factory=_empty_strings)


# Wire keys (camelCase) for each record type, in output order.
_PERSONAL_KEYS = {
    "fullName": "full_name",
    "email": "email",
    "phone": "phone",
    "address": "address",
    "linkedin": "linkedin",
    "portfolio": "portfolio",
}
_EXPERIENCE_KEYS = {
    "jobTitle": "job_title",
    "company": "company",
    "startDate": "start_date",
    "endDate": "end_date",
    "description": "description",
}
_EDUCATION_KEYS = {
    "degree": "degree",
    "institution": "institution",
    "startDate": "start_date",
    "endDate": "end_date",
}
_PROJECT_TEXT_KEYS = {
    "name": "name",
    "description": "description",
}


@dataclass(slots=True)
class CVDocument:
    """Nested CV representation; every leaf is a string or a list of strings."""

    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    summary: str = ""
    skills: List[str] = field(default_factory=_empty_strings)
    experience: List[ExperienceEntry] = field(default_factory=list)
    education: List[EducationEntry] = field(default_factory=list)
    projects: List[ProjectEntry] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "CVDocument":
        """Blank document with one entry per multi-entry section."""

        return cls(
            experience=[ExperienceEntry()],
            education=[EducationEntry()],
            projects=[ProjectEntry()],
        )

    def clone(self) -> "CVDocument":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase keys of the JSON wire format."""

        return {
            "personalInfo": _record_to_dict(self.personal_info, _PERSONAL_KEYS),
            "summary": self.summary,
            "skills": list(self.skills),
            "experience": [
                _record_to_dict(entry, _EXPERIENCE_KEYS)
                for entry in self.experience
            ],
            "education": [
                _record_to_dict(entry, _EDUCATION_KEYS)
                for entry in self.education
            ],
            "projects": [
                {
                    **_record_to_dict(entry, _PROJECT_TEXT_KEYS),
                    "techStack": list(entry.tech_stack),
                }
                for entry in self.projects
            ],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CVDocument":
        """Parse a wire payload, rejecting anything that is not the same shape.

        Every key must be present with the expected type. Unknown keys are
        ignored so the result always has exactly the documented fields.
        """

        if not isinstance(payload, Mapping):
            raise DocumentShapeError("CV payload must be a JSON object.")
        personal = _require_mapping(payload, "personalInfo", "")
        return cls(
            personal_info=PersonalInfo(
                **_record_kwargs(personal, _PERSONAL_KEYS, "personalInfo")
            ),
            summary=_require_str(payload, "summary", ""),
            skills=_require_str_list(payload, "skills", ""),
            experience=[
                ExperienceEntry(**_record_kwargs(item, _EXPERIENCE_KEYS, where))
                for where, item in _require_records(payload, "experience")
            ],
            education=[
                EducationEntry(**_record_kwargs(item, _EDUCATION_KEYS, where))
                for where, item in _require_records(payload, "education")
            ],
            projects=[
                ProjectEntry(
                    tech_stack=_require_str_list(item, "techStack", where),
                    **_record_kwargs(item, _PROJECT_TEXT_KEYS, where),
                )
                for where, item in _require_records(payload, "projects")
            ],
        )


def _record_to_dict(record: object, keys: Mapping[str, str]) -> Dict[str, Any]:
    return {wire: getattr(record, attr) for wire, attr in keys.items()}


def _record_kwargs(
    data: Mapping[str, Any],
    keys: Mapping[str, str],
    where: str,
) -> Dict[str, str]:
    return {attr: _require_str(data, wire, where) for wire, attr in keys.items()}


def _qualified(where: str, key: str) -> str:
    return f"{where}.{key}" if where else key


def _require_str(data: Mapping[str, Any], key: str, where: str) -> str:
    if key not in data:
        raise DocumentShapeError(f"Missing field '{_qualified(where, key)}'.")
    value = data[key]
    if not isinstance(value, str):
        raise DocumentShapeError(
            f"Field '{_qualified(where, key)}' must be a string."
        )
    return value


def _require_str_list(data: Mapping[str, Any], key: str, where: str) -> List[str]:
    if key not in data:
        raise DocumentShapeError(f"Missing field '{_qualified(where, key)}'.")
    value = data[key]
    if not isinstance(value, list):
        raise DocumentShapeError(
            f"Field '{_qualified(where, key)}' must be a list of strings."
        )
    items = cast(List[Any], value)
    if not all(isinstance(item, str) for item in items):
        raise DocumentShapeError(
            f"Field '{_qualified(where, key)}' must be a list of strings."
        )
    return list(items)


def _require_mapping(
    data: Mapping[str, Any], key: str, where: str
) -> Mapping[str, Any]:
    if key not in data:
        raise DocumentShapeError(f"Missing field '{_qualified(where, key)}'.")
    value = data[key]
    if not isinstance(value, Mapping):
        raise DocumentShapeError(
            f"Field '{_qualified(where, key)}' must be an object."
        )
    return cast(Mapping[str, Any], value)


def _require_records(
    data: Mapping[str, Any], key: str
) -> Sequence[tuple[str, Mapping[str, Any]]]:
    if key not in data:
        raise DocumentShapeError(f"Missing field '{key}'.")
    value = data[key]
    if not isinstance(value, list):
        raise DocumentShapeError(f"Field '{key}' must be a list of objects.")
    records: List[tuple[str, Mapping[str, Any]]] = []
    for index, item in enumerate(cast(List[Any], value)):
        if not isinstance(item, Mapping):
            raise DocumentShapeError(f"Entry '{key}[{index}]' must be an object.")
        records.append((f"{key}[{index}]", cast(Mapping[str, Any], item)))
    return records
