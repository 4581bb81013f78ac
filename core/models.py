"""Typed records for the objects that move through the grading workflow.

Canvas returns plain JSON; each record has a ``from_api`` constructor that
picks out the fields this tool relies on and ignores the rest.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Course:
    id: int
    name: str

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Course":
        return cls(id=payload['id'], name=payload.get('name') or 'Unnamed Course')


@dataclass(frozen=True)
class Assignment:
    id: int
    course_id: Optional[int]
    name: str

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Assignment":
        return cls(
            id=payload['id'],
            course_id=payload.get('course_id'),
            name=payload.get('name') or 'Untitled Assignment',
        )


@dataclass(frozen=True)
class Attachment:
    url: str
    filename: Optional[str] = None
    display_name: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Attachment":
        return cls(
            url=payload['url'],
            filename=payload.get('filename'),
            display_name=payload.get('display_name'),
        )


@dataclass(frozen=True)
class Submission:
    """One student's handed-in work for one assignment."""

    id: Optional[int]
    user_id: Optional[int]
    attachments: List[Attachment] = field(default_factory=list)
    workflow_state: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Submission":
        # Canvas omits the key entirely for submissions without uploads
        attachments = [Attachment.from_api(a) for a in payload.get('attachments') or [] if a.get('url')]
        return cls(
            id=payload.get('id'),
            user_id=payload.get('user_id'),
            attachments=attachments,
            workflow_state=payload.get('workflow_state'),
        )


@dataclass(frozen=True)
class UserProfile:
    id: int
    name: str
    sortable_name: str

    @property
    def family_name(self) -> str:
        """Lower-cased part of the sortable name before its first comma."""
        return self.sortable_name.lower().split(',', 1)[0].strip()

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "UserProfile":
        name = payload.get('name') or payload.get('short_name') or ''
        return cls(
            id=payload['id'],
            name=name,
            sortable_name=payload.get('sortable_name') or name,
        )


@dataclass(frozen=True)
class UserSubmission:
    submission: Submission
    user_profile: UserProfile

    @property
    def sortable_name(self) -> str:
        return self.user_profile.sortable_name


@dataclass(frozen=True)
class DownloadedSubmission:
    """A profile plus the directory its attachment was extracted into."""

    user_profile: UserProfile
    path: Path


@dataclass(frozen=True)
class FileRecord:
    path: Path
    name: str
    contents: Optional[str] = None  # None for binary or unreadable files


@dataclass(frozen=True)
class CheckResult:
    file_name: str
    passed: bool


@dataclass(frozen=True)
class Portion:
    """Half-open index range [start, end) over the sorted roster."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def as_slice(self) -> slice:
        return slice(self.start, self.end)
