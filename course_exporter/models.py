"""Course structure records handed out by an activity data provider."""

from dataclasses import dataclass, field
from typing import List

from .formatting import TextFormat


@dataclass
class CourseModule:
    """One activity placed in a course section."""
    id: int
    modname: str          # Activity type: 'page', 'glossary', ...
    instance: int         # Id of the activity record
    name: str = ''


@dataclass
class Section:
    """A course section and its activities, in course order."""
    id: int
    number: int           # 0 is the general section
    name: str = ''
    summary: str = ''
    summary_format: int = TextFormat.HTML
    modules: List[CourseModule] = field(default_factory=list)


@dataclass
class Course:
    """Course-level data used for the cover page."""
    id: int
    fullname: str
    summary: str = ''
    summary_format: int = TextFormat.HTML
    teachers: List[str] = field(default_factory=list)
