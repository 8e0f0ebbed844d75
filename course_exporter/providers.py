"""
Activity data providers.

The exporter never talks to a database. It asks a provider for the
course, its sections and one record per activity. JsonCourseProvider
serves all of that from a course dump:

    {
      "course": {"id": 7, "fullname": "Algebra", "teachers": ["Ada Lovelace"]},
      "sections": [
        {"id": 70, "section": 1, "name": "Basics", "summary": "",
         "modules": [{"id": 701, "modname": "page", "instance": 3}]}
      ],
      "activities": {
        "page": {"3": {"name": "Welcome", "content": "<p>Hi</p>", "contentformat": 1}}
      }
    }
"""

import copy
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

from .errors import ActivityNotFoundError, CourseDataError, CourseNotFoundError
from .formatting import TextFormat
from .models import Course, CourseModule, Section

logger = logging.getLogger(__name__)


class ActivityDataProvider(ABC):
    """Read access to course structure and activity records."""

    @abstractmethod
    def get_course(self, course_id: int) -> Course:
        """Raises CourseNotFoundError for an unknown id."""

    @abstractmethod
    def get_sections(self, course_id: int) -> List[Section]:
        """Sections in course order, each with its modules in order."""

    @abstractmethod
    def get_activity(self, modname: str, instance_id: int) -> Dict[str, Any]:
        """
        Fetch an activity record.

        The fields depend on the activity type (name, intro, content,
        entries, slides, questions, ...).

        Raises:
            ActivityNotFoundError: no such record
        """


class JsonCourseProvider(ActivityDataProvider):
    """Serves one course from a JSON dump (see module docstring)."""

    MODULE_FIELDS = ('id', 'modname', 'instance')

    def __init__(self, data: Dict[str, Any]):
        if not isinstance(data, dict):
            raise CourseDataError("Course dump must be a JSON object")
        course = data.get('course') or {}
        if not isinstance(course, dict):
            raise CourseDataError("'course' must be a JSON object")
        activities = data.get('activities') or {}
        if not isinstance(activities, dict):
            raise CourseDataError("'activities' must map activity types to records")

        self._data = data
        self._course = course
        self._activities = {}
        for modname, records in activities.items():
            if not isinstance(records, dict):
                raise CourseDataError(f"'activities.{modname}' must map instance ids to records")
            self._activities[modname.lower()] = {str(key): record for key, record in records.items()}

    @property
    def course_id(self):
        """Id of the course held in the dump."""
        return self._course.get('id')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'JsonCourseProvider':
        return cls(copy.deepcopy(data))

    @classmethod
    def from_file(cls, path) -> 'JsonCourseProvider':
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.debug(f"Loaded course dump: {path}")
        return cls(data)

    def get_course(self, course_id: int) -> Course:
        course = self._course
        if str(course.get('id')) != str(course_id):
            raise CourseNotFoundError(f"Course {course_id} not found")
        return Course(
            id=course['id'],
            fullname=course.get('fullname', ''),
            summary=course.get('summary') or '',
            summary_format=course.get('summaryformat', TextFormat.HTML),
            teachers=list(course.get('teachers') or []),
        )

    def get_sections(self, course_id: int) -> List[Section]:
        self.get_course(course_id)
        sections = [self._parse_section(raw) for raw in self._data.get('sections') or []]
        sections.sort(key=lambda s: s.number)
        return sections

    def get_activity(self, modname: str, instance_id: int) -> Dict[str, Any]:
        record = self._activities.get(modname.lower(), {}).get(str(instance_id))
        if record is None:
            raise ActivityNotFoundError(modname, instance_id)
        return copy.deepcopy(record)

    def _parse_section(self, raw: Any) -> Section:
        if not isinstance(raw, dict) or 'id' not in raw:
            raise CourseDataError(f"Malformed section entry: {raw!r}")
        number = raw.get('section', 0)
        if not isinstance(number, int):
            raise CourseDataError(f"Section {raw['id']}: 'section' must be an integer, got {number!r}")
        return Section(
            id=raw['id'],
            number=number,
            name=raw.get('name') or '',
            summary=raw.get('summary') or '',
            summary_format=raw.get('summaryformat', TextFormat.HTML),
            modules=[self._parse_module(module, raw['id']) for module in raw.get('modules') or []],
        )

    def _parse_module(self, module: Any, section_id) -> CourseModule:
        if not isinstance(module, dict):
            raise CourseDataError(f"Malformed module in section {section_id}: {module!r}")
        missing = [field for field in self.MODULE_FIELDS if field not in module]
        if missing:
            raise CourseDataError(
                f"Malformed module in section {section_id}: missing {', '.join(missing)}"
            )
        return CourseModule(
            id=module['id'],
            modname=module['modname'],
            instance=module['instance'],
            name=module.get('name', ''),
        )
