"""
Exceptions raised while exporting a course.

Content rewriting never raises on bad input; only table loading, dump
validation, dispatch, data access and document output can fail.
"""


class CourseExportError(Exception):
    """Base class for all course export failures."""


class SymbolTableError(CourseExportError, ValueError):
    """A symbol table data file is missing or malformed."""


class UnsupportedModuleError(CourseExportError, LookupError):
    """No renderer is registered for an activity type."""

    def __init__(self, type_name: str):
        super().__init__(f"Unsupported module type: {type_name}")
        self.type_name = type_name


class CourseNotFoundError(CourseExportError, LookupError):
    """The requested course does not exist."""


class ActivityNotFoundError(CourseExportError, LookupError):
    """An activity instance record does not exist."""

    def __init__(self, modname: str, instance_id):
        super().__init__(f"No {modname} record with id {instance_id}")
        self.modname = modname
        self.instance_id = instance_id


class RenderError(CourseExportError):
    """An activity record is present but cannot be rendered."""


class PdfGenerationError(CourseExportError):
    """The layout sink failed to produce the output document."""


class CourseDataError(CourseExportError, ValueError):
    """The course dump does not have the expected structure."""
