"""
Course exporter.

Walks a course in order and feeds a layout sink:

    cover page
    for each section with at least one supported activity:
        new page, section title, bookmark, summary
        for each supported activity:
            title, bookmark, intro, rendered body

Every HTML fragment (summaries, intros, bodies) goes through the fragment
pipeline first. Unsupported activity types are skipped; a section made
only of unsupported activities is left out. Any other failure aborts the
export and no output file is written.
"""

import html
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .dispatcher import ModuleRegistry, default_registry
from .errors import ActivityNotFoundError, CourseExportError, UnsupportedModuleError
from .formatting import DefaultFormatter, RichTextFormatter, TextFormat
from .models import Course, CourseModule, Section
from .pipeline import FragmentPipeline
from .providers import ActivityDataProvider
from .sinks import Color, HtmlDocumentSink, LayoutSink

logger = logging.getLogger(__name__)

MISSING_ABORT = 'abort'
MISSING_SKIP = 'skip'


@dataclass
class ExportOptions:
    """Configuration options for a course export."""
    skip_general_section: bool = True
    # 'abort' stops the export on a missing activity record, 'skip' logs and moves on
    on_missing_activity: str = MISSING_ABORT
    # Seconds; a slower activity is logged, not interrupted
    activity_time_budget: Optional[float] = 5.0
    cover_page: bool = True
    published_by_label: str = 'Published by'
    date_format: str = '%A, %d %B %Y'
    # Colors
    cover_title_color: Color = (0, 0, 145)
    section_title_color: Color = (46, 134, 193)
    module_title_color: Color = (93, 173, 226)

    def __post_init__(self):
        if self.on_missing_activity not in (MISSING_ABORT, MISSING_SKIP):
            raise ValueError(
                f"on_missing_activity must be '{MISSING_ABORT}' or '{MISSING_SKIP}', "
                f"not {self.on_missing_activity!r}"
            )


@dataclass
class ExportResult:
    """Result of a course export."""
    success: bool
    output_path: str = ''
    error: str = ''
    course_title: str = ''
    sections_exported: int = 0
    modules_exported: int = 0
    modules_skipped: int = 0
    skipped: List[str] = field(default_factory=list)


class CourseExporter:
    """
    Export one course through a layout sink.

    Usage:
        exporter = CourseExporter(JsonCourseProvider.from_file('course.json'))
        result = exporter.export(7, 'course_7.html')
    """

    def __init__(
        self,
        provider: ActivityDataProvider,
        sink_factory: Callable[[], LayoutSink] = HtmlDocumentSink,
        registry: Optional[ModuleRegistry] = None,
        pipeline: Optional[FragmentPipeline] = None,
        formatter: Optional[RichTextFormatter] = None,
        options: Optional[ExportOptions] = None,
    ):
        self.provider = provider
        self.sink_factory = sink_factory
        self.registry = registry or default_registry()
        self.pipeline = pipeline or FragmentPipeline()
        self.formatter = formatter or DefaultFormatter()
        self.options = options or ExportOptions()

    def export(self, course_id: int, output_path) -> ExportResult:
        """
        Export a course to ``output_path``.

        Raises:
            CourseNotFoundError: unknown course
            ActivityNotFoundError: missing record with on_missing_activity='abort'
            RenderError: an activity record cannot be rendered
            PdfGenerationError: the sink failed to write the document
        """
        output_path = Path(output_path)
        course = self.provider.get_course(course_id)
        sections = self.provider.get_sections(course_id)
        logger.info(f"Exporting course {course.id}: {course.fullname}")

        sink = self.sink_factory()
        result = ExportResult(success=False, course_title=course.fullname)

        sink.set_metadata(
            title=course.fullname,
            author=course.fullname,
            subject='Course Content Export',
            keywords='Course, PDF, Export',
        )
        self._write_cover(sink, course)

        section_number = 1
        for section in sections:
            if self.options.skip_general_section and section.number == 0:
                continue
            modules = self.supported_modules(section, result)
            if not modules:
                logger.info(f"Skipping section '{section.name}': nothing to export")
                continue

            if self._write_section(sink, section, section_number, modules, result):
                result.sections_exported += 1
                section_number += 1

        try:
            result.output_path = sink.save(output_path)
        except CourseExportError:
            output_path.unlink(missing_ok=True)
            raise

        result.success = True
        logger.info(
            f"Exported {result.modules_exported} activities in "
            f"{result.sections_exported} sections to {result.output_path}"
        )
        return result

    def supported_modules(self, section: Section, result: Optional[ExportResult] = None) -> List[CourseModule]:
        """Modules of a section that have a renderer, in order."""
        supported = []
        for module in section.modules:
            if self.registry.is_supported(module.modname):
                supported.append(module)
            else:
                logger.debug(f"Skipping unsupported module type '{module.modname}' (cm {module.id})")
                if result is not None:
                    result.modules_skipped += 1
                    result.skipped.append(f"{module.modname}:{module.id}")
        return supported

    # =========================================================================
    # Document parts
    # =========================================================================

    def _write_cover(self, sink: LayoutSink, course: Course) -> None:
        sink.add_page()
        sink.write_heading(course.fullname, 1, self.options.cover_title_color)
        sink.bookmark(course.fullname, 0)
        if not self.options.cover_page:
            return
        parts = ['<div class="cover"><hr />']
        if course.teachers:
            parts.append(f'<h3>{html.escape(self.options.published_by_label)}</h3>')
            parts.extend(f'<p>{html.escape(name)}</p>' for name in course.teachers)
        parts.append(f'<p>{datetime.now().strftime(self.options.date_format)}</p>')
        parts.append('</div>')
        sink.write_html(''.join(parts))

    def _write_section(
        self,
        sink: LayoutSink,
        section: Section,
        section_number: int,
        modules: List[CourseModule],
        result: ExportResult,
    ) -> bool:
        # Render first so that a section whose activities all turn out
        # to be missing leaves nothing behind.
        rendered = []
        for module in modules:
            item = self._render_module(module)
            if item is None:
                result.modules_skipped += 1
                result.skipped.append(f"{module.modname}:{module.id}")
                continue
            rendered.append(item)
        if not rendered:
            return False

        sink.add_page()
        sink.write_heading(section.name, 2, self.options.section_title_color)
        sink.bookmark(f"{section_number}. {section.name}", 1)
        if section.summary:
            sink.write_html(self._format(section.summary, section.summary_format, section))

        for module_number, (name, intro, body) in enumerate(rendered, start=1):
            sink.write_heading(name, 3, self.options.module_title_color)
            sink.bookmark(f"{section_number}.{module_number} {name}", 2)
            if intro:
                sink.write_html(intro)
            sink.write_html(body)
            result.modules_exported += 1
        return True

    def _render_module(self, module: CourseModule) -> Optional[Tuple[str, str, str]]:
        """Returns (name, intro html, body html), or None when skipped."""
        started = time.monotonic()
        try:
            renderer = self.registry.resolve(module.modname)
            record = self.provider.get_activity(module.modname, module.instance)
            body = renderer.render_record(record, module, self.formatter)
        except UnsupportedModuleError:
            logger.warning(f"No renderer for '{module.modname}' (cm {module.id}), skipping")
            return None
        except ActivityNotFoundError as e:
            if self.options.on_missing_activity == MISSING_SKIP:
                logger.warning(f"{e}, skipping cm {module.id}")
                return None
            raise

        name = record.get('name') or module.name or module.modname
        intro = ''
        if record.get('intro'):
            intro = self._format(record['intro'], record.get('introformat', TextFormat.HTML), module)
        body = self.pipeline.process(body)

        elapsed = time.monotonic() - started
        budget = self.options.activity_time_budget
        if budget is not None and elapsed > budget:
            logger.warning(
                f"Activity '{name}' (cm {module.id}) took {elapsed:.1f}s, over the {budget:.1f}s budget"
            )
        return name, intro, body

    def _format(self, text: str, text_format, context) -> str:
        return self.pipeline.process(self.formatter.format_text(text, text_format, context=context))


def export_course(
    provider: ActivityDataProvider,
    course_id: int,
    output_path,
    **kwargs,
) -> ExportResult:
    """
    Export a course and report failure in the result instead of raising.

    Keyword arguments are passed to CourseExporter.

    Example:
        >>> result = export_course(provider, 7, 'course_7.html')
        >>> if not result.success:
        ...     print(result.error)
    """
    try:
        return CourseExporter(provider, **kwargs).export(course_id, output_path)
    except CourseExportError as e:
        logger.error(f"Failed to export course {course_id}: {e}")
        return ExportResult(success=False, error=str(e))
