"""
Course Content Exporter

Exports the sections and activities of a course as one paginated
document (PDF or HTML).

Features:
- Pluggable renderer per activity type (page, glossary, slideshow, simplequiz)
- Unsupported activities and empty sections are skipped, not fatal
- Emoji replaced by SVG images so they print without a color emoji font
- Unicode math characters replaced by inline TeX
- rem/em lengths converted to px for the layout engine
- Inert MathJax <script> nodes stripped before layout
- HTML document output, or PDF through PyMuPDF

Workflow:
1. Dump the course to JSON (see course_exporter.providers)
2. Run: python export_course.py course.json -c 7 -o ./output/
"""

from .errors import (
    CourseExportError,
    SymbolTableError,
    UnsupportedModuleError,
    CourseNotFoundError,
    ActivityNotFoundError,
    RenderError,
    PdfGenerationError,
    CourseDataError,
)

from .symbols import (
    EMOJI_SEQUENCES,
    MATH_MACROS,
    emoji_key,
    emoji_asset_name,
    load_emoji_sequences,
)

from .assets import AssetLocator, DirectoryAssetLocator, NullAssetLocator
from .rewriter import ContentRewriter, RewriteOptions
from .sanitizer import DocumentSanitizer, INERT_SCRIPT_TYPES
from .pipeline import FragmentPipeline, PipelineOptions
from .formatting import TextFormat, RichTextFormatter, DefaultFormatter
from .models import Course, Section, CourseModule
from .providers import ActivityDataProvider, JsonCourseProvider

from .renderers import (
    ModuleRenderer,
    PageRenderer,
    GlossaryRenderer,
    SlideshowRenderer,
    SimpleQuizRenderer,
)

from .dispatcher import ModuleRegistry, default_registry
from .sinks import LayoutSink, HtmlDocumentSink, PyMuPDFSink
from .exporter import CourseExporter, ExportOptions, ExportResult, export_course

__version__ = '1.0.0'
__all__ = [
    # Errors
    'CourseExportError',
    'SymbolTableError',
    'UnsupportedModuleError',
    'CourseNotFoundError',
    'ActivityNotFoundError',
    'RenderError',
    'PdfGenerationError',
    'CourseDataError',
    # Symbol tables
    'EMOJI_SEQUENCES',
    'MATH_MACROS',
    'emoji_key',
    'emoji_asset_name',
    'load_emoji_sequences',
    # Content pipeline
    'AssetLocator',
    'DirectoryAssetLocator',
    'NullAssetLocator',
    'ContentRewriter',
    'RewriteOptions',
    'DocumentSanitizer',
    'INERT_SCRIPT_TYPES',
    'FragmentPipeline',
    'PipelineOptions',
    # Data and formatting
    'TextFormat',
    'RichTextFormatter',
    'DefaultFormatter',
    'Course',
    'Section',
    'CourseModule',
    'ActivityDataProvider',
    'JsonCourseProvider',
    # Renderers and dispatch
    'ModuleRenderer',
    'PageRenderer',
    'GlossaryRenderer',
    'SlideshowRenderer',
    'SimpleQuizRenderer',
    'ModuleRegistry',
    'default_registry',
    # Output
    'LayoutSink',
    'HtmlDocumentSink',
    'PyMuPDFSink',
    'CourseExporter',
    'ExportOptions',
    'ExportResult',
    'export_course',
]
