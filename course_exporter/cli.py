#!/usr/bin/env python3
"""
Course Exporter CLI

Command-line interface for exporting a course dump to PDF or HTML.

Usage:
    python -m course_exporter.cli course.json [options]
    course-export course.json [options]
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from . import (
    ContentRewriter,
    CourseExporter,
    CourseExportError,
    DirectoryAssetLocator,
    DocumentSanitizer,
    ExportOptions,
    FragmentPipeline,
    HtmlDocumentSink,
    JsonCourseProvider,
    NullAssetLocator,
    PipelineOptions,
    PyMuPDFSink,
    RewriteOptions,
    __version__,
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(levelname)s: %(message)s'
    )


def parse_args(args: list = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='course-export',
        description='Export the sections and activities of a course to a PDF or HTML document',
        epilog='Example: course-export course.json -o ./output/ --emoji-dir ./pix/emoji'
    )

    parser.add_argument(
        'input',
        type=str,
        help='Path to the course dump (JSON)'
    )

    parser.add_argument(
        '-c', '--course-id',
        type=int,
        default=None,
        help='Course to export (default: the course in the dump)'
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        default=None,
        help='Output directory (default: ./output/)'
    )

    parser.add_argument(
        '-n', '--name',
        type=str,
        default=None,
        help='Output filename (default: course_<id>.<format>)'
    )

    parser.add_argument(
        '-f', '--format',
        choices=('pdf', 'html'),
        default='pdf',
        help='Output format (default: pdf)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    # Content options
    parser.add_argument(
        '--emoji-dir',
        type=str,
        default=None,
        help='Directory of emoji_u<codepoints>.svg images (default: emoji are dropped)'
    )

    parser.add_argument(
        '--no-emoji',
        action='store_true',
        help='Leave emoji characters as they are'
    )

    parser.add_argument(
        '--no-math',
        action='store_true',
        help='Leave Unicode math characters as they are'
    )

    parser.add_argument(
        '--root-size',
        type=float,
        default=15,
        help='Pixel size of 1rem (default: 15)'
    )

    parser.add_argument(
        '--font-size',
        type=float,
        default=15,
        help='Pixel size of 1em (default: 15)'
    )

    parser.add_argument(
        '--no-units',
        action='store_true',
        help='Do not convert rem/em lengths to px'
    )

    # Structure options
    parser.add_argument(
        '--skip-missing',
        action='store_true',
        help='Skip activities whose record is missing instead of failing'
    )

    parser.add_argument(
        '--include-general-section',
        action='store_true',
        help='Also export section 0'
    )

    return parser.parse_args(args)


def build_exporter(parsed: argparse.Namespace, provider: JsonCourseProvider) -> CourseExporter:
    """Wire the exporter from command-line options."""
    emoji_dir = Path(parsed.emoji_dir) if parsed.emoji_dir else None

    if emoji_dir is None:
        locator = NullAssetLocator()
    elif parsed.format == 'pdf':
        # PyMuPDF resolves plain file names against the archive directory
        locator = DirectoryAssetLocator(emoji_dir, url_prefix='')
    else:
        locator = DirectoryAssetLocator(emoji_dir)

    rewriter = ContentRewriter(locator, RewriteOptions(
        replace_emoji=not parsed.no_emoji,
        replace_math=not parsed.no_math,
    ))
    pipeline = FragmentPipeline(rewriter, DocumentSanitizer(), PipelineOptions(
        root_font_size=parsed.root_size,
        base_font_size=parsed.font_size,
        normalize_units=not parsed.no_units,
    ))

    if parsed.format == 'pdf':
        def sink_factory():
            return PyMuPDFSink(archive_dir=emoji_dir)
    else:
        sink_factory = HtmlDocumentSink

    return CourseExporter(
        provider,
        sink_factory=sink_factory,
        pipeline=pipeline,
        options=ExportOptions(
            skip_general_section=not parsed.include_general_section,
            on_missing_activity='skip' if parsed.skip_missing else 'abort',
        ),
    )


def main(args: list = None) -> int:
    """
    Main entry point for CLI.

    Args:
        args: Command-line arguments (default: sys.argv)

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parsed = parse_args(args)
    setup_logging(parsed.verbose)

    logger = logging.getLogger(__name__)

    # Validate input
    input_path = Path(parsed.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {input_path}")
        return 1

    try:
        provider = JsonCourseProvider.from_file(input_path)
    except (OSError, json.JSONDecodeError, CourseExportError) as e:
        logger.error(f"Cannot read course dump {input_path}: {e}")
        return 1

    course_id = parsed.course_id if parsed.course_id is not None else provider.course_id
    if course_id is None:
        logger.error("No course id given and none found in the dump")
        return 1

    # Determine output path
    if parsed.output:
        output_dir = Path(parsed.output)
    else:
        output_dir = Path.cwd() / 'output'
    output_dir.mkdir(parents=True, exist_ok=True)
    filename = parsed.name or f'course_{course_id}.{parsed.format}'
    output_path = output_dir / filename

    exporter = build_exporter(parsed, provider)

    logger.info(f"Exporting course {course_id} from {input_path}")
    try:
        result = exporter.export(course_id, output_path)
    except CourseExportError as e:
        logger.error(f"Export failed: {e}")
        return 1

    print(f"\nExport successful!")
    print(f"  Output:     {result.output_path}")
    print(f"  Course:     {result.course_title}")
    print(f"  Sections:   {result.sections_exported}")
    print(f"  Activities: {result.modules_exported}")
    if result.modules_skipped:
        print(f"  Skipped:    {result.modules_skipped}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
