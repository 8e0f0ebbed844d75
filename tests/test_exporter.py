"""
Tests for the course exporter and layout sinks.
"""

import itertools
import logging
from pathlib import Path

import pytest
from course_exporter.assets import DirectoryAssetLocator
from course_exporter.errors import (
    ActivityNotFoundError,
    PdfGenerationError,
    RenderError,
)
from course_exporter.exporter import CourseExporter, ExportOptions, export_course
from course_exporter.pipeline import FragmentPipeline
from course_exporter.providers import JsonCourseProvider
from course_exporter.rewriter import ContentRewriter
from course_exporter.sinks import HtmlDocumentSink, PyMuPDFSink


class RecordingFactory:
    """Sink factory that keeps the sinks it builds."""

    def __init__(self, sink_class=HtmlDocumentSink, **kwargs):
        self.sink_class = sink_class
        self.kwargs = kwargs
        self.sinks = []

    def __call__(self):
        sink = self.sink_class(**self.kwargs)
        self.sinks.append(sink)
        return sink


class FailingSink(HtmlDocumentSink):
    """Writes part of the file, then fails."""

    def save(self, path):
        Path(path).write_text('partial', encoding='utf-8')
        raise PdfGenerationError('disk full')


class TestExportOptions:
    """Tests for ExportOptions dataclass."""

    def test_default_options(self):
        """Test default export options."""
        options = ExportOptions()

        assert options.skip_general_section is True
        assert options.on_missing_activity == 'abort'
        assert options.cover_page is True

    def test_invalid_missing_policy(self):
        """Test an unknown policy is rejected."""
        with pytest.raises(ValueError):
            ExportOptions(on_missing_activity='ignore')


class TestHtmlDocumentSink:
    """Tests for HtmlDocumentSink class."""

    def test_headings_and_bookmarks(self):
        """Test bookmarks attach to the preceding heading."""
        sink = HtmlDocumentSink()
        sink.add_page()
        sink.write_heading('A & B', 2, (1, 2, 3))
        sink.bookmark('1. A & B', 1)

        document = sink.render_document()

        assert '<h2 id="bm-1" style="color: rgb(1, 2, 3);">A &amp; B</h2>' in document
        assert sink.outline == [(1, '1. A & B', 'bm-1')]
        assert '<a href="#bm-1">1. A &amp; B</a>' in document

    def test_bookmark_without_heading(self):
        """Test a bookmark after content gets its own anchor."""
        sink = HtmlDocumentSink()
        sink.add_page()
        sink.write_html('<p>x</p>')
        sink.bookmark('Here', 0)

        assert '<div id="bm-1"></div>' in sink.render_document()

    def test_page_breaks(self):
        """Test a break goes between pages, not before the first."""
        sink = HtmlDocumentSink()
        sink.add_page()
        sink.add_page()
        sink.add_page()

        assert sink.pages == 3
        assert sink.render_document().count('class="page-break"') == 2

    def test_page_bodies(self):
        """Test fragments are grouped by page."""
        sink = HtmlDocumentSink()
        sink.write_html('<p>before</p>')
        sink.add_page()
        sink.write_html('<p>a</p>')
        sink.add_page()
        sink.write_html('<p>b</p>')

        assert sink.page_bodies() == [['<p>before</p>'], ['<p>a</p>'], ['<p>b</p>']]

    def test_metadata_title(self):
        """Test the title lands in the document head."""
        sink = HtmlDocumentSink(include_outline=False)
        sink.set_metadata(title='Algebra <1>', author=None)

        document = sink.render_document()

        assert '<title>Algebra &lt;1&gt;</title>' in document
        assert 'author' not in sink.metadata

    def test_save_failure(self, tmp_path):
        """Test write errors are reported as generation errors."""
        sink = HtmlDocumentSink()

        with pytest.raises(PdfGenerationError):
            sink.save(tmp_path / 'missing-dir' / 'out.html')


class TestCourseExporter:
    """Tests for CourseExporter class."""

    def export(self, data, tmp_path, **kwargs):
        factory = RecordingFactory()
        exporter = CourseExporter(
            JsonCourseProvider.from_dict(data), sink_factory=factory, **kwargs
        )
        output = tmp_path / 'course.html'
        result = exporter.export(7, output)
        return result, factory.sinks[0], output.read_text(encoding='utf-8')

    def test_end_to_end(self, course_data, tmp_path):
        """Test the exported document for a mixed course."""
        result, sink, document = self.export(course_data, tmp_path)

        assert result.success is True
        assert result.course_title == 'Algebra'
        assert result.sections_exported == 2
        assert result.modules_exported == 2
        assert result.modules_skipped == 2
        assert result.skipped == ['forum:102', 'forum:201']

        assert [(level, title) for level, title, _ in sink.outline] == [
            (0, 'Algebra'),
            (1, '1. Basics'),
            (2, '1.1 Welcome'),
            (1, '2. Vocabulary'),
            (2, '2.1 Terms'),
        ]
        assert sink.pages == 3

    def test_content_is_normalized(self, course_data, tmp_path):
        """Test symbols, scripts and units are processed."""
        _, _, document = self.export(course_data, tmp_path)

        assert r'\( \alpha \) + \( \beta \)' in document
        assert r'\( \sum \) of terms' in document
        assert 'margin: 30px' in document
        assert '\U0001F600' not in document
        assert 'x^2' not in document
        assert '<p>Read me first</p>' in document
        assert '<p>Start here</p>' in document

    def test_emoji_image_embedded(self, course_data, tmp_path):
        """Test a known emoji with an image becomes an img tag."""
        emoji_dir = tmp_path / 'emoji'
        emoji_dir.mkdir()
        (emoji_dir / 'emoji_u1f600.svg').write_text('<svg/>', encoding='utf-8')
        pipeline = FragmentPipeline(ContentRewriter(DirectoryAssetLocator(emoji_dir, url_prefix='')))

        _, _, document = self.export(course_data, tmp_path, pipeline=pipeline)

        assert 'src="emoji_u1f600.svg"' in document
        assert r'\( \alpha \)' in document
        assert 'forum' not in document

    def test_skipped_sections_absent(self, course_data, tmp_path):
        """Test the general and unsupported-only sections are left out."""
        _, _, document = self.export(course_data, tmp_path)

        assert 'Discussion' not in document
        assert 'Course notes' not in document

    def test_cover(self, course_data, tmp_path):
        """Test the cover lists the teachers."""
        _, _, document = self.export(course_data, tmp_path)

        assert 'Published by' in document
        assert 'Ada Lovelace' in document

    def test_include_general_section(self, course_data, tmp_path):
        """Test section 0 can be exported."""
        result, sink, document = self.export(
            course_data, tmp_path, options=ExportOptions(skip_general_section=False)
        )

        assert 'Course notes' in document
        assert result.sections_exported == 3
        assert sink.outline[1][1] == '1. General'

    def test_missing_activity_aborts(self, course_data, tmp_path):
        """Test a missing record stops the export without output."""
        del course_data['activities']['page']['10']
        exporter = CourseExporter(JsonCourseProvider.from_dict(course_data))
        output = tmp_path / 'course.html'

        with pytest.raises(ActivityNotFoundError):
            exporter.export(7, output)

        assert not output.exists()

    def test_missing_activity_skipped(self, course_data, tmp_path):
        """Test skip mode drops the activity and its emptied section."""
        del course_data['activities']['page']['10']

        result, sink, document = self.export(
            course_data, tmp_path, options=ExportOptions(on_missing_activity='skip')
        )

        assert result.success is True
        assert result.sections_exported == 1
        assert 'page:101' in result.skipped
        assert 'Basics' not in document
        assert sink.outline[1][1] == '1. Vocabulary'

    def test_render_error_propagates(self, course_data, tmp_path):
        """Test a broken record aborts the export."""
        del course_data['activities']['glossary']['20']['entries']
        exporter = CourseExporter(JsonCourseProvider.from_dict(course_data))

        with pytest.raises(RenderError):
            exporter.export(7, tmp_path / 'course.html')

    def test_sink_failure_removes_output(self, course_data, tmp_path):
        """Test a failed save leaves no file behind."""
        exporter = CourseExporter(JsonCourseProvider.from_dict(course_data), sink_factory=FailingSink)
        output = tmp_path / 'course.html'

        with pytest.raises(PdfGenerationError):
            exporter.export(7, output)

        assert not output.exists()

    def test_slow_activity_logged(self, course_data, tmp_path, caplog, monkeypatch):
        """Test an activity over the time budget is reported."""
        clock = itertools.count(step=10)
        monkeypatch.setattr('course_exporter.exporter.time.monotonic', lambda: next(clock))

        with caplog.at_level(logging.WARNING, logger='course_exporter.exporter'):
            result, _, _ = self.export(course_data, tmp_path)

        assert result.success is True
        assert 'over the 5.0s budget' in caplog.text


class TestExportCourse:
    """Tests for the export_course convenience function."""

    def test_success(self, course_data, tmp_path):
        """Test a successful export."""
        output = tmp_path / 'course.html'

        result = export_course(JsonCourseProvider.from_dict(course_data), 7, output)

        assert result.success is True
        assert result.output_path == str(output)
        assert output.exists()

    def test_unknown_course(self, course_data, tmp_path):
        """Test failures are reported in the result."""
        result = export_course(JsonCourseProvider.from_dict(course_data), 99, tmp_path / 'x.html')

        assert result.success is False
        assert 'Course 99 not found' in result.error


class TestPyMuPDFSink:
    """Tests for PDF output through PyMuPDF."""

    def test_save_single_page(self, tmp_path):
        """Test a minimal document is laid out and saved."""
        fitz = pytest.importorskip('fitz')
        sink = PyMuPDFSink()
        sink.set_metadata(title='Notes')
        sink.add_page()
        sink.write_heading('Notes', 1)
        sink.bookmark('Notes', 0)
        sink.write_html('<p>Body text</p>')
        output = tmp_path / 'out.pdf'

        assert sink.save(output) == str(output)

        doc = fitz.open(str(output))
        try:
            assert doc.page_count == 1
            assert doc.get_toc() == [[1, 'Notes', 1]]
            assert 'Body text' in doc[0].get_text()
        finally:
            doc.close()

    def test_pdf_export(self, course_data, tmp_path):
        """Test every section starts a page and the outline points at it."""
        fitz = pytest.importorskip('fitz')
        output = tmp_path / 'course.pdf'

        result = export_course(
            JsonCourseProvider.from_dict(course_data), 7, output, sink_factory=PyMuPDFSink
        )

        assert result.success is True, result.error
        doc = fitz.open(str(output))
        try:
            assert doc.page_count == 3
            assert doc.metadata['title'] == 'Algebra'
            assert doc.get_toc() == [
                [1, 'Algebra', 1],
                [2, '1. Basics', 2],
                [3, '1.1 Welcome', 2],
                [2, '2. Vocabulary', 3],
                [3, '2.1 Terms', 3],
            ]
        finally:
            doc.close()
