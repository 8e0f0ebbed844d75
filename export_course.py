#!/usr/bin/env python3
"""
Course Exporter - Convenience CLI Script

Export a course dump to a PDF or HTML document.

Usage:
    python export_course.py course.json [options]

Options:
    -c, --course-id ID      Course to export (default: the one in the dump)
    -o, --output DIR        Output directory (default: ./output/)
    -n, --name NAME         Output filename (default: course_<id>.<format>)
    -f, --format FORMAT     pdf or html (default: pdf)
    --emoji-dir DIR         Directory of emoji SVG images
    --no-emoji              Keep emoji characters
    --no-math               Keep Unicode math characters
    --root-size N           px per rem (default: 15)
    --font-size N           px per em (default: 15)
    --skip-missing          Skip activities with a missing record
    -v, --verbose           Verbose output
    --version               Show version

Examples:
    python export_course.py course.json
    python export_course.py course.json -f html -o ./exports/
    python export_course.py course.json --emoji-dir ./pix/emoji --skip-missing
"""

import sys
from pathlib import Path

# Add package to path if running directly
package_dir = Path(__file__).parent
if str(package_dir) not in sys.path:
    sys.path.insert(0, str(package_dir))

from course_exporter.cli import main

if __name__ == '__main__':
    sys.exit(main())
