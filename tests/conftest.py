"""
Shared fixtures: a small course dump.
"""

import pytest


@pytest.fixture
def course_data():
    """Course 7 with a general section, two exportable sections and one forum-only section."""
    return {
        'course': {
            'id': 7,
            'fullname': 'Algebra',
            'summary': '<p>Numbers and symbols</p>',
            'teachers': ['Ada Lovelace'],
        },
        'sections': [
            {
                'id': 72, 'section': 2, 'name': 'Discussion', 'summary': '',
                'modules': [{'id': 201, 'modname': 'forum', 'instance': 6}],
            },
            {
                'id': 70, 'section': 0, 'name': 'General', 'summary': '',
                'modules': [{'id': 1, 'modname': 'page', 'instance': 1}],
            },
            {
                'id': 71, 'section': 1, 'name': 'Basics',
                'summary': '<p>Start here</p>',
                'modules': [
                    {'id': 101, 'modname': 'page', 'instance': 10},
                    {'id': 102, 'modname': 'forum', 'instance': 5},
                ],
            },
            {
                'id': 73, 'section': 3, 'name': 'Vocabulary', 'summary': '',
                'modules': [{'id': 301, 'modname': 'glossary', 'instance': 20}],
            },
        ],
        'activities': {
            'page': {
                '1': {'name': 'Course notes', 'content': '<p>Announcements</p>', 'contentformat': 1},
                '10': {
                    'name': 'Welcome',
                    'intro': '<p>Read me first</p>',
                    'introformat': 1,
                    'content': '<p style="margin: 2rem">Hi \U0001F600 α + β</p>'
                               '<script type="math/tex">x^2</script>',
                    'contentformat': 1,
                },
            },
            'glossary': {
                '20': {
                    'name': 'Terms',
                    'entries': [
                        {'concept': 'Sum', 'definition': '∑ of terms', 'definitionformat': 2},
                        {'concept': 'angle', 'definition': '<p>Between two rays</p>'},
                    ],
                },
            },
        },
    }
