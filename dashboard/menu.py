from django.utils.translation import gettext_lazy as _

ALL_ROLES = ('admin', 'teacher', 'student', 'parent')
STAFF = ('admin', 'teacher')

# (label, url name, icon, roles that see it)
MENU_ITEMS = [
    (_('Home'), 'dashboard:home', 'home', ALL_ROLES),
    (_('Teachers'), 'schools:teachers', 'teacher', STAFF),
    (_('Students'), 'schools:students', 'student', STAFF),
    (_('Parents'), 'schools:parents', 'parent', STAFF),
    (_('Subjects'), 'schools:subjects', 'subject', ('admin',)),
    (_('Classes'), 'schools:classes', 'class', STAFF),
    (_('Lessons'), 'schools:lessons', 'lesson', STAFF),
    (_('Exams'), 'exams:exams', 'exam', ALL_ROLES),
    (_('Assignments'), 'exams:assignments', 'assignment', ALL_ROLES),
    (_('Results'), 'exams:results', 'result', ALL_ROLES),
    (_('Attendance'), 'attendance:list', 'attendance', ALL_ROLES),
    (_('Events'), 'notices:events', 'calendar', ALL_ROLES),
    (_('Announcements'), 'notices:announcements', 'announcement', ALL_ROLES),
]


def menu_for(user):
    role = getattr(user, 'role', None)
    return [
        {'label': label, 'url_name': url_name, 'icon': icon}
        for label, url_name, icon, roles in MENU_ITEMS
        if role in roles
    ]
