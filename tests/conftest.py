import pytest

from accounts.models import User
from schools.models import Grade, SchoolClass, Subject
from .factories import make_user, make_teacher, make_parent, make_student, make_lesson


@pytest.fixture
def admin_user(db):
    return make_user('admin', User.ROLE_ADMIN)


@pytest.fixture
def grade(db):
    return Grade.objects.create(level=1)


@pytest.fixture
def teacher(db):
    return make_teacher()


@pytest.fixture
def school_class(grade, teacher):
    return SchoolClass.objects.create(name='1A', capacity=2, grade=grade, supervisor=teacher)


@pytest.fixture
def other_class(grade):
    return SchoolClass.objects.create(name='1B', capacity=30, grade=grade)


@pytest.fixture
def subject(teacher):
    subject = Subject.objects.create(name='Math')
    subject.teachers.add(teacher)
    return subject


@pytest.fixture
def lesson(school_class, subject, teacher):
    return make_lesson(school_class, subject, teacher)


@pytest.fixture
def parent(db):
    return make_parent()


@pytest.fixture
def student(school_class, parent):
    return make_student(school_class, parent=parent)
