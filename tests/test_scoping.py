import pytest

from attendance.models import Attendance
from exams.models import Exam, Result
from notices.models import Announcement
from schools.models import Lesson, Student, Teacher
from .factories import aware, make_lesson, make_student, make_teacher

pytestmark = pytest.mark.django_db


@pytest.fixture
def world(school_class, other_class, subject, teacher, lesson, student, parent):
    other_teacher = make_teacher(username='100002', name='Eva', surname='Ruiz')
    other_lesson = make_lesson(other_class, subject, other_teacher, name='Math 1B')
    outsider = make_student(other_class, username='200009', name='Mia', surname='Sol')

    exam = Exam.objects.create(title='Quiz', start_time=aware(2024, 3, 4, 8),
                               end_time=aware(2024, 3, 4, 9), lesson=lesson)
    other_exam = Exam.objects.create(title='Quiz B', start_time=aware(2024, 3, 4, 8),
                                     end_time=aware(2024, 3, 4, 9), lesson=other_lesson)
    Result.objects.create(score=80, student=student, exam=exam)
    Result.objects.create(score=50, student=outsider, exam=other_exam)
    Attendance.objects.create(date=aware(2024, 3, 4).date(), present=True, student=student, lesson=lesson)
    Attendance.objects.create(date=aware(2024, 3, 4).date(), present=False, student=outsider, lesson=other_lesson)

    Announcement.objects.create(title='School closed', description='-', date=aware(2024, 3, 1))
    Announcement.objects.create(title='1A trip', description='-', date=aware(2024, 3, 2), school_class=school_class)
    Announcement.objects.create(title='1B trip', description='-', date=aware(2024, 3, 3), school_class=other_class)
    return {'teacher': teacher, 'student': student, 'parent': parent, 'outsider': outsider}


def titles(qs):
    return sorted(obj.title for obj in qs)


def test_admin_sees_everything(world, admin_user):
    assert Student.objects.visible_to(admin_user).count() == 2
    assert Result.objects.visible_to(admin_user).count() == 2
    assert Announcement.objects.visible_to(admin_user).count() == 3


def test_teacher_sees_own_lessons_work(world):
    user = world['teacher'].user
    assert titles(Exam.objects.visible_to(user)) == ['Quiz']
    assert [r.score for r in Result.objects.visible_to(user)] == [80]
    assert Attendance.objects.visible_to(user).get().student == world['student']
    # directories stay open to staff
    assert Teacher.objects.visible_to(user).count() == 2
    assert titles(Announcement.objects.visible_to(user)) == ['1A trip', 'School closed']


def test_student_sees_only_own_records(world):
    user = world['student'].user
    assert list(Student.objects.visible_to(user)) == [world['student']]
    assert [r.score for r in Result.objects.visible_to(user)] == [80]
    assert [lesson.name for lesson in Lesson.objects.visible_to(user)] == ['Math 1A']
    assert Teacher.objects.visible_to(user).count() == 0
    assert titles(Announcement.objects.visible_to(user)) == ['1A trip', 'School closed']


def test_parent_sees_children(world):
    user = world['parent'].user
    assert list(Student.objects.visible_to(user)) == [world['student']]
    assert Attendance.objects.visible_to(user).count() == 1
    assert titles(Exam.objects.visible_to(user)) == ['Quiz']
    assert titles(Announcement.objects.visible_to(user)) == ['1A trip', 'School closed']


def test_anonymous_sees_nothing(world):
    class Anonymous:
        role = None

    assert not Student.objects.visible_to(Anonymous()).exists()
    assert not Announcement.objects.visible_to(Anonymous()).exists()


def test_global_only(world):
    assert titles(Announcement.objects.global_only()) == ['School closed']
