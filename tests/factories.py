import datetime

from django.utils import timezone

from accounts.models import User
from schools.models import Teacher, Student, Parent, Lesson

PASSWORD = 'Campus2024x'


def make_user(username, role):
    return User.objects.create_user(username=username, password=PASSWORD, role=role)


def make_teacher(username='100001', name='Ana', surname='Lopez', with_login=True):
    user = make_user(f'teacher_{username}', User.ROLE_TEACHER) if with_login else None
    return Teacher.objects.create(
        username=username, name=name, surname=surname, address='Main St 1',
        blood_type='A+', sex=Teacher.SEX_FEMALE, birthday=datetime.date(1985, 3, 2),
        user=user,
    )


def make_parent(username='300001', name='Rosa', surname='Diaz', with_login=True):
    user = make_user(f'parent_{username}', User.ROLE_PARENT) if with_login else None
    return Parent.objects.create(
        username=username, name=name, surname=surname, address='Main St 2', user=user,
    )


def make_student(school_class, username='200001', name='Luis', surname='Diaz',
                 sex=Student.SEX_MALE, parent=None, with_login=True):
    user = make_user(f'student_{username}', User.ROLE_STUDENT) if with_login else None
    return Student.objects.create(
        username=username, name=name, surname=surname, address='Main St 2',
        blood_type='O+', sex=sex, birthday=datetime.date(2012, 5, 20),
        grade=school_class.grade, school_class=school_class, parent=parent, user=user,
    )


def make_lesson(school_class, subject, teacher, day=Lesson.Day.MONDAY,
                start=datetime.time(8, 0), end=datetime.time(9, 0), name='Math 1A'):
    return Lesson.objects.create(
        name=name, day=day, start_time=start, end_time=end,
        subject=subject, school_class=school_class, teacher=teacher,
    )


def aware(year, month, day, hour=0, minute=0):
    return timezone.make_aware(datetime.datetime(year, month, day, hour, minute))
