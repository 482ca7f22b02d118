import pytest
from django.contrib.messages import get_messages
from django.db import connection
from django.urls import reverse

from accounts.models import User
from exams.models import Exam
from schools.models import SchoolClass, Student, Subject
from .factories import aware, make_lesson, make_teacher

pytestmark = pytest.mark.django_db


def flash(response):
    return [str(m) for m in get_messages(response.wsgi_request)]


def test_unknown_table_or_action_is_404(client, admin_user):
    client.force_login(admin_user)
    assert client.get('/forms/widgets/create/').status_code == 404
    assert client.get('/forms/subjects/1/archive/').status_code == 404


def test_role_without_write_access_is_sent_back(client, teacher):
    client.force_login(teacher.user)
    response = client.post(reverse('dashboard:create', kwargs={'table': 'subjects'}), {'name': 'Art'})
    assert response.status_code == 302
    assert response.url == reverse('schools:subjects')
    assert flash(response) == ['You do not have permission to modify subjects.']
    assert not Subject.objects.exists()


def test_missing_record_is_reported(client, admin_user):
    client.force_login(admin_user)
    response = client.get(reverse('dashboard:form', kwargs={'table': 'classes', 'pk': 999, 'action': 'update'}))
    assert response.status_code == 302
    assert flash(response) == ['The requested class does not exist.']


def test_create_subject(client, admin_user, teacher):
    client.force_login(admin_user)
    response = client.post(
        reverse('dashboard:create', kwargs={'table': 'subjects'}),
        {'name': 'Art', 'teachers': [teacher.pk]},
    )
    assert response.status_code == 302
    assert list(Subject.objects.get(name='Art').teachers.all()) == [teacher]
    assert flash(response) == ['Subject has been created.']


def test_invalid_form_is_redisplayed(client, admin_user, grade):
    client.force_login(admin_user)
    response = client.post(
        reverse('dashboard:create', kwargs={'table': 'classes'}),
        {'name': '', 'capacity': 0, 'grade': grade.pk},
    )
    assert response.status_code == 200
    assert 'name' in response.context['form'].errors
    assert 'capacity' in response.context['form'].errors


def test_create_student_shows_credentials_once(client, admin_user, school_class):
    client.force_login(admin_user)
    response = client.post(reverse('dashboard:create', kwargs={'table': 'students'}), {
        'username': '200077',
        'name': 'Sara',
        'surname': 'Gil',
        'address': 'Main St 5',
        'blood_type': 'B+',
        'sex': 'FEMALE',
        'birthday': '2012-01-01',
        'grade': school_class.grade.pk,
        'school_class': school_class.pk,
        'password': 'Campus2024x',
    })
    assert response.status_code == 200
    assert response.templates[0].name == 'dashboard/credentials.html'
    assert response.context['credentials']['username'] == '200077'
    assert User.objects.get(username='student_200077').role == User.ROLE_STUDENT


def test_identity_failure_rolls_back_profile(client, admin_user, school_class):
    User.objects.create_user(username='student_200077', password='Campus2024x', role=User.ROLE_STUDENT)
    client.force_login(admin_user)
    response = client.post(reverse('dashboard:create', kwargs={'table': 'students'}), {
        'username': '200077',
        'name': 'Sara',
        'surname': 'Gil',
        'address': 'Main St 5',
        'blood_type': 'B+',
        'sex': 'FEMALE',
        'birthday': '2012-01-01',
        'grade': school_class.grade.pk,
        'school_class': school_class.pk,
        'password': 'Campus2024x',
    })
    assert response.status_code == 200
    assert response.context['form'].errors['username'] == [
        'This account number is already in use. Please use another one.'
    ]
    assert not Student.objects.filter(username='200077').exists()


def test_delete_requires_post(client, admin_user, other_class):
    client.force_login(admin_user)
    url = reverse('dashboard:form', kwargs={'table': 'classes', 'pk': other_class.pk, 'action': 'delete'})

    assert client.get(url).status_code == 200
    assert SchoolClass.objects.filter(pk=other_class.pk).exists()

    response = client.post(url)
    assert response.status_code == 302
    assert not SchoolClass.objects.filter(pk=other_class.pk).exists()


def test_blocked_delete_keeps_record(client, admin_user, school_class, student):
    client.force_login(admin_user)
    url = reverse('dashboard:form', kwargs={'table': 'classes', 'pk': school_class.pk, 'action': 'delete'})
    response = client.post(url)
    assert response.status_code == 302
    assert flash(response) == [
        'Cannot delete this class because it has 1 students assigned. Reassign or delete the students first.'
    ]
    assert SchoolClass.objects.filter(pk=school_class.pk).exists()


def test_protected_delete_is_reported(client, admin_user, grade, school_class):
    client.force_login(admin_user)
    url = reverse('dashboard:form', kwargs={'table': 'teachers', 'pk': school_class.supervisor.pk, 'action': 'delete'})
    make_lesson(school_class, Subject.objects.create(name='Art'), school_class.supervisor)

    response = client.post(url)

    assert flash(response) == [
        'Cannot delete this teacher because other records depend on it. Remove the related records first.'
    ]


def test_teacher_cannot_edit_other_teachers_exam(client, lesson, other_class, subject):
    other = make_teacher(username='100002', name='Eva')
    other_lesson = make_lesson(other_class, subject, other, name='Math 1B')
    exam = Exam.objects.create(title='B', start_time=aware(2024, 3, 4, 8), end_time=aware(2024, 3, 4, 9), lesson=other_lesson)

    client.force_login(lesson.teacher.user)
    response = client.get(reverse('dashboard:form', kwargs={'table': 'exams', 'pk': exam.pk, 'action': 'update'}))

    assert response.status_code == 302
    assert flash(response) == ['The requested exam does not exist.']


@pytest.fixture
def locked_student_logins(db):
    with connection.cursor() as cursor:
        cursor.execute(
            "CREATE TRIGGER lock_student_logins BEFORE DELETE ON accounts_user "
            "WHEN OLD.role = 'student' BEGIN SELECT RAISE(ABORT, 'login is locked'); END"
        )
    yield
    with connection.cursor() as cursor:
        cursor.execute('DROP TRIGGER IF EXISTS lock_student_logins')


def test_delete_keeps_profile_gone_when_login_delete_fails(client, admin_user, student, locked_student_logins):
    client.force_login(admin_user)
    user_pk = student.user_id
    url = reverse('dashboard:form', kwargs={'table': 'students', 'pk': student.pk, 'action': 'delete'})

    response = client.post(url)

    assert response.status_code == 302
    assert flash(response) == ['Student has been deleted.']
    assert not Student.objects.filter(pk=student.pk).exists()
    assert User.objects.filter(pk=user_pk).exists()
