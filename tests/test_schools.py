import datetime
import io

import openpyxl
import pytest

from accounts.models import User
from dashboard.errors import DeletionBlocked
from exams.models import Exam
from schools.forms import LessonForm, SchoolClassForm, StudentForm, TeacherForm
from schools.models import Grade, Lesson, SchoolClass, Student, Subject
from schools.services import delete_class, delete_lesson, delete_person, import_roster, save_teacher
from schools.utils import normalize_account_number, parse_birthday, parse_roster_excel, weekly_schedule
from .factories import PASSWORD, aware, make_lesson, make_student

pytestmark = pytest.mark.django_db


def lesson_data(school_class, subject, teacher, **overrides):
    data = {
        'name': 'Algebra',
        'day': Lesson.Day.MONDAY,
        'start_time': '08:30',
        'end_time': '09:30',
        'subject': subject.pk,
        'school_class': school_class.pk,
        'teacher': teacher.pk,
    }
    data.update(overrides)
    return data


def test_lesson_must_end_after_start(school_class, subject, teacher, admin_user):
    form = LessonForm(data=lesson_data(school_class, subject, teacher, end_time='08:00'), user=admin_user)
    assert not form.is_valid()
    assert form.errors['end_time'] == ['The end time must be after the start time.']


def test_lesson_overlap_for_class_and_teacher(lesson, school_class, subject, teacher, admin_user):
    form = LessonForm(data=lesson_data(school_class, subject, teacher), user=admin_user)
    assert not form.is_valid()
    assert 'The class 1A already has a lesson at that time.' in form.non_field_errors()
    assert form.errors['teacher'] == ['The teacher Ana Lopez already has a lesson at that time.']


def test_back_to_back_lessons_do_not_overlap(lesson, school_class, subject, teacher, admin_user):
    form = LessonForm(
        data=lesson_data(school_class, subject, teacher, start_time='09:00', end_time='10:00'),
        user=admin_user,
    )
    assert form.is_valid(), form.errors


def test_editing_a_lesson_ignores_itself(lesson, school_class, subject, teacher, admin_user):
    form = LessonForm(
        data=lesson_data(school_class, subject, teacher, start_time='08:00', end_time='08:45'),
        instance=lesson,
        user=admin_user,
    )
    assert form.is_valid(), form.errors


def test_capacity_cannot_drop_below_enrolment(school_class, student, admin_user):
    make_student(school_class, username='200002', name='Leo')
    form = SchoolClassForm(
        data={'name': '1A', 'capacity': 1, 'grade': school_class.grade.pk},
        instance=school_class,
        user=admin_user,
    )
    assert not form.is_valid()
    assert form.errors['capacity'] == [
        'Cannot reduce capacity to 1 because there are 2 students assigned to this class.'
    ]


def student_data(school_class, **overrides):
    data = {
        'username': '200005',
        'name': 'Sara',
        'surname': 'Gil',
        'address': 'Main St 5',
        'blood_type': 'B+',
        'sex': Student.SEX_FEMALE,
        'birthday': '2012-01-01',
        'grade': school_class.grade.pk,
        'school_class': school_class.pk,
        'password': PASSWORD,
    }
    data.update(overrides)
    return data


def test_full_class_rejects_new_students(school_class, student, admin_user):
    make_student(school_class, username='200002', name='Leo')
    form = StudentForm(data=student_data(school_class), user=admin_user)
    assert not form.is_valid()
    assert form.errors['school_class'] == ['The selected class is already full. Please choose another class.']


def test_student_already_in_full_class_can_be_edited(school_class, student, admin_user):
    make_student(school_class, username='200002', name='Leo')
    form = StudentForm(
        data=student_data(school_class, username=student.username, password=''),
        instance=student,
        user=admin_user,
    )
    assert form.is_valid(), form.errors


def test_password_required_on_create_only(school_class, student, admin_user):
    create = StudentForm(data=student_data(school_class, password=''), user=admin_user)
    assert not create.is_valid()
    assert 'password' in create.errors


def test_save_teacher_provisions_login_and_assignments(school_class, other_class, admin_user):
    physics = Subject.objects.create(name='Physics')
    form = TeacherForm(
        data={
            'username': '100010',
            'name': 'Juan',
            'surname': 'Mora',
            'address': 'Main St 9',
            'blood_type': 'AB-',
            'sex': 'MALE',
            'birthday': '1979-09-09',
            'password': PASSWORD,
            'subjects': [physics.pk],
            'classes': [other_class.pk],
        },
        user=admin_user,
    )
    assert form.is_valid(), form.errors

    teacher = save_teacher(form)

    assert teacher.user.username == 'teacher_100010'
    assert teacher.user.role == User.ROLE_TEACHER
    assert list(teacher.subjects.all()) == [physics]
    assert list(teacher.supervised_classes.all()) == [other_class]


def test_save_teacher_replaces_supervised_classes(teacher, school_class, other_class, admin_user):
    form = TeacherForm(
        data={
            'username': teacher.username,
            'name': teacher.name,
            'surname': teacher.surname,
            'address': teacher.address,
            'blood_type': teacher.blood_type,
            'sex': teacher.sex,
            'birthday': '1985-03-02',
            'classes': [other_class.pk],
        },
        instance=teacher,
        user=admin_user,
    )
    assert form.is_valid(), form.errors
    save_teacher(form)

    school_class.refresh_from_db()
    other_class.refresh_from_db()
    assert school_class.supervisor is None
    assert other_class.supervisor == teacher
    assert teacher.user.check_password(PASSWORD)


def test_delete_person_removes_login(student):
    user_pk = student.user.pk
    delete_person(student)
    assert not Student.objects.exists()
    assert not User.objects.filter(pk=user_pk).exists()


def test_delete_class_blocked_while_students_assigned(school_class, student):
    with pytest.raises(DeletionBlocked) as excinfo:
        delete_class(school_class)
    assert 'it has 1 students assigned' in excinfo.value.message
    assert SchoolClass.objects.filter(pk=school_class.pk).exists()


def test_delete_lesson_blocked_by_exams(lesson):
    Exam.objects.create(title='Quiz', start_time=aware(2024, 3, 4, 8), end_time=aware(2024, 3, 4, 9), lesson=lesson)
    with pytest.raises(DeletionBlocked) as excinfo:
        delete_lesson(lesson)
    assert excinfo.value.message == 'Cannot delete this lesson because it has 1 exams. Delete the exams first.'


def test_delete_lesson_without_dependants(lesson):
    delete_lesson(lesson)
    assert not Lesson.objects.exists()


def test_weekly_schedule_groups_by_day(school_class, subject, teacher):
    late = make_lesson(school_class, subject, teacher, start=datetime.time(11), end=datetime.time(12), name='B')
    early = make_lesson(school_class, subject, teacher, start=datetime.time(8), end=datetime.time(9), name='A')
    friday = make_lesson(school_class, subject, teacher, day=Lesson.Day.FRIDAY, name='C')

    schedule = weekly_schedule([late, friday, early])

    assert [label for label, _lessons in schedule] == ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday']
    assert schedule[0][1] == [early, late]
    assert schedule[4][1] == [friday]


# ============ Roster import ============

def roster_file(rows, headers=('Account number', 'Name', 'Surname', 'Class', 'Grade', 'Sex', 'Birthday', 'Blood type')):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(list(headers))
    for row in rows:
        ws.append(list(row))
    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer


def test_account_numbers_are_zero_padded():
    assert normalize_account_number(1234) == '001234'
    assert normalize_account_number(1234.0) == '001234'
    assert normalize_account_number(' 012345 ') == '012345'
    assert normalize_account_number(None) == ''


def test_parse_birthday_formats():
    assert parse_birthday('2012-05-20') == datetime.date(2012, 5, 20)
    assert parse_birthday('20/05/2012') == datetime.date(2012, 5, 20)
    assert parse_birthday(datetime.datetime(2012, 5, 20, 10)) == datetime.date(2012, 5, 20)
    assert parse_birthday('May 20th') is None


def test_parse_roster_reads_spanish_headers_and_reports_bad_rows():
    file = roster_file(
        [
            (1234, 'Luis', 'Diaz', '1A', 1, 'M', datetime.datetime(2012, 5, 20), 'O+'),
            ('12x', 'Bad', 'Row', '1A', 1, 'F', '2012-01-01', 'A+'),
            (2345, 'Sin', 'Fecha', '1A', 1, 'Femenino', 'never', 'A+'),
            (None, None, None, None, None, None, None, None),
        ],
        headers=('Número de cuenta', 'Nombre', 'Apellido', 'Grupo', 'Grado', 'Sexo', 'Fecha de nacimiento', 'Tipo de sangre'),
    )

    rows, problems = parse_roster_excel(file)

    assert rows == [{
        'row': 2,
        'username': '001234',
        'name': 'Luis',
        'surname': 'Diaz',
        'class': '1A',
        'grade': 1,
        'sex': 'MALE',
        'birthday': datetime.date(2012, 5, 20),
        'blood_type': 'O+',
        'address': '',
    }]
    assert problems == [
        'Row 3: invalid account number "12x".',
        'Row 4: sex or birthday could not be read.',
    ]


def test_parse_roster_requires_columns():
    with pytest.raises(ValueError, match='Missing required columns'):
        parse_roster_excel(roster_file([], headers=('Name', 'Surname')))


def test_parse_roster_rejects_non_workbooks():
    with pytest.raises(ValueError, match='Error reading Excel file'):
        parse_roster_excel(io.BytesIO(b'not a workbook'))


def roster_row(row, username, class_name='1A', grade=None, name='Luis', surname='Diaz', blood_type='O+'):
    return {
        'row': row, 'username': username, 'name': name, 'surname': surname,
        'class': class_name, 'grade': grade, 'sex': 'MALE',
        'birthday': datetime.date(2012, 5, 20), 'blood_type': blood_type,
    }


def test_import_roster_creates_updates_and_skips(school_class, student):
    report = import_roster([
        roster_row(2, student.username, name='Luisito'),
        roster_row(3, '200050', class_name='1a', grade=2),
        roster_row(4, '200051', class_name='9Z'),
        roster_row(5, '200052'),
    ])

    assert (report['created'], report['updated'], report['skipped']) == (1, 1, 2)
    assert report['errors'] == ['Row 4: unknown class "9Z".', 'Row 5: class 1A is full.']

    student.refresh_from_db()
    assert student.name == 'Luisito'
    created = Student.objects.get(username='200050')
    assert created.grade == Grade.objects.get(level=2)
    assert created.user.username == 'student_200050'
    assert created.user.check_password('Student2024')


def test_import_roster_can_leave_existing_students(school_class, student):
    report = import_roster([roster_row(2, student.username, name='Changed')], update_existing=False)
    assert report['skipped'] == 1
    student.refresh_from_db()
    assert student.name == 'Luis'


def test_import_roster_reports_login_conflicts(other_class):
    User.objects.create_user(username='student_200060', password=PASSWORD, role=User.ROLE_STUDENT)

    report = import_roster([roster_row(2, '200060', class_name='1B')])

    assert report['skipped'] == 1
    assert report['errors'] == ['Row 2: That username is taken.']
    assert not Student.objects.filter(username='200060').exists()


def test_import_roster_skips_rows_that_fail_validation(other_class):
    report = import_roster([
        roster_row(2, '200070', class_name='1B', name='', surname=''),
        roster_row(3, '200071', class_name='1B', blood_type='AB+/Rh'),
    ])

    assert (report['created'], report['skipped']) == (0, 2)
    assert report['errors'] == [
        'Row 2: name: This field cannot be blank.; surname: This field cannot be blank.',
        'Row 3: blood_type: Ensure this value has at most 5 characters (it has 6).',
    ]
    assert not Student.objects.filter(username__in=['200070', '200071']).exists()
    assert not User.objects.filter(username__in=['student_200070', 'student_200071']).exists()


def test_import_roster_keeps_address_when_column_missing(school_class, student):
    import_roster([roster_row(2, student.username, name='Luisito')])
    student.refresh_from_db()
    assert student.address == 'Main St 2'
