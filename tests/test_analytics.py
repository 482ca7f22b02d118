import datetime
import io

import openpyxl
import pytest

from analytics.utils import count_students_by_sex, student_performance, weekly_attendance
from attendance.models import Attendance
from exams.models import Assignment, Exam, Result
from schools.models import Student
from .factories import aware, make_student

pytestmark = pytest.mark.django_db


@pytest.fixture
def graded(lesson, student):
    exam = Exam.objects.create(title='Quiz', start_time=aware(2024, 3, 4, 8), end_time=aware(2024, 3, 4, 9), lesson=lesson)
    assignment = Assignment.objects.create(
        title='Essay', start_date=aware(2024, 3, 1), due_date=aware(2024, 3, 8), lesson=lesson,
    )
    Result.objects.create(score=90, student=student, exam=exam)
    Result.objects.create(score=45, student=student, assignment=assignment)
    return student


def test_sex_split_without_students(db):
    assert count_students_by_sex() == {'boys': 0, 'girls': 0, 'boys_pct': 0, 'girls_pct': 0}


def test_sex_split_percentages(student, other_class):
    make_student(other_class, username='200002', name='Ana', sex=Student.SEX_FEMALE)
    make_student(other_class, username='200003', name='Eva', sex=Student.SEX_FEMALE)
    assert count_students_by_sex() == {'boys': 1, 'girls': 2, 'boys_pct': 33, 'girls_pct': 67}


def test_weekly_attendance_covers_monday_to_friday(lesson, student):
    wednesday = datetime.date(2024, 3, 6)
    Attendance.objects.create(date=datetime.date(2024, 3, 4), present=True, student=student, lesson=lesson)
    Attendance.objects.create(date=datetime.date(2024, 3, 5), present=False, student=student, lesson=lesson)
    # previous week is ignored
    Attendance.objects.create(date=datetime.date(2024, 2, 28), present=True, student=student, lesson=lesson)

    week = weekly_attendance(wednesday)

    assert [d['date'] for d in week] == [datetime.date(2024, 3, day) for day in range(4, 9)]
    assert [(d['present'], d['absent']) for d in week] == [(1, 0), (0, 1), (0, 0), (0, 0), (0, 0)]
    assert [str(d['day']) for d in week] == ['Mon', 'Tue', 'Wed', 'Thu', 'Fri']


def test_student_performance(graded):
    assert student_performance(graded) == {'total': 2, 'average': 67.5, 'passed': 1, 'pass_rate': 50.0}


def test_student_performance_without_results(student):
    assert student_performance(student) == {'total': 0, 'average': None, 'passed': 0, 'pass_rate': 0}


def test_results_excel_export_respects_filters(client, admin_user, graded):
    client.force_login(admin_user)

    response = client.get('/analytics/export/results/excel/', {'type': 'exam'})

    assert response.status_code == 200
    assert response['Content-Type'] == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    ws = openpyxl.load_workbook(io.BytesIO(response.content)).active
    rows = list(ws.iter_rows(min_row=5, values_only=True))
    assert rows == [('Luis Diaz', '200001', 'Exam', 'Quiz', 90, 'Passed')]


def test_student_pdf_report(client, graded):
    client.force_login(graded.parent.user)
    response = client.get(f'/analytics/export/student/pdf/{graded.pk}/')
    assert response.status_code == 200
    assert response['Content-Type'] == 'application/pdf'
    assert response.content.startswith(b'%PDF')


def test_student_pdf_report_hidden_from_other_families(client, graded, other_class):
    stranger = make_student(other_class, username='200009', name='Mia')
    client.force_login(stranger.user)
    response = client.get(f'/analytics/export/student/pdf/{graded.pk}/')
    assert response.status_code == 404
