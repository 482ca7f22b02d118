from django.contrib.auth.decorators import login_required
from django.shortcuts import get_object_or_404

from accounts.decorators import role_required
from dashboard.listing import ListState
from exams.models import Result
from exams.views import RESULT_LIST
from schools.models import Student
from .utils import ReportGenerator


@login_required
def export_results_excel_view(request):
    """Download the results list, with the same filters as the page, as Excel."""
    results = Result.objects.visible_to(request.user).select_related(
        'student', 'exam', 'assignment'
    )
    state = ListState.from_request(request, RESULT_LIST)
    return ReportGenerator.generate_results_excel(RESULT_LIST.apply(results, state))


@login_required
@role_required(['admin', 'teacher', 'student', 'parent'])
def export_student_pdf_view(request, student_id):
    """Report card PDF for a student the user can see."""
    student = get_object_or_404(
        Student.objects.visible_to(request.user).select_related('school_class'),
        pk=student_id
    )
    return ReportGenerator.generate_student_pdf_report(student)

