import datetime
import io

from django.conf import settings
from django.db.models import Avg, Count, Q
from django.http import HttpResponse
from django.utils import timezone
from django.utils.translation import gettext as _
from openpyxl.utils import get_column_letter

from attendance.models import Attendance
from exams.models import Result
from schools.models import Person, Student


def count_students_by_sex():
    """Boys/girls totals with rounded percentages; both 0 when there are no students."""
    counts = Student.objects.aggregate(
        boys=Count('id', filter=Q(sex=Person.SEX_MALE)),
        girls=Count('id', filter=Q(sex=Person.SEX_FEMALE)),
    )
    boys, girls = counts['boys'] or 0, counts['girls'] or 0
    total = boys + girls
    return {
        'boys': boys,
        'girls': girls,
        'boys_pct': round(boys * 100 / total) if total else 0,
        'girls_pct': round(girls * 100 / total) if total else 0,
    }


def weekly_attendance(today):
    """
    Present/absent counts for Monday to Friday of the week containing ``today``.
    """
    monday = today - datetime.timedelta(days=today.weekday())
    friday = monday + datetime.timedelta(days=4)

    rows = Attendance.objects.filter(date__range=(monday, friday)).values('date').annotate(
        present=Count('id', filter=Q(present=True)),
        absent=Count('id', filter=Q(present=False)),
    )
    by_date = {row['date']: row for row in rows}

    labels = [_('Mon'), _('Tue'), _('Wed'), _('Thu'), _('Fri')]
    week = []
    for offset, label in enumerate(labels):
        day = monday + datetime.timedelta(days=offset)
        row = by_date.get(day, {})
        week.append({
            'day': label,
            'date': day,
            'present': row.get('present', 0),
            'absent': row.get('absent', 0),
        })
    return week


def student_performance(student):
    """Average score and pass rate over all of a student's results."""
    pass_mark = settings.CAMPUSBOARD['PASS_MARK']
    stats = Result.objects.filter(student=student).aggregate(
        total=Count('id'),
        average=Avg('score'),
        passed=Count('id', filter=Q(score__gte=pass_mark)),
    )
    total = stats['total'] or 0
    return {
        'total': total,
        'average': round(stats['average'], 1) if stats['average'] is not None else None,
        'passed': stats['passed'] or 0,
        'pass_rate': round(stats['passed'] * 100 / total, 1) if total else 0,
    }


def _autosize(ws):
    for col in ws.columns:
        column = get_column_letter(col[0].column)
        max_length = max((len(str(cell.value)) for cell in col if cell.value is not None), default=0)
        ws.column_dimensions[column].width = max_length + 2


class ReportGenerator:
    """Helper for generating downloadable reports."""

    @staticmethod
    def generate_results_excel(results):
        """Excel sheet of the given (already scoped) results."""
        import openpyxl
        from openpyxl.styles import Font, PatternFill

        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = str(_('Results'))

        ws['A1'] = _('Results Report')
        ws['A1'].font = Font(size=14, bold=True)
        ws.merge_cells('A1:F1')
        ws['A2'] = _('Generated at:')
        ws['B2'] = timezone.now().strftime('%Y-%m-%d %H:%M')

        headers = [_('Student'), _('Account number'), _('Type'), _('Title'), _('Score'), _('Status')]
        header_row = 4
        for col, h in enumerate(headers, 1):
            cell = ws.cell(row=header_row, column=col, value=str(h))
            cell.font = Font(bold=True)

        fail_fill = PatternFill(start_color='FFF2CC', end_color='FFF2CC', fill_type='solid')
        row = header_row + 1
        for result in results:
            ws.cell(row=row, column=1, value=result.student.full_name)
            ws.cell(row=row, column=2, value=result.student.username)
            ws.cell(row=row, column=3, value=str(result.assessment_type_label))
            ws.cell(row=row, column=4, value=result.title)
            ws.cell(row=row, column=5, value=result.score)
            status = ws.cell(row=row, column=6, value=str(_('Passed') if result.is_passing else _('Failed')))
            if not result.is_passing:
                status.fill = fail_fill
            row += 1

        _autosize(ws)

        response = HttpResponse(content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
        response['Content-Disposition'] = f'attachment; filename=results_{timezone.now().date()}.xlsx'
        wb.save(response)
        return response

    @staticmethod
    def generate_student_pdf_report(student):
        """PDF report card for one student."""
        from reportlab.lib import colors
        from reportlab.lib.pagesizes import letter
        from reportlab.lib.styles import getSampleStyleSheet
        from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=letter)
        elements = []
        styles = getSampleStyleSheet()

        elements.append(Paragraph(_('Student Report: %(name)s') % {'name': student.full_name}, styles['Title']))
        elements.append(Paragraph(_('Account number: %(number)s') % {'number': student.username}, styles['Normal']))
        elements.append(Paragraph(_('Class: %(name)s') % {'name': student.school_class.name}, styles['Normal']))
        elements.append(Paragraph(_('Date: %(date)s') % {'date': timezone.now().strftime('%Y-%m-%d')}, styles['Normal']))
        elements.append(Spacer(1, 20))

        performance = student_performance(student)
        results = (
            Result.objects.filter(student=student)
            .select_related('exam', 'assignment')
            .order_by('-id')
        )

        if performance['total']:
            average = performance['average']
            data = [
                [_('Metric'), _('Value')],
                [_('Results'), str(performance['total'])],
                [_('Passed'), str(performance['passed'])],
                [_('Average Score'), f"{average}"],
                [_('Pass Rate'), f"{performance['pass_rate']}%"],
            ]
            t = Table(data)
            t.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (1, 0), colors.grey),
                ('TEXTCOLOR', (0, 0), (1, 0), colors.whitesmoke),
                ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('BOTTOMPADDING', (0, 0), (-1, 0), 12),
                ('BACKGROUND', (0, 1), (-1, -1), colors.beige),
                ('GRID', (0, 0), (-1, -1), 1, colors.black),
            ]))
            elements.append(t)
            elements.append(Spacer(1, 20))

            elements.append(Paragraph(_('Result History'), styles['Heading2']))
            history = [[_('Title'), _('Type'), _('Score'), _('Status')]]
            for result in results[:20]:
                history.append([
                    result.title[:30],
                    str(result.assessment_type_label),
                    str(result.score),
                    _('Passed') if result.is_passing else _('Failed'),
                ])
            t2 = Table(history)
            t2.setStyle(TableStyle([
                ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
                ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
                ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
                ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
                ('GRID', (0, 0), (-1, -1), 1, colors.black),
            ]))
            elements.append(t2)
        else:
            elements.append(Paragraph(_('No results available for this student.'), styles['Normal']))

        doc.build(elements)
        buffer.seek(0)

        response = HttpResponse(buffer, content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename=student_{student.username}_{timezone.now().date()}.pdf'
        return response
