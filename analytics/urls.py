from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Exports
    path('export/results/excel/', views.export_results_excel_view, name='export_results_excel'),
    path('export/student/pdf/<int:student_id>/', views.export_student_pdf_view, name='export_student_pdf'),
]
