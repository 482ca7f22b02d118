from django.urls import path
from . import views

app_name = 'exams'

urlpatterns = [
    path('exams/', views.exam_list_view, name='exams'),
    path('assignments/', views.assignment_list_view, name='assignments'),
    path('results/', views.result_list_view, name='results'),
]
