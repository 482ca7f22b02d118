from django.urls import path
from . import views

app_name = 'schools'

urlpatterns = [
    # People
    path('teachers/', views.teacher_list_view, name='teachers'),
    path('teachers/<int:pk>/', views.teacher_detail_view, name='teacher_detail'),
    path('students/', views.student_list_view, name='students'),
    path('students/import/', views.roster_upload_view, name='roster_upload'),
    path('students/<int:pk>/', views.student_detail_view, name='student_detail'),
    path('parents/', views.parent_list_view, name='parents'),

    # Structure
    path('subjects/', views.subject_list_view, name='subjects'),
    path('classes/', views.class_list_view, name='classes'),
    path('lessons/', views.lesson_list_view, name='lessons'),
]
