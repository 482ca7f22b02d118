from django.urls import path
from . import views

app_name = 'attendance'

urlpatterns = [
    path('', views.attendance_list_view, name='list'),
    path('take/', views.take_attendance_view, name='take'),
]
