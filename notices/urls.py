from django.urls import path
from . import views

app_name = 'notices'

urlpatterns = [
    path('events/', views.event_list_view, name='events'),
    path('announcements/', views.announcement_list_view, name='announcements'),
]
