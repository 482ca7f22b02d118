"""
URL configuration for campusboard project.
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

urlpatterns = [
    path('admin/', admin.site.urls),
    path('i18n/', include('django.conf.urls.i18n')),
    path('', include('accounts.urls', namespace='accounts')),
    path('', include('dashboard.urls', namespace='dashboard')),
    path('list/', include('schools.urls', namespace='schools')),
    path('list/', include('exams.urls', namespace='exams')),
    path('list/attendance/', include('attendance.urls', namespace='attendance')),
    path('list/', include('notices.urls', namespace='notices')),
    path('analytics/', include('analytics.urls', namespace='analytics')),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
