from django.urls import path
from . import views, dispatch

app_name = 'dashboard'

urlpatterns = [
    path('', views.home_view, name='home'),

    # Generic create/update/delete
    path('forms/<slug:table>/create/', dispatch.form_view, {'action': 'create'}, name='create'),
    path('forms/<slug:table>/<int:pk>/<slug:action>/', dispatch.form_view, name='form'),
]
