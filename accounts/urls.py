from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # Authentication
    path('sign-in/', views.login_view, name='login'),
    path('logout/', views.logout_view, name='logout'),

    # Profile Management
    path('profile/', views.profile_view, name='profile'),
    path('password/change/', views.password_change_view, name='password_change'),

    # Admin
    path('users/<int:pk>/reset-password/', views.admin_reset_password_view, name='admin_reset_password'),
]
