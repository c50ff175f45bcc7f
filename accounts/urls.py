# accounts/urls.py
from django.urls import path
from . import views

app_name = 'accounts'


def guard_patterns(guard):
    """Login, password reset and verification routes for one guard, mounted at /<guard>/."""
    kwargs = {'guard': guard}
    return [
        path(f'{guard}/login/', views.login, kwargs, name=f'{guard}_login'),
        path(f'{guard}/logout/', views.logout, kwargs, name=f'{guard}_logout'),

        path(f'{guard}/forgot-password/', views.forgot_password, kwargs, name=f'{guard}_password_request'),
        path(f'{guard}/reset-password/', views.reset_password_store, kwargs, name=f'{guard}_password_store'),
        path(f'{guard}/reset-password/<str:token>/', views.reset_password_form, kwargs, name=f'{guard}_password_reset'),

        path(f'{guard}/verify-email/', views.verification_notice, kwargs, name=f'{guard}_verification_notice'),
        path(f'{guard}/verify-email/<int:pk>/<str:hash>/', views.verify_email, kwargs, name=f'{guard}_verification_verify'),
        path(f'{guard}/email/verification-notification/', views.resend_verification, kwargs, name=f'{guard}_verification_send'),
    ]


urlpatterns = [
    path('company/register/', views.register_company, name='company_register'),
    path('applicant/register/', views.register_applicant, name='applicant_register'),
    *guard_patterns('company'),
    *guard_patterns('applicant'),
]
