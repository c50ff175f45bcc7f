# jobboard/urls.py
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from jobs import views as jobs_views

urlpatterns = [
    path('admin/', admin.site.urls),

    # Home
    path('', jobs_views.welcome, name='home'),

    # Auth for both guards (register/login/password reset/verification)
    path('', include('accounts.urls')),

    # Company area
    path('company/', include('companies.urls')),

    # Job listings (company management, public pages, applicants)
    path('', include('jobs.urls')),
]

# Serve media in development (only when DEBUG=True)
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
