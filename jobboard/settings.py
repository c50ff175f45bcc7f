"""
Django settings for jobboard project.
"""

from pathlib import Path
import os

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent


# -------------------------
# Basic / environment
# -------------------------
SECRET_KEY = os.environ.get('JOBBOARD_SECRET_KEY', 'django-insecure-dev-secret-for-local')

DEBUG = os.environ.get('JOBBOARD_DEBUG', 'True').lower() in ('1', 'true', 'yes')

ALLOWED_HOSTS = (
    os.environ.get('JOBBOARD_ALLOWED_HOSTS', '')
    .split(',') if os.environ.get('JOBBOARD_ALLOWED_HOSTS') else []
)

APP_NAME = os.environ.get('JOBBOARD_APP_NAME', 'Jobboard')

# absolute base for links sent by email (verification, password reset)
APP_URL = os.environ.get('JOBBOARD_APP_URL', 'http://localhost:8000').rstrip('/')


# -------------------------
# Installed apps / middleware
# -------------------------
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # project apps
    'accounts',
    'companies',
    'jobs',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'jobboard.middleware.SetLocaleMiddleware',
    'jobboard.middleware.InertiaMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'accounts.middleware.GuardMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'jobboard.urls'


# -------------------------
# Templates
# -------------------------
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [os.path.join(BASE_DIR, 'templates')],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.template.context_processors.static',
                'django.template.context_processors.csrf',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]


WSGI_APPLICATION = 'jobboard.wsgi.application'


# -------------------------
# Database (sqlite for dev)
# -------------------------
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('JOBBOARD_DB_NAME', BASE_DIR / 'db.sqlite3'),
    }
}


# -------------------------
# Cache (login throttling, rate limits)
# -------------------------
CACHES = {
    'default': {
        'BACKEND': os.environ.get('JOBBOARD_CACHE_BACKEND', 'django.core.cache.backends.locmem.LocMemCache'),
        'LOCATION': os.environ.get('JOBBOARD_CACHE_LOCATION', 'jobboard'),
    }
}


# -------------------------
# Password validation
# -------------------------
AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]


# -------------------------
# Internationalization
# -------------------------
LANGUAGE_CODE = 'en'
LANGUAGES = [
    ('en', 'English'),
    ('de', 'Deutsch'),
]
TIME_ZONE = os.environ.get('JOBBOARD_TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True


# -------------------------
# Static & media
# -------------------------
STATIC_URL = '/static/'
STATIC_ROOT = os.environ.get('JOBBOARD_STATIC_ROOT', os.path.join(BASE_DIR, 'staticfiles'))

MEDIA_URL = '/media/'
MEDIA_ROOT = os.environ.get('JOBBOARD_MEDIA_ROOT', os.path.join(BASE_DIR, 'media'))

# "public" holds branding images served straight from MEDIA_URL
STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'public': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}


# -------------------------
# Auth
# -------------------------
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Companies and applicants each get their own session guard; auth.User stays for the admin.
AUTH_GUARDS = {
    'company': {
        'model': 'accounts.Company',
        'home': 'companies:dashboard',
        'login': 'accounts:company_login',
        'verification_notice': 'accounts:company_verification_notice',
        'onboarding': 'companies:details',
    },
    'applicant': {
        'model': 'accounts.Applicant',
        'home': 'jobs:applicant_dashboard',
        'login': 'accounts:applicant_login',
        'verification_notice': 'accounts:applicant_verification_notice',
        'onboarding': 'jobs:applicant_dashboard',
    },
}

AUTH_PASSWORD_BROKERS = {
    'companies': {'guard': 'company', 'throttle': 60},
    'applicants': {'guard': 'applicant', 'throttle': 60},
}

REMEMBER_COOKIE_AGE = 60 * 60 * 24 * 365 * 5
EMAIL_VERIFICATION_EXPIRE_MINUTES = int(os.environ.get('JOBBOARD_VERIFICATION_EXPIRE', 60))
PASSWORD_RESET_TIMEOUT = int(os.environ.get('JOBBOARD_PASSWORD_RESET_TIMEOUT', 60 * 60))
LOGIN_MAX_ATTEMPTS = 5
LOGIN_DECAY_SECONDS = 60

# the SPA client reads XSRF-TOKEN and echoes it back in X-XSRF-TOKEN
CSRF_COOKIE_NAME = 'XSRF-TOKEN'
CSRF_HEADER_NAME = 'HTTP_X_XSRF_TOKEN'


# -------------------------
# Page bridge
# -------------------------
ASSET_VERSION = os.environ.get('JOBBOARD_ASSET_VERSION', '')


# -------------------------
# Email configuration
# -------------------------
# Default: console backend in development (prints emails to terminal)
EMAIL_BACKEND = os.environ.get('JOBBOARD_EMAIL_BACKEND', 'django.core.mail.backends.console.EmailBackend')
DEFAULT_FROM_EMAIL = os.environ.get('JOBBOARD_DEFAULT_FROM_EMAIL', 'Jobboard <no-reply@jobboard.local>')

# Allow shorthand JOBBOARD_EMAIL_BACKEND='smtp' for convenience
if EMAIL_BACKEND.lower() in ('smtp', 'django.core.mail.backends.smtp.emailbackend'):
    EMAIL_BACKEND = 'django.core.mail.backends.smtp.EmailBackend'
    EMAIL_HOST = os.environ.get('JOBBOARD_EMAIL_HOST', 'localhost')
    EMAIL_PORT = int(os.environ.get('JOBBOARD_EMAIL_PORT', 587))
    EMAIL_USE_TLS = os.environ.get('JOBBOARD_EMAIL_USE_TLS', 'True').lower() in ('1', 'true', 'yes')
    EMAIL_HOST_USER = os.environ.get('JOBBOARD_EMAIL_HOST_USER', '')
    EMAIL_HOST_PASSWORD = os.environ.get('JOBBOARD_EMAIL_HOST_PASSWORD', '')


# -------------------------
# Logging (basic)
# -------------------------
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {'format': '%(asctime)s %(levelname)s %(name)s: %(message)s'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'simple'},
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO' if DEBUG else 'WARNING',
            'propagate': False,
        },
    },
}


# -------------------------
# Security (production suggestions)
# -------------------------
# In production, you should set these via environment variables:
# SECURE_HSTS_SECONDS = 31536000
# SECURE_SSL_REDIRECT = True
# SESSION_COOKIE_SECURE = True
# CSRF_COOKIE_SECURE = True
