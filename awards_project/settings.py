# awards_project/settings.py

import os
from decimal import Decimal
from pathlib import Path
from dotenv import load_dotenv
from datetime import timedelta

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# Load environment variables from a .env file
load_dotenv(os.path.join(BASE_DIR, '.env'))


# --- SECURITY SETTINGS ---
# The SECRET_KEY is read from an environment variable
SECRET_KEY = os.environ.get('SECRET_KEY', 'django-insecure-local-development-key')

# Smart DEBUG setting: Defaults to False (production) unless DEV_MODE=True in .env
DEBUG = os.environ.get('DEV_MODE') == 'True'

if DEBUG:
    ALLOWED_HOSTS = ['127.0.0.1', 'localhost', 'testserver']
    APP_SITE_URL = 'http://127.0.0.1:8000'
    CSRF_TRUSTED_ORIGINS = []
else:
    ALLOWED_HOSTS = os.environ.get('ALLOWED_HOSTS', 'localhost,testserver').split(',')
    APP_SITE_URL = os.environ.get('APP_SITE_URL', 'https://awards.example.com')
    CSRF_TRUSTED_ORIGINS = [APP_SITE_URL]


# --- APPLICATION DEFINITION ---
INSTALLED_APPS = [
    'awards_project.apps.AwardsAdminConfig',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'accounts',
    'awards',
    'organisations',
    'entries',
    'voting',
    'core',
    'rest_framework',
    'rest_framework_simplejwt',
    'corsheaders',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'corsheaders.middleware.CorsMiddleware',  # must be high up
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'awards_project.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'awards_project.wsgi.application'


# --- DATABASE ---
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}


# --- PASSWORD VALIDATION ---
AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]


# --- INTERNATIONALIZATION & TIMEZONE ---
LANGUAGE_CODE = 'en-gb'
TIME_ZONE = 'Europe/London'
USE_I18N = True
USE_TZ = True


# --- STATIC FILES ---
STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles_collected'


# --- AUTHENTICATION ---
AUTHENTICATION_BACKENDS = [
    'accounts.backends.AdminEmailBackend',
]
LOGIN_URL = '/admin/login/'

# Admin sessions end after 30 minutes without a request.
ADMIN_INACTIVITY_TIMEOUT = 30 * 60
SESSION_COOKIE_AGE = ADMIN_INACTIVITY_TIMEOUT
SESSION_SAVE_EVERY_REQUEST = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

#// REST FRAMEWORK & SIMPLE JWT
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework.authentication.SessionAuthentication',
        'rest_framework_simplejwt.authentication.JWTAuthentication',
    )
}

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=15),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=1),
    "ROTATE_REFRESH_TOKENS": False,
    "UPDATE_LAST_LOGIN": True,

    "ALGORITHM": "HS256",
    "SIGNING_KEY": SECRET_KEY,

    "AUTH_HEADER_TYPES": ("Bearer",),
    "USER_ID_FIELD": "id",
    "USER_ID_CLAIM": "user_id",
}


# --- EMAIL CONFIGURATION ---
EMAIL_BACKEND = os.environ.get('EMAIL_BACKEND', 'django.core.mail.backends.smtp.EmailBackend')
EMAIL_HOST = os.environ.get('EMAIL_HOST', 'localhost')
EMAIL_PORT = int(os.environ.get('EMAIL_PORT', 587))
EMAIL_USE_TLS = True
EMAIL_HOST_USER = os.environ.get('EMAIL_HOST_USER', '')
EMAIL_HOST_PASSWORD = os.environ.get('EMAIL_HOST_PASSWORD', '')
DEFAULT_FROM_EMAIL = os.environ.get('DEFAULT_FROM_EMAIL', 'awards@example.com')


# --- LOGGING ---
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '[{asctime}] {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        name: {'handlers': ['console'], 'level': os.environ.get('LOG_LEVEL', 'INFO')}
        for name in ('accounts', 'awards', 'organisations', 'entries', 'voting', 'core')
    },
}


# --- CUSTOM APP SETTINGS ---
SITE_NAME = 'British Trade Awards'

# Admin tables are read in fixed-size pages.
LISTING_PAGE_SIZE = 1000

# Entry fees (GBP). Stripe charges 2.9% + 30p per card payment.
PAYMENT_CURRENCY = 'gbp'
DEFAULT_ENTRY_FEE = Decimal('195.00')
PROCESSING_FEE_RATE = Decimal('0.029')
PROCESSING_FEE_FIXED = Decimal('0.30')

# --- STRIPE ---
STRIPE_SECRET_KEY = os.environ.get('STRIPE_SECRET_KEY', '')
STRIPE_WEBHOOK_SECRET = os.environ.get('STRIPE_WEBHOOK_SECRET', '')
STRIPE_API_BASE = os.environ.get('STRIPE_API_BASE', 'https://api.stripe.com/v1')
STRIPE_TIMEOUT = 20
STRIPE_WEBHOOK_TOLERANCE = 300
STRIPE_PRODUCT_NAME = 'British Trade Awards Entry Fee'

# --- PUBLIC VOTING ---
VOTE_VERIFICATION_MAX_AGE_DAYS = 7
# When True a vote only counts towards Entry.public_votes once its email is verified.
VOTING_COUNT_VERIFIED_ONLY = os.environ.get('VOTING_COUNT_VERIFIED_ONLY') == 'True'


# --- CORS SETTINGS ---
CORS_ALLOWED_ORIGINS = [
    origin for origin in os.environ.get('CORS_ALLOWED_ORIGINS', 'http://localhost:3000').split(',') if origin
]
