import os
from pathlib import Path
from rnseanomaly.config.loader import load_app_config

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# --- Configuration Loading ---
CONFIG_FILE = os.environ.get('RNSE_CONFIG_FILE', 'config.yaml')
config_path = BASE_DIR / CONFIG_FILE

if not config_path.exists():
    print(f"Warning: Config file {config_path} not found. Using defaults.")

# Crash early if config is invalid to avoid weird states
app_config = load_app_config(config_path)

# --- Django Settings ---
DEBUG = app_config.django.debug
SECRET_KEY = app_config.django.secret_key
ALLOWED_HOSTS = app_config.django.allowed_hosts

# Application definition
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'corsheaders',
    'rest_framework',
    'rest_framework.authtoken',
    'drf_spectacular',
    'rnseanomaly.accounts',
    'rnseanomaly.analyses',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'rnseanomaly.config.urls'

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

WSGI_APPLICATION = 'rnseanomaly.config.wsgi.application'
ASGI_APPLICATION = 'rnseanomaly.config.asgi.application'

# Database Setup
DB_TYPE = app_config.django.database_type

if DB_TYPE == 'sqlite':
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': app_config.django.database_name,
            'HOST': app_config.django.database_host,
            'PORT': app_config.django.database_port,
            'USER': app_config.django.database_user,
            'PASSWORD': app_config.django.database_password,
        }
    }
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

USE_TZ = True
TIME_ZONE = 'UTC'

# --- REST Framework ---
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rnseanomaly.accounts.authentication.BearerTokenAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
}

# --- CORS (the dashboard is served from a separate origin) ---
CORS_ALLOWED_ORIGINS = app_config.django.cors_allowed_origins
CORS_URLS_REGEX = r'^/api/.*$'

SPECTACULAR_SETTINGS = {
    'TITLE': 'RNSE Anomaly API',
    'VERSION': '0.1.0',
}

# --- Custom RNSE Settings ---
REDIS_URL = app_config.redis.url
DATABASE_TYPE = DB_TYPE
SCORER = app_config.scorer.model_dump()
ANALYSIS = app_config.analysis.model_dump()
RESULT_STORE = app_config.store.model_dump()

CELERY_BROKER_URL = REDIS_URL
CELERY_RESULT_BACKEND = REDIS_URL
CELERY_TIMEZONE = "UTC"

# Static files configuration
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
}
