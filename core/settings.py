from pathlib import Path
import os

BASE_DIR = Path(__file__).resolve().parent.parent

'''Calendar variables'''
CALENDAR_START_HOUR = 0          # first hour row in week/day views
CALENDAR_END_HOUR = 24           # last hour row (exclusive)
CALENDAR_CELL_HEIGHT = 72        # px per hour cell
CALENDAR_EVENT_HEIGHT = 24       # px per event row in month cells
CALENDAR_EVENT_GAP = 4           # px between month rows
CALENDAR_AGENDA_DAYS = 30
CALENDAR_DEFAULT_START_HOUR = 9  # month-cell clicks start here
CALENDAR_DEFAULT_END_HOUR = 10   # ...and last until here (END - START hours)
CALENDAR_DEFAULT_VIEW = "month"
'''End of Calendar'''

'''Holiday / suggestion API variables'''
HOLIDAY_API_URL = os.environ.get("HOLIDAY_API_URL", "https://holidays-jp.github.io/api/v1/date.json")
SUGGESTION_API_URL = os.environ.get("SUGGESTION_API_URL", "https://api.openai.com/v1/chat/completions")
SUGGESTION_API_KEY = os.environ.get("SUGGESTION_API_KEY", "")
SUGGESTION_MODEL = os.environ.get("SUGGESTION_MODEL", "gpt-4o-mini")
SUGGESTION_RATE_LIMIT = 5        # requests per client...
SUGGESTION_RATE_WINDOW = 60      # ...per this many seconds
'''End of APIs'''

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get("CALENDAR_DB", BASE_DIR / "db.sqlite3"),
    }
}

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", 'django-insecure-local-dev')
DEBUG = os.environ.get("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "event-calendar-cache",
        "TIMEOUT": None,  # per-key timeouts will be used
    }
}

INSTALLED_APPS = [
    "event_calendar.apps.EventCalendarConfig",
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
]

ROOT_URLCONF = 'core.urls'

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

WSGI_APPLICATION = 'core.wsgi.application'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'America/New_York'
USE_I18N = True
USE_TZ = False  # events are stored as local wall-clock times

STATIC_URL = '/static/'
STATIC_ROOT = os.path.join(BASE_DIR, 'staticfiles')

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "[{levelname}] {name}: {message}", "style": "{"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "event_calendar": {
            "handlers": ["console"],
            "level": os.environ.get("CALENDAR_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}
