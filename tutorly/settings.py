from pathlib import Path
import os

BASE_DIR = Path(__file__).resolve().parent.parent

'''Calendar variables'''
LOGIN_URL = "/admin/login/"
LOGIN_REDIRECT_URL = "/calendar/"
CALENDAR_HOUR_HEIGHT_PX = 60        # one hour row on the week/day grids
CALENDAR_MIN_EVENT_HEIGHT_PX = 20   # keeps short events clickable
CALENDAR_GUTTER_PERCENT = 1         # horizontal gap between side-by-side events
CALENDAR_MAX_RANGE_DAYS = 31        # widest range the JSON layout endpoint accepts
'''End of Calendar'''

def env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")

# Check the database in the shell just to be sure using this command
# python manage.py shell -c "from django.conf import settings; print(settings.DATABASES['default']['NAME'])"
db_file = Path(os.environ.get("TUTORLY_DB_PATH", BASE_DIR / "db.sqlite3"))

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': db_file,
    }
}

SECRET_KEY = os.environ.get("TUTORLY_SECRET_KEY", 'django-insecure-local-dev')
DEBUG = env_flag("TUTORLY_DEBUG", default=True)
ALLOWED_HOSTS = ['*']  # TEMPORARILY allows all
# For production, specify trusted hosts:
# ALLOWED_HOSTS = ['localhost', '127.0.0.1', 'tutorly.example.org']

INSTALLED_APPS = [
    "calendar_app.apps.CalendarAppConfig",
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

ROOT_URLCONF = 'tutorly.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
                'calendar_app.context_processors.calendar_ui',
            ],
        },
    },
]

WSGI_APPLICATION = 'tutorly.wsgi.application'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'Europe/Rome'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'  # Keep this simple

# In production, collect all static files here:
STATIC_ROOT = os.path.join(BASE_DIR, 'staticfiles')

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

'''Logging'''
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "[{asctime}] {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "calendar_app": {
            "handlers": ["console"],
            "level": os.environ.get("TUTORLY_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
'''End of Logging'''


''' Directory structure:
#this is the PROJECT directory tree for tutorly
tutorly/
├── manage.py
└── tutorly/
    ├── settings.py
    ├── urls.py
    ├── wsgi.py

#This is the APPLICATION directory tree for the calendar
tutorly/
└── calendar_app/
    ├── layout.py      <- overlap grouping + column layout
    ├── queries.py     <- bookings/notes -> CalendarItem
    ├── views.py
    ├── templates/
    └── tests/

'''
