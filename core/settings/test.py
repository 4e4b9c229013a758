from .base import BASE_DIR, REST_FRAMEWORK, SQLITE_OPTIONS
from .base import *  # noqa: F403

# Keep tests self-contained without external services.
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_TASK_STORE_EAGER_RESULT = False
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

# A file database lets threaded tests open real concurrent connections.
TEST_DATABASE_PATH = str(BASE_DIR / "test_db.sqlite3")
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": TEST_DATABASE_PATH,
        "OPTIONS": dict(SQLITE_OPTIONS),
        "TEST": {"NAME": TEST_DATABASE_PATH},
    }
}

PUSH_BACKEND = "log"
RATELIMIT_ENABLE = False

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = ()
