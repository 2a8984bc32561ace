from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

STORAGE_BACKEND = "memory"
AUTO_INIT_DB = False

ADMIN_EMAIL = "admin@nitw.ac.in"
ADMIN_PASSWORD = "admin@123"
ALLOWED_EMAIL_DOMAIN = "nitw.ac.in"
MEAL_WINDOWS = ""
