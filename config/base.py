import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "mysql" for a real database, "memory" for a throwaway in-process store.
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql").lower()

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "mess_db"),
}

# Mess administrator login (plain comparison).
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@nitw.ac.in")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin@123")

ALLOWED_EMAIL_DOMAIN = os.getenv("ALLOWED_EMAIL_DOMAIN", "nitw.ac.in")

# e.g. "breakfast=07:00-10:00,lunch=12:00-15:00,dinner=19:00-22:00"; empty keeps defaults.
MEAL_WINDOWS = os.getenv("MEAL_WINDOWS", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

# Photos arrive as data URLs in the signup JSON.
MAX_CONTENT_LENGTH = 8 * 1024 * 1024
