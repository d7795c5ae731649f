import os

from config import attendance_settings

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

# Tests never need a database server.
ATTENDANCE_STORE = os.getenv("ATTENDANCE_STORE", "memory")

AUTO_INIT_DB = False

ATTENDANCE = attendance_settings()
