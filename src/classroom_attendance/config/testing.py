import os

SECRET_KEY = "test-secret"

JWT_SECRET = "test-jwt-secret"
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_DAYS = 7

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "classroom_attendance_test"),
}

PORT = 3000
DEFAULT_LESSON_DURATION = 90

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
