import os

from dotenv import load_dotenv

load_dotenv()

# An empty DATABASE_URL keeps the service in fallback (in-memory) mode
DATABASE_URL = os.getenv("DATABASE_URL", "mongodb://localhost:27017/toolshub")
DB_CONNECT_TIMEOUT = float(os.getenv("DB_CONNECT_TIMEOUT", "5"))

JWT_SECRET = os.getenv("JWT_SECRET", "toolshub-development-secret-change-me")
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_DAYS = int(os.getenv("JWT_EXPIRES_DAYS", "7"))

BASE_URL = os.getenv("BASE_URL")
# IANA zone for analytics day and month boundaries; empty means the server zone
TIMEZONE = os.getenv("TIMEZONE", "")
ENVIRONMENT = os.getenv("ENVIRONMENT", "production")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", "3000"))

HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))
MAX_REDIRECTS = int(os.getenv("MAX_REDIRECTS", "5"))

SHORT_CODE_LENGTH = 6
MAX_CODE_ATTEMPTS = 10
