import os

from dotenv import load_dotenv

load_dotenv()

DB_USER = os.getenv("DB_USER", "postgres")
DB_PASS = os.getenv("DB_PASS", "postgres")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "shortlinks")

# A full URL (e.g. sqlite+aiosqlite:///./dev.db) takes precedence over the parts
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
CREATE_TABLES = os.getenv("CREATE_TABLES", "0").lower() in ("1", "true", "yes")

BASE_URL = os.getenv("BASE_URL", "http://localhost:8000")
CODE_LENGTH = int(os.getenv("CODE_LENGTH", "6"))
CODE_MAX_ATTEMPTS = int(os.getenv("CODE_MAX_ATTEMPTS", "8"))
LIST_LIMIT = int(os.getenv("LIST_LIMIT", "100"))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")
