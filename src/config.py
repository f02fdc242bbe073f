import os
from dotenv import load_dotenv

load_dotenv()

POSTGRES_USER = os.getenv("POSTGRES_USER")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD")
POSTGRES_DB = os.getenv("POSTGRES_DB_URL")

postgres_file_name = f"{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_DB}"

# DATABASE_URL wins, e.g. sqlite+aiosqlite:///./padel.db for a local run
DATABASE_URL = os.getenv("DATABASE_URL", f"postgresql+asyncpg://{postgres_file_name}")

CREATE_TABLES = os.getenv("CREATE_TABLES", "1").lower() not in ("0", "false", "no")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SHARE_BASE_URL = os.getenv("SHARE_BASE_URL", "http://localhost:3000").rstrip("/")
