import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Base directory (repository root)
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

# Paths
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", str(BASE_DIR / "output")))
DATA_DIR = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'payroll.db'}")

# Application settings
DEBUG = os.getenv("DEBUG", "False").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Flask session secret, generate with secrets.token_urlsafe(16)
SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

# Upper bound on concurrent per-employee calculations in a bulk run
BULK_MAX_WORKERS = int(os.getenv("BULK_MAX_WORKERS", "4"))

# Grace periods applied when deriving a day status from raw punches
DEFAULT_CHECK_IN_GRACE_MINUTES = 15
DEFAULT_CHECK_OUT_GRACE_MINUTES = 10
