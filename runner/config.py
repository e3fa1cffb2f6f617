import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

TELEGRAM_TOKEN = os.getenv("TELEGRAM_TOKEN")
if not TELEGRAM_TOKEN:
    raise RuntimeError("TELEGRAM_TOKEN not found in .env")

DATA_DIR = Path(os.getenv("GALLERY_DATA_DIR", "./data"))
PAGE_SIZE = int(os.getenv("GALLERY_PAGE_SIZE", "10"))
LOG_LEVEL = os.getenv("GALLERY_LOG_LEVEL", "INFO").upper()
