import os

# ─────────────────────────────────────────────────────────────────────
#  Database
# ─────────────────────────────────────────────────────────────────────
DB_ENGINE = os.environ.get("DB_ENGINE", "sqlite")

DB_HOST = os.environ.get("DB_HOST", "localhost")
DB_PORT = os.environ.get("DB_PORT", "3306")
DB_USER = os.environ.get("DB_USER", "category_api")
DB_PASS = os.environ.get("DB_PASSWORD", "category_api")
DB_NAME = os.environ.get("DB_NAME", "category_api")

SQLITE_PATH = os.environ.get("SQLITE_PATH", "./categories.db")

# ─────────────────────────────────────────────────────────────────────
#  Uploads
#     Every category image is stored as one file per width,
#     e.g. uploads/150_3f9a0c1d2b4e5f60.jpg
# ─────────────────────────────────────────────────────────────────────
UPLOAD_DIR = os.environ.get("UPLOAD_DIR", "uploads")
IMAGE_SIZES: tuple[int, ...] = (50, 150, 300, 600, 1200)

# ─────────────────────────────────────────────────────────────────────
#  Misc
# ─────────────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]
