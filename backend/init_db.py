"""
Create the schema on a fresh local database and stamp it as migrated.

Production databases go through `alembic upgrade head` instead.
"""

from pathlib import Path

from alembic import command
from alembic.config import Config

from questroom.config import settings
from questroom.database import engine
from questroom.models import Base

BACKEND_DIR = Path(__file__).resolve().parent


def init_db():
    url = settings.resolved_database_url
    print(f"Using DB: {url}")

    if url.startswith("sqlite:///"):
        Path(url.replace("sqlite:///", "", 1)).parent.mkdir(parents=True, exist_ok=True)

    Base.metadata.create_all(bind=engine)

    alembic_cfg = Config(str(BACKEND_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    command.stamp(alembic_cfg, "head")

    print("✔ Schema created and stamped at head")


if __name__ == "__main__":
    init_db()
