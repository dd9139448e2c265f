"""
Database schema initialization script
-------------------------------------
Creates the tables, seeds the achievement ladder and lists what exists.
"""

import sys
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")

# allow running without installing the package
sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy import func, inspect, select  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from bocado.core.logging import configure_logging  # noqa: E402
from bocado.db.init_db import init_db  # noqa: E402
from bocado.db.session import engine  # noqa: E402
from bocado.models.achievement import Achievement  # noqa: E402


def init_db_schema() -> None:
    print("🔧 Initializing database schema...")
    init_db(engine)

    print("\n📋 Tables:")
    for table_name in sorted(inspect(engine).get_table_names()):
        print(f"  - {table_name}")

    with Session(engine) as db:
        total = db.execute(select(func.count(Achievement.id))).scalar_one()
    print(f"\n🏅 Achievements defined: {total}")


if __name__ == "__main__":
    configure_logging()
    init_db_schema()
