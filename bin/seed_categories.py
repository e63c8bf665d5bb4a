# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates the default category tree on an empty database.

    python bin/seed_categories.py
"""

from rauta.database import SessionLocal
from rauta.seed import seed_categories


def main():
    db = SessionLocal()
    try:
        created = seed_categories(db)
        print(f"[seed_categories] {created} categories created.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
