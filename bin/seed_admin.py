# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates the first admin user.

Run once after the initial migration:
    python bin/seed_admin.py

The script reads FIRST_ADMIN_EMAIL, FIRST_ADMIN_PASSWORD and
FIRST_ADMIN_NAME from etc/app.conf.  After the row is inserted those values
are no longer used by the application.
"""

from rauta.database import SessionLocal
from rauta.seed import seed_admin


def main():
    db = SessionLocal()
    try:
        admin = seed_admin(db)
        if admin is None:
            print("[seed_admin] nothing to do.")
        else:
            print(f"[seed_admin] Admin '{admin.email}' created successfully.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
