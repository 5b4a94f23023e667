from __future__ import annotations

import argparse

from customer_management.db.base import Base
from customer_management.db.session import engine

# Import models to register with SQLAlchemy
import customer_management.models  # noqa: F401


def main() -> int:
    parser = argparse.ArgumentParser(description="Create the customer management tables")
    parser.add_argument("--drop", action="store_true", help="Drop existing tables first (destroys data)")
    args = parser.parse_args()

    if args.drop:
        Base.metadata.drop_all(bind=engine)

    # Create tables
    Base.metadata.create_all(bind=engine)

    print("DB initialized")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
