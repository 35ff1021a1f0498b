#!/usr/bin/env python3
"""
Initialize the database with sample data
"""
import argparse
import logging
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from app.core.logging import setup_logging
from app.db.base import Base, SessionLocal, engine
from app.db.sample_data import seed_sample_data

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Create tables and load demo data")
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument(
        "--reset", action="store_true", help="drop all tables before seeding"
    )
    args = parser.parse_args()

    setup_logging()
    if args.reset:
        Base.metadata.drop_all(bind=engine)
        logger.info("Dropped existing tables")
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        counts = seed_sample_data(db, seed=args.seed)
    finally:
        db.close()

    if counts:
        print(f"Sample data loaded: {counts}")
    else:
        print("Database is not empty, nothing loaded")


if __name__ == "__main__":
    main()
