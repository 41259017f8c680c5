#!/usr/bin/env python3
"""
Recalculate Ratings Script

Recomputes every book's average rating from its reviews. Run it after a
logged rating aggregation failure, or after editing reviews directly in
the database.

USAGE:
    python scripts/recalculate_ratings.py
"""

import logging
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bookreview.config import get_settings
from bookreview.database import SessionLocal
from bookreview.services.ratings import RatingAggregator

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("recalculate_ratings")


def main() -> int:
    db = SessionLocal()
    try:
        updated, failed = RatingAggregator(db).recompute_all()
    finally:
        db.close()

    logger.info(f"Recalculated average rating for {updated} books")
    if failed:
        logger.error(f"{failed} books could not be recalculated")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
