#!/usr/bin/env python3
"""Create every table and seed the standard color and size vocabularies."""
import logging
import sys

from database.connection import SessionLocal, create_tables
from services.options import seed_lookup_vocabularies

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

def create_all_tables() -> bool:
    """Create all database tables and seed lookup data"""
    try:
        logger.info("Creating database tables...")
        create_tables()

        db = SessionLocal()
        try:
            created = seed_lookup_vocabularies(db)
        finally:
            db.close()

        logger.info(f"All tables created successfully, seeded {created}")
        return True
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        return False

if __name__ == "__main__":
    success = create_all_tables()
    sys.exit(0 if success else 1)
