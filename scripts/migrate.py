# scripts/migrate.py
#  to run the script, run the following command:
#  python scripts/migrate.py

"""
Database Migration Script
Creates the users, patients and chat_messages tables and, on PostgreSQL,
the triggers that refresh updated_at on every UPDATE.
"""
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from app.database.connection import build_engine, init_models
from config.appconfig import settings

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

UPDATED_AT_FUNCTION = """
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
  NEW.updated_at = CURRENT_TIMESTAMP;
  RETURN NEW;
END;
$$ language 'plpgsql'
"""

TRIGGER_TABLES = ("users", "patients")


async def install_updated_at_triggers(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.execute(text(UPDATED_AT_FUNCTION))
        for table in TRIGGER_TABLES:
            await conn.execute(text(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}"))
            await conn.execute(text(
                f"CREATE TRIGGER update_{table}_updated_at BEFORE UPDATE ON {table} "
                "FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()"
            ))
    logger.info(f"✓ updated_at triggers installed on: {', '.join(TRIGGER_TABLES)}")


async def run_migrations() -> None:
    engine = build_engine(settings.DATABASE_URL, pool_size=1)
    try:
        logger.info("Running database migrations...")
        await init_models(engine)
        if engine.dialect.name == "postgresql":
            await install_updated_at_triggers(engine)
        logger.info("✅ Migrations completed successfully")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    print("\n" + "="*60)
    print("   DENTAL ASSISTANT - DATABASE MIGRATIONS")
    print("="*60 + "\n")

    try:
        asyncio.run(run_migrations())
    except Exception as e:
        logger.error(f"❌ Migration failed: {e}", exc_info=True)
        sys.exit(1)
