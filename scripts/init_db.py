#!/usr/bin/env python
"""Create the What To Eat tables in the configured database."""
import asyncio
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from whattoeat.db.connection import create_engine, get_database_type
from whattoeat.db.models import Base
from whattoeat.main import validate_environment


async def init_db() -> None:
    if get_database_type() == "sqlite":
        Path("data").mkdir(exist_ok=True)
    engine = create_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    print("✓ Database tables created successfully")


if __name__ == "__main__":
    validate_environment()
    asyncio.run(init_db())
