# create_schema.py
import asyncio
import asyncpg
from dotenv import load_dotenv

from newsletter.config import Settings
from newsletter.database.connection import SCHEMA_SQL

load_dotenv('.env.production')

async def create_schema():
    conf = Settings().database
    conn = await asyncpg.connect(conf.connection_string(), ssl=conf.ssl_mode)

    try:
        print(f"Creating subscription tables on {conf.host}:{conf.port}/{conf.database_name}...")
        await conn.execute(SCHEMA_SQL)
        print("✓ subscriptions table ready")
        print("✓ subscription_tokens table ready")
        print("\n✅ Schema created successfully!")
        return True
    except asyncpg.PostgresError as e:
        print(f"❌ Error: {e}")
        return False
    finally:
        await conn.close()

if __name__ == "__main__":
    success = asyncio.run(create_schema())
    exit(0 if success else 1)
