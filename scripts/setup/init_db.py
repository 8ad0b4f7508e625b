# scripts/setup/init_db.py
"""
Initialize database — creates all tables and seeds the sample Delhi zones.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--no-seed]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.database import create_tables, engine, SessionLocal
from app.config import settings
from app.services.zone_service import seed_sample_zones, get_all_zones
from sqlalchemy import text, inspect


def main():
    parser = argparse.ArgumentParser(description="Create tables and seed zones")
    parser.add_argument("--no-seed", action="store_true", help="Skip seeding the sample zones")
    args = parser.parse_args()

    print("🗄️  Resilience Monitor DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nCheck DATABASE_URL in .env")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    if not args.no_seed:
        db = SessionLocal()
        try:
            added = seed_sample_zones(db)
            zones = get_all_zones(db)
        finally:
            db.close()
        print(f"\n🗺️  Zones: {len(zones)} ({added} seeded now)")
        for z in zones:
            flag = "🏭" if z.industrial_zone else "  "
            print(f"   {flag} {z.name:<18} density={z.density_factor:>5} water={z.water_deficit:>5}")

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn app.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
