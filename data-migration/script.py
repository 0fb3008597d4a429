"""
This script bulk-loads normalized CSV exports (expenses, earnings, inventory)
into the dashboard database.

Each file's resource is taken from its name prefix:
    expenses*.csv   -> expenses table   (description, amount, category, date)
    earnings*.csv   -> earnings table   (description, amount, source, date)
    inventory*.csv  -> inventory table  (name, quantity, cost_price, selling_price, supplier)

Rows go through the same validation as the API. Invalid rows are reported
with their CSV line number and skipped; valid rows of a file are inserted in
one commit.
"""


from __future__ import annotations

import sys
from pathlib import Path

from config import get_settings
from db import SessionLocal, engine, Base
from app.log import configure_logging
from app.services.csv_import import import_records_csv, repository_for_file


NORMALIZED_DIR = Path("data-migration/normalized")


def import_normalized_csvs_to_db(folder: Path = NORMALIZED_DIR) -> int:
    folder = Path(folder)
    csv_files = sorted(folder.glob("*.csv"))
    if not csv_files:
        raise FileNotFoundError(f"No CSV files found in: {folder.resolve()}")

    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    total_inserted = 0

    try:
        for f in csv_files:
            repo = repository_for_file(f)
            if repo is None:
                print(f"-- Skipping {f.name}: name must start with expenses, earnings or inventory")
                continue

            result = import_records_csv(session, repo, f)
            total_inserted += result.inserted

            print(f"OK {f.name}: {result.inserted} {result.resource} imported")
            for line, message in result.rejected:
                print(f"   line {line}: {message}")

        print(f"\nDONE. Total inserted: {total_inserted}")
    finally:
        session.close()

    return total_inserted


if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)

    target = Path(sys.argv[1]) if len(sys.argv) > 1 else NORMALIZED_DIR
    import_normalized_csvs_to_db(target)
