# app/services/csv_import.py
#
# CSV Import
# Reads normalized CSV exports into plain dicts and loads them through the
# resource repositories, so imported rows get exactly the same validation as
# rows submitted over the API.

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd
import structlog
from sqlalchemy.orm import Session

from app.errors import ValidationError
from app.repository import ResourceRepository, REPOSITORIES
from app.schemas import ResourceSchema

logger = structlog.get_logger(__name__)


@dataclass
class ImportResult:
    resource: str
    inserted: int = 0
    # (csv row number, message); row 2 is the first data row
    rejected: List[Tuple[int, str]] = field(default_factory=list)


def repository_for_file(path: Path) -> Optional[ResourceRepository]:
    """
    'expenses_2024.csv' -> expenses repository; None when no resource
    name prefixes the file name.
    """
    stem = Path(path).stem.lower()
    for name, repo in REPOSITORIES.items():
        if stem.startswith(name):
            return repo
    return None


def read_records_csv(file_path: Path, schema: ResourceSchema) -> List[Tuple[int, Dict]]:
    """
    Read one CSV into (line number, raw row dict) pairs restricted to the
    schema's fields. Values are kept as text; the schema does the parsing.
    """
    df = pd.read_csv(file_path, dtype=str, keep_default_na=False, encoding="utf-8")

    # normalize headers
    df.columns = df.columns.str.strip().str.lower()

    missing = [f.name for f in schema.fields if f.required and f.name not in df.columns]
    if missing:
        raise ValidationError(f"{Path(file_path).name}: missing column(s) {', '.join(missing)}")

    keep = [name for name in schema.field_names if name in df.columns]
    df = df[keep]
    if df.empty:
        return []

    # drop rows where every kept cell is blank
    blank = df.apply(lambda col: col.str.strip() == "").all(axis=1)
    df = df[~blank]

    # header is line 1
    lines = [int(i) + 2 for i in df.index]
    return list(zip(lines, df.to_dict(orient="records")))


def import_records_csv(db: Session, repo: ResourceRepository, file_path: Path) -> ImportResult:
    """
    Validate every row, report the bad ones, insert the good ones in one commit.
    """
    rows = read_records_csv(file_path, repo.schema)
    result = ImportResult(resource=repo.schema.name)

    valid: List[Dict] = []
    for line, row in rows:
        try:
            repo.schema.validate(row)
        except ValidationError as e:
            result.rejected.append((line, e.message))
            logger.warning("csv_row_rejected", file=str(file_path), row=line, error=e.message)
            continue
        valid.append(row)

    result.inserted = len(repo.create_many(db, valid))
    logger.info(
        "csv_imported",
        file=str(file_path),
        resource=result.resource,
        inserted=result.inserted,
        rejected=len(result.rejected),
    )
    return result
