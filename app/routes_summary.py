# app/routes_summary.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .deps import get_db, require_session
from app.services.summary import compute_summary, summary_to_json

router = APIRouter(
    prefix="/api",
    tags=["summary"],
    dependencies=[Depends(require_session)],
)


@router.get("/summary")
def summary(db: Session = Depends(get_db)):
    """
    Dashboard figures: totals, net profit, inventory value and the two
    monthly series. Months missing from one series are left for the
    chart to zero-fill.
    """
    return summary_to_json(compute_summary(db))
