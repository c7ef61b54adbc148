# tutoring_calendar/routers/catalog.py

from fastapi import APIRouter

from ..schemas.catalog import Level, Subject
from ..services.catalog import LEVELS, SUBJECTS

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/subjects", response_model=list[Subject])
def list_subjects():
    return list(SUBJECTS)


@router.get("/levels", response_model=list[Level])
def list_levels():
    return list(LEVELS)
