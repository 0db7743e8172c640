from fastapi import APIRouter, Depends
from pymongo.database import Database

from reservo.core.exceptions import UnavailableError
from reservo.database.mongo import get_db
from reservo.repositories.base import UNAVAILABLE_EXCEPTIONS

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(db: Database = Depends(get_db)):
    """Report whether MongoDB answers a ping."""
    try:
        db.command("ping")
    except UNAVAILABLE_EXCEPTIONS as e:
        raise UnavailableError(str(e), service="mongodb") from e
    return {"status": "ok"}
