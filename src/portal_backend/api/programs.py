from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portal_backend.database import get_db
from portal_backend.interface.offerings import ProgramGet
from portal_backend.repositories.academics import ProgramRepository

program_router = APIRouter()


@program_router.get("")
def list_programs(db: Session = Depends(get_db)):
    return {"programs": [ProgramGet.model_validate(p) for p in ProgramRepository(db).list_by_name()]}
