"""
Persons API endpoints

Registration, lookup, listing, batch import, death recording and removal
of persons through the cached person service.
"""

import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, Field
import structlog

from ...cached_service import PersonCachedService
from ...domain import Person, PersonRecord

logger = structlog.get_logger()
router = APIRouter()


# Pydantic schemas for API
class PersonCreate(BaseModel):
    """Schema for registering a person."""

    name: str = Field(..., min_length=1, description="Person name")
    birth_date: datetime.date = Field(..., description="Date of birth")
    death_date: Optional[datetime.date] = Field(None, description="Date of death")
    data: Optional[str] = Field(None, description="Free-form data")

    def to_record(self) -> PersonRecord:
        return Person(self.name, self.birth_date, self.death_date, self.data).to_record()


class PersonRead(BaseModel):
    """Schema for a stored person."""

    id: UUID
    person: PersonRecord


class PersonList(BaseModel):
    persons: List[PersonRead]


class BatchImportRequest(BaseModel):
    persons: List[PersonCreate]


class BatchImportResponse(BaseModel):
    ids: List[UUID]


class DeathRequest(BaseModel):
    date: datetime.date = Field(..., description="Date of death")


def get_cached_service(request: Request) -> PersonCachedService:
    """Cached person service of the running application."""
    return request.app.state.container.cached_service


@router.post("/persons", response_model=PersonRead, status_code=201)
async def register_person(
    person: PersonCreate,
    service: PersonCachedService = Depends(get_cached_service),
):
    """
    Register a new person.

    The stored record is read back and returned with its id.
    """
    person_id, record = await service.register(
        person.name, person.birth_date, person.death_date, person.data
    )
    logger.info("Person registered", person_id=str(person_id))
    return PersonRead(id=person_id, person=record)


@router.post("/persons/batch", response_model=BatchImportResponse, status_code=201)
async def batch_import_persons(
    batch: BatchImportRequest,
    service: PersonCachedService = Depends(get_cached_service),
):
    """Import several persons atomically; ids follow the request order."""
    ids = await service.batch_import([p.to_record() for p in batch.persons])
    logger.info("Persons imported", count=len(ids))
    return BatchImportResponse(ids=ids)


@router.get("/persons", response_model=PersonList)
async def list_persons(service: PersonCachedService = Depends(get_cached_service)):
    persons = await service.list_all()
    return PersonList(
        persons=[PersonRead(id=person_id, person=record) for person_id, record in persons]
    )


@router.get("/persons/{person_id}", response_model=PersonRead)
async def get_person(
    person_id: UUID,
    service: PersonCachedService = Depends(get_cached_service),
):
    record = await service.find(person_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Person not found")
    return PersonRead(id=person_id, person=record)


@router.post("/persons/{person_id}/death", status_code=204)
async def record_death(
    person_id: UUID,
    death: DeathRequest,
    service: PersonCachedService = Depends(get_cached_service),
):
    """Record the death of a person."""
    await service.death(person_id, death.date)
    logger.info("Person death recorded", person_id=str(person_id))
    return Response(status_code=204)


@router.delete("/persons/{person_id}", status_code=204)
async def unregister_person(
    person_id: UUID,
    service: PersonCachedService = Depends(get_cached_service),
):
    """Remove a person; removing an unknown id succeeds."""
    await service.unregister(person_id)
    logger.info("Person unregistered", person_id=str(person_id))
    return Response(status_code=204)
