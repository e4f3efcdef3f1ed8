from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from docstore import AsyncDiskToyRepository, ConcurrentUpdateError, DocumentStore, DuplicateToyError, ToyRecord
from settings import get_settings

router = APIRouter(prefix="/v1/toys", tags=["toys"])
logger = logging.getLogger(__name__)

SETTINGS = get_settings()
DEBUG_LOG_REQUESTS = SETTINGS.debug_log_requests

# Repo singleton; tests reload this module after pointing settings at a sandbox.
STORE = DocumentStore.from_settings(SETTINGS)
TOY_REPO = AsyncDiskToyRepository(STORE)


class ToyBody(BaseModel):
    name: str = ""
    brand: str = ""
    company: str = ""


class ToyPatchBody(BaseModel):
    name: str | None = None
    brand: str | None = None
    company: str | None = None


@router.get("", response_model=list[ToyRecord])
async def list_toys():
    return await TOY_REPO.list_toys()


@router.get("/{iid}", response_model=ToyRecord)
async def get_toy(iid: str):
    toy = await TOY_REPO.get_toy(iid)
    if toy is None:
        raise HTTPException(status_code=404, detail="no data")
    return toy


@router.put("/{iid}", response_model=ToyRecord)
async def create_toy(iid: str, body: ToyBody):
    if DEBUG_LOG_REQUESTS:
        logger.info("CREATE TOY: iid=%s name=%s", iid, body.name)
    try:
        return await TOY_REPO.create_toy(iid, name=body.name, brand=body.brand, company=body.company)
    except DuplicateToyError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.patch("/{iid}", response_model=ToyRecord)
async def update_toy(iid: str, body: ToyPatchBody):
    if DEBUG_LOG_REQUESTS:
        logger.info("UPDATE TOY: iid=%s fields=%s", iid, sorted(body.model_dump(exclude_none=True)))
    try:
        toy = await TOY_REPO.update_toy(iid, name=body.name, brand=body.brand, company=body.company)
    except ConcurrentUpdateError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    if toy is None:
        raise HTTPException(status_code=404, detail="no data")
    return toy


@router.delete("/{iid}")
async def delete_toy(iid: str):
    try:
        deleted = await TOY_REPO.delete_toy(iid)
    except ConcurrentUpdateError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    if not deleted:
        raise HTTPException(status_code=404, detail="can't delete this product (invalid iid)")
    return {"message": "product deleted successfully"}
