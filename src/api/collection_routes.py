# generic CRUD over every named collection
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.deps import describe_errors, get_store, require_id
from api.schemas import RECORD_BODIES
from db.store import RecordStore, UnknownCollectionError

router = APIRouter()


def _body_fields(collection: str, body: Dict[str, Any]) -> Dict[str, Any]:
    schema = RECORD_BODIES.get(collection)
    if schema is None:
        raise HTTPException(status_code=404, detail="Not found")
    try:
        return schema.model_validate(body).record_fields()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=describe_errors(e.errors()))


def _found(record):
    if record is None:
        raise HTTPException(status_code=404, detail="Not found")
    return record


@router.get("/{collection}")
async def list_records(
    collection: str, request: Request, store: RecordStore = Depends(get_store)
) -> List[Dict]:
    # underscore-prefixed params are reserved for paging/sorting and not filters
    filters = {k: v for k, v in request.query_params.items() if not k.startswith("_")}
    try:
        return await store.list(collection, filters)
    except UnknownCollectionError:
        raise HTTPException(status_code=404, detail="Not found")


@router.get("/{collection}/{record_id}")
async def get_record(
    collection: str, record_id: str, store: RecordStore = Depends(get_store)
) -> Dict:
    try:
        return _found(await store.get(collection, require_id(record_id)))
    except UnknownCollectionError:
        raise HTTPException(status_code=404, detail="Not found")


@router.post("/{collection}", status_code=201)
async def create_record(
    collection: str,
    body: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
) -> Dict:
    fields = _body_fields(collection, body)
    try:
        return await store.insert(collection, fields)
    except UnknownCollectionError:
        raise HTTPException(status_code=404, detail="Not found")


@router.put("/{collection}/{record_id}")
async def replace_record(
    collection: str,
    record_id: str,
    body: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
) -> Dict:
    fields = _body_fields(collection, body)
    try:
        return _found(await store.replace(collection, require_id(record_id), fields))
    except UnknownCollectionError:
        raise HTTPException(status_code=404, detail="Not found")


@router.patch("/{collection}/{record_id}")
async def patch_record(
    collection: str,
    record_id: str,
    body: Dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
) -> Dict:
    fields = _body_fields(collection, body)
    try:
        return _found(await store.patch(collection, require_id(record_id), fields))
    except UnknownCollectionError:
        raise HTTPException(status_code=404, detail="Not found")


@router.delete("/{collection}/{record_id}")
async def delete_record(
    collection: str, record_id: str, store: RecordStore = Depends(get_store)
):
    try:
        deleted = await store.delete(collection, require_id(record_id))
    except UnknownCollectionError:
        raise HTTPException(status_code=404, detail="Not found")
    if not deleted:
        raise HTTPException(status_code=404, detail="Not found")
    return JSONResponse({}, status_code=200)
