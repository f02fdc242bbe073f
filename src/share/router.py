import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaError

from share.functions import is_valid_share_id, share_tournament
from share.schemas import TournamentSnapshot, flatten_errors
from share.storage import SqlShareStore
from tournament.errors import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/share", tags=["Share"])


def get_share_store():
    return SqlShareStore()


def _invalid(details=None) -> JSONResponse:
    content = {"success": False, "error": "Invalid tournament data"}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=400, content=content)


@router.post("")
async def create_share(request: Request, store=Depends(get_share_store)):
    try:
        body = await request.json()
    except ValueError:
        return _invalid()

    try:
        snapshot = TournamentSnapshot.model_validate(body)
    except SchemaError as e:
        return _invalid(flatten_errors(e.errors()))

    share_id = await share_tournament(snapshot.model_dump(exclude_unset=True), store)
    return {"success": True, "shareId": share_id}


@router.get("/{share_id}")
async def get_share(share_id: str, store=Depends(get_share_store)):
    if not is_valid_share_id(share_id):
        logger.info(f"[share] Invalid share ID format: {share_id}")
        return JSONResponse(status_code=400, content={"success": False, "error": "Invalid share ID format"})

    data = await store.get(share_id)
    if data is None:
        raise NotFoundError("Tournament not found")
    return {"success": True, "tournament": data}
