import io
from datetime import datetime, timezone

import anyio
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from wordquiz.api.v2.dependencies import get_db
from wordquiz.schemas.dictionary_schema import ImportReport
from wordquiz.services.dictionary_exchange_service import DictionaryExchangeService

router = APIRouter()


@router.get("/export", summary="Download the dictionary as a JSON document")
def export_dictionary(db: Session = Depends(get_db)) -> Response:
    sink = io.BytesIO()
    result = DictionaryExchangeService(db).export_dictionary(sink)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error_message)

    filename = f"dictionary-{datetime.now(timezone.utc):%Y%m%d-%H%M%S}.json"
    return Response(
        content=sink.getvalue(),
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Exported-Count": str(result.exported_count),
        },
    )


@router.post("/import", response_model=ImportReport, summary="Merge a JSON dictionary document")
async def import_dictionary(request: Request, db: Session = Depends(get_db)) -> ImportReport:
    raw = await request.body()
    service = DictionaryExchangeService(db)
    result = await anyio.to_thread.run_sync(service.import_bytes, raw)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error_message)
    return ImportReport(
        success=True,
        added_count=result.added_count,
        updated_count=result.updated_count,
        skipped_count=result.skipped_count,
        total_processed=result.total_processed,
        message=result.to_user_message(),
    )
