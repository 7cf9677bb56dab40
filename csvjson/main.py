from fastapi import FastAPI, UploadFile, File, HTTPException, Query
from pydantic import ValidationError
from .errors import ConvertError
from .models import ConvertOptions, ConvertResponse, HealthResponse
from .convert import convert_bytes
from .rules import DEFAULT_DELIMITER

app = FastAPI(
    title="csv-to-json",
    description="Convert CSV files to JSON records with optional column statistics",
    version="0.1.0",
)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/convert", response_model=ConvertResponse)
async def convert_csv(
    file: UploadFile = File(...),
    stats: bool = Query(False),
    delimiter: str = Query(DEFAULT_DELIMITER, min_length=1, max_length=1),
    strict_headers: bool = Query(False),
):
    if not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    try:
        options = ConvertOptions(delimiter=delimiter, reject_duplicate_headers=strict_headers)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors()[0]["msg"]) from exc

    raw = await file.read()
    try:
        result = convert_bytes(raw, options, show_stats=stats)
    except ConvertError as exc:
        detail = {"kind": exc.kind.value, "message": exc.detail}
        if exc.line_number is not None:
            detail["line"] = exc.line_number
        raise HTTPException(status_code=422, detail=detail) from exc

    return {"rows": result.rows, "stats": result.stats}
