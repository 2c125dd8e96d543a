from typing import Optional

from fastapi import FastAPI, UploadFile, File, HTTPException, Query

from .config import load_config
from .errors import ErrorBudgetExhausted
from .logging import configure_logging
from .models import ErrorBudgetDetail, NormalizeResponse, HealthResponse
from .normalize import normalize_csv_bytes

config = load_config()
configure_logging(config.log_level)

app = FastAPI(
    title="record-normalizer",
    description="Field-by-field normalization of 8-column CSV records",
    version="0.1.0",
)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/normalize", response_model=NormalizeResponse)
async def normalize_csv(
    file: UploadFile = File(...),
    max_errors: Optional[int] = Query(default=None, ge=1),
):
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    raw = await file.read()
    try:
        return normalize_csv_bytes(raw, max_errors or config.max_errors)
    except ErrorBudgetExhausted as exc:
        detail = ErrorBudgetDetail(
            message=str(exc),
            max_errors=exc.max_errors,
            line=exc.line_number,
            errors=exc.errors,
        )
        raise HTTPException(status_code=422, detail=detail.model_dump())
