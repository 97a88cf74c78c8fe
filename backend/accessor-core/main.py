# backend/accessor-core/main.py

from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException  # type: ignore
from fastapi.middleware.cors import CORSMiddleware  # type: ignore
from pydantic import BaseModel  # type: ignore

import config
from registry import is_supported, try_parse_best

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("accessor-core")

app = FastAPI(title="Accessor Core (getter/setter detection)", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class AccessorRequest(BaseModel):
    code: str
    filename: Optional[str] = None
    include_cir: bool = False


class AccessorOut(BaseModel):
    declaring_type: str
    method_name: str
    field_name: str
    kind: Literal["getter", "setter"]
    access_level: str
    annotation: str
    line: Optional[int] = None


class AccessorResponse(BaseModel):
    ok: bool = True
    language: str = "java"
    accessors: List[AccessorOut] = []
    cir: Optional[Dict[str, Any]] = None


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/accessors", response_model=AccessorResponse)
def accessors(req: AccessorRequest) -> AccessorResponse:
    if not is_supported(req.filename):
        raise HTTPException(status_code=400, detail=f"Unsupported file type: {req.filename}")
    if len(req.code.encode("utf-8")) > config.MAX_SOURCE_BYTES:
        raise HTTPException(status_code=413, detail="Source too large")

    try:
        result = try_parse_best(req.code, req.filename, include_cir=req.include_cir)
    except ValueError as e:
        logger.info("rejecting %s: %s", req.filename or "<inline>", e)
        raise HTTPException(status_code=400, detail=str(e)) from e

    if "error" in result:
        raise HTTPException(status_code=400, detail=result["error"])

    logger.info(
        "%s: %d accessor candidates", req.filename or "<inline>", len(result["accessors"])
    )
    return AccessorResponse(
        ok=True,
        accessors=[AccessorOut(**a) for a in result["accessors"]],
        cir=result.get("cir"),
    )


if __name__ == "__main__":
    import uvicorn  # type: ignore

    uvicorn.run("main:app", host=config.HOST, port=config.PORT)
