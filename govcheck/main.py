"""
govcheck FastAPI Application — AI system risk assessment service.

  POST /api/assess          → standard or gap-analysis assessment
  GET  /api/checklist       → implemented-controls checklist
  GET  /api/framework-data  → mitigation links and framework references
  POST /api/report/pdf      → PDF report
  POST /api/send-email      → email report to the product manager
  GET  /health              → {"status": "ok"}
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from govcheck.api.routes.assess import router as assess_router
from govcheck.api.routes.health import router as health_router
from govcheck.api.routes.reference import router as reference_router
from govcheck.api.routes.report import router as report_router
from govcheck.config import settings
from govcheck.core.catalog import load_catalog

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("govcheck")

# Fail fast on a broken checklist catalog
load_catalog()

app = FastAPI(
    title="govcheck",
    description="AI system risk assessment against the FINOS AI Governance Framework",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(assess_router)
app.include_router(reference_router)
app.include_router(report_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    body = await request.body()
    logger.error(f"Validation Error. Raw body: {body.decode('utf-8')[:500]} | Errors: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"success": False, "detail": jsonable_errors(exc), "body": body.decode("utf-8")[:100]},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without non-serializable context objects."""
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]
