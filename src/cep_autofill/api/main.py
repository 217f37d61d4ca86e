"""cep-autofill API: CEP lookup and headless form fill over HTTP.

Run:
    uvicorn cep_autofill.api.main:app --reload
    # or
    cep-autofill-api
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware

from cep_autofill.api.schemas import AddressResponse, AutofillRequest, AutofillResponse
from cep_autofill.config import settings
from cep_autofill.observability.logging import session_scope, setup_logging
from cep_autofill.observability.tracing import configure_tracing
from cep_autofill.pipeline.headless import autofill_html
from cep_autofill.retrieval.gateway import AddressGateway, InvalidCEPError, clean_cep

logger = logging.getLogger(__name__)

gateway = AddressGateway.from_settings(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(json_format=True, level=settings.log_level)
    configure_tracing(settings)
    logger.info("cep-autofill API ready (providers: %s)", ", ".join(p.name for p in gateway.providers))
    yield
    logger.info("Shutting down")


class SessionMiddleware(BaseHTTPMiddleware):
    """Run each request as one log session, keyed by X-Request-ID when the caller sends one."""

    async def dispatch(self, request: Request, call_next):
        with session_scope(request.headers.get("x-request-id")) as sid:
            response = await call_next(request)
            response.headers["x-request-id"] = sid
            return response


app = FastAPI(
    title="cep-autofill",
    description="Brazilian CEP lookup with provider fallback, and label-driven address form filling.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(SessionMiddleware)


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "providers": [p.name for p in gateway.providers],
        "labels_url": settings.labels_url,
    }


@app.get("/cep/{code}", response_model=AddressResponse)
async def get_cep(code: str):
    try:
        cep = clean_cep(code, strict=True)
    except InvalidCEPError as e:
        raise HTTPException(status_code=422, detail=str(e))

    record = await gateway.lookup(cep)
    if record is None:
        raise HTTPException(status_code=404, detail=f"CEP {cep} not found")
    return AddressResponse(**record.to_dict())


@app.post("/autofill", response_model=AutofillResponse)
async def autofill(body: AutofillRequest):
    try:
        cep = clean_cep(body.cep, strict=True)
    except InvalidCEPError as e:
        raise HTTPException(status_code=422, detail=str(e))

    filled, html = await autofill_html(body.html, cep, gateway=gateway)
    return AutofillResponse(filled=filled, html=html)


def run():
    """Entry point for the cep-autofill-api console script."""
    uvicorn.run("cep_autofill.api.main:app", host="0.0.0.0", port=8000)
