import logging
import os
import time
import uuid
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from template_api import config
from template_api.errors import InvalidSelections
from template_api.models import parse_selections, template_payload
from template_api.orchestrator import Orchestrator

GENERATE_PATH = "/api/generate-template"

if not logging.getLogger().handlers:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

log = logging.getLogger(__name__)

app = FastAPI()

allow_origins = [o.strip() for o in os.getenv("ALLOW_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = str(uuid.uuid4())
    start = time.time()
    request.state.request_id = rid
    response = None
    try:
        response = await call_next(request)
        return response
    finally:
        dur_ms = int((time.time() - start) * 1000)
        log.info(
            "rid=%s method=%s path=%s status=%s dur_ms=%d",
            rid,
            request.method,
            request.url.path,
            getattr(response, "status_code", "?"),
            dur_ms,
        )


def build_orchestrator() -> Orchestrator:
    """Fresh settings per request so credential changes apply without a restart."""
    return Orchestrator(config.load_settings())


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/llm/status")
def llm_status_endpoint() -> Dict[str, Any]:
    return config.load_settings().status()


@app.post(GENERATE_PATH)
async def generate_template(request: Request):
    try:
        try:
            payload = await request.json()
        except Exception as e:
            raise ValueError(f"invalid JSON body: {e}") from e
        try:
            selections = parse_selections(payload)
        except InvalidSelections as e:
            log.info("generate-template: rejected selections: %s", e)
            return JSONResponse(status_code=400, content={"error": str(e)})

        orchestrator = build_orchestrator()
        code = await run_in_threadpool(orchestrator.generate, selections)
        return JSONResponse(template_payload(code))
    except Exception as e:
        log.exception("generate-template: unexpected error")
        return JSONResponse(status_code=500, content={"error": f"Error del servidor: {e}"})


@app.api_route(GENERATE_PATH, methods=["GET", "PUT", "PATCH", "DELETE"])
def generate_template_method_not_allowed():
    return JSONResponse(
        status_code=405,
        content={"message": "Este endpoint solo acepta POST"},
        headers={"Allow": "POST"},
    )
