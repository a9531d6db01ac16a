import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from dotenv import load_dotenv
from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import get_settings
from .models import EnabledToggle, HealthResponse
from .n8n.client import N8nClient
from .n8n.errors import N8nError, http_status_for
from .uwf.n8n_adapter import WORKFLOWS_PATH, N8nAdapter, WorkflowConversionError
from .uwf.schema import Workflow, WorkflowUpdate

load_dotenv()

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

n8n_client = N8nClient.from_settings(settings)
adapter = N8nAdapter(n8n_client)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("FlowBridge proxying n8n at %s", n8n_client.base_url)
    if not n8n_client.is_configured():
        logger.warning("N8N_API_KEY is not set; every n8n call will fail")
    yield
    await n8n_client.aclose()


app = FastAPI(
    title="FlowBridge API",
    description="Unified Workflow Format facade in front of the n8n REST API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error handling ---

@app.exception_handler(N8nError)
async def n8n_error_handler(request: Request, exc: N8nError):
    status = http_status_for(exc)
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, status, exc)
    return JSONResponse({"error": str(exc)}, status_code=status)


@app.exception_handler(WorkflowConversionError)
async def conversion_error_handler(request: Request, exc: WorkflowConversionError):
    logger.error("%s %s -> 500: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": str(exc)}, status_code=500)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse({"error": f"Invalid request: {exc.errors()}"}, status_code=400)


def _dump(workflow: Workflow) -> dict:
    return workflow.model_dump(mode="json", by_alias=True)


@app.get("/api/health", response_model=HealthResponse)
async def health():
    try:
        await n8n_client.request(WORKFLOWS_PATH, params={"limit": 0})
    except N8nError as e:
        logger.info("n8n health probe failed: %s", e)
        return JSONResponse(HealthResponse(status="disconnected").model_dump(), status_code=503)
    return HealthResponse(status="connected")


# --- UWF workflow endpoints ---

@app.get("/api/workflows")
async def list_workflows():
    return [_dump(wf) for wf in await adapter.list()]


@app.post("/api/workflows")
async def create_workflow(workflow: Workflow):
    return _dump(await adapter.create(workflow))


@app.get("/api/workflows/{workflow_id}")
async def get_workflow(workflow_id: str):
    return _dump(await adapter.get(workflow_id))


@app.put("/api/workflows/{workflow_id}")
async def update_workflow(workflow_id: str, updates: WorkflowUpdate):
    return _dump(await adapter.update(workflow_id, updates))


@app.delete("/api/workflows/{workflow_id}")
async def delete_workflow(workflow_id: str):
    await adapter.delete(workflow_id)
    return {"success": True}


@app.patch("/api/workflows/{workflow_id}")
async def toggle_workflow(workflow_id: str, toggle: EnabledToggle):
    if toggle.enabled:
        return _dump(await adapter.activate(workflow_id))
    return _dump(await adapter.deactivate(workflow_id))


@app.post("/api/workflows/{workflow_id}/execute")
async def execute_workflow(workflow_id: str, data: Optional[Any] = Body(None)):
    result = await adapter.execute(workflow_id, data)
    return result.model_dump()


# --- Raw n8n passthrough ---

N8N_ACTIONS = ("activate", "deactivate", "execute")


@app.get("/api/n8n/workflows")
async def list_n8n_workflows(request: Request):
    params = list(request.query_params.multi_items()) or None
    return await n8n_client.request(WORKFLOWS_PATH, params=params)


@app.post("/api/n8n/workflows")
async def create_n8n_workflow(payload: dict[str, Any] = Body(...)):
    return await n8n_client.request(WORKFLOWS_PATH, method="POST", body=payload)


@app.get("/api/n8n/workflows/{workflow_id}")
async def get_n8n_workflow(workflow_id: str, download: bool = False):
    data = await n8n_client.request(f"{WORKFLOWS_PATH}/{workflow_id}")
    if download:
        return Response(
            content=json.dumps(data, indent=2),
            media_type="application/json",
            headers={"Content-Disposition": f"attachment; filename=workflow-{workflow_id}.json"},
        )
    return data


@app.put("/api/n8n/workflows/{workflow_id}")
async def update_n8n_workflow(workflow_id: str, payload: dict[str, Any] = Body(...)):
    return await n8n_client.request(f"{WORKFLOWS_PATH}/{workflow_id}", method="PUT", body=payload)


@app.delete("/api/n8n/workflows/{workflow_id}")
async def delete_n8n_workflow(workflow_id: str):
    return await n8n_client.request(f"{WORKFLOWS_PATH}/{workflow_id}", method="DELETE")


@app.post("/api/n8n/workflows/{workflow_id}")
async def n8n_workflow_action(
    workflow_id: str,
    action: Optional[str] = None,
    payload: Optional[Any] = Body(None),
):
    if action not in N8N_ACTIONS:
        return JSONResponse(
            {"error": "Invalid action. Supported actions: activate, deactivate, execute"},
            status_code=400,
        )
    body = (payload if payload is not None else {}) if action == "execute" else None
    return await n8n_client.request(
        f"{WORKFLOWS_PATH}/{workflow_id}/{action}", method="POST", body=body
    )
