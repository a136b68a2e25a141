"""FastAPI application for the Clause Compare Relay.

Exposes the upload proxy and the server-rendered comparison viewer.

Usage (from project root, after installing the package):

    uvicorn clause_compare.api.app:app --reload

Then either POST multipart/form-data with ``baselineFile`` and one or two
``compareFiles`` to /api/ai/compareDocuments, or open
/features/comparison in a browser.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..audit.audit_logger import ComparisonAuditLogger
from ..backend.client import BackendClient
from ..config.config_manager import load_settings
from ..config.models import COMPARE_PATH, RelaySettings
from ..models.enums import AuditSource
from ..parsers.exceptions import RelayError
from ..proxy.upload_proxy import UploadProxy
from ..viewer.comparison_viewer import (
    MISSING_DOCUMENTS_MESSAGE,
    ComparisonViewer,
    ViewerOutcome,
)
from ..viewer.view_renderer import ViewRenderer
from .auth import extract_bearer_token

logger = logging.getLogger(__name__)

VIEWER_PATH = "/features/comparison"
PROXY_FALLBACK_ERROR = "Failed to compare documents"

# Upstream statuses that must not carry a body
_BODYLESS_STATUSES = {204, 304}


def create_app(
    settings: Optional[RelaySettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    audit_logger: Optional[ComparisonAuditLogger] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Relay settings; loaded from the environment when omitted.
        transport: Optional httpx transport for the backend client.
        audit_logger: Audit logger to use; created from ``settings`` when
            omitted and auditing is enabled.
    """
    settings = settings or load_settings()
    client = BackendClient(settings, transport=transport)
    if audit_logger is None and settings.audit_enabled:
        audit_logger = ComparisonAuditLogger(database_url=settings.audit_database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if audit_logger is not None:
            try:
                audit_logger.init_storage()
            except Exception as exc:  # noqa: BLE001
                logger.error(f"Audit storage unavailable, comparisons will not be audited: {exc}")
        logger.info(
            f"Relaying comparisons to {settings.proxy_endpoint} "
            f"(viewer: {settings.viewer_endpoint})"
        )
        yield
        await client.aclose()
        if audit_logger is not None:
            audit_logger.close()

    app = FastAPI(title="Clause Compare Relay", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.backend_client = client
    app.state.audit_logger = audit_logger
    app.state.proxy = UploadProxy(client, audit_logger=audit_logger)
    app.state.viewer = ComparisonViewer(
        client,
        ViewRenderer(home_url=settings.home_url),
        audit_logger=audit_logger,
    )

    @app.get("/", include_in_schema=False)
    async def root() -> RedirectResponse:
        return RedirectResponse(VIEWER_PATH)

    @app.get("/health", include_in_schema=False)
    async def health() -> JSONResponse:
        status = {
            "ok": True,
            "backend_url": settings.backend_url,
            "audit": None,
        }
        if audit_logger is not None:
            status["audit"] = audit_logger.health_check()
        return JSONResponse(status_code=200, content=status)

    @app.api_route(
        COMPARE_PATH,
        methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    )
    async def compare_documents_proxy(request: Request) -> Response:
        """Relay a comparison upload to the backend.

        The backend's status code and JSON body are returned verbatim.
        Invalid uploads and unreachable backends answer 400 with an
        ``error`` message.
        """
        if request.method != "POST":
            return JSONResponse(status_code=405, content={"error": "Method Not Allowed"})

        proxy: UploadProxy = request.app.state.proxy
        try:
            async with request.form() as form:
                upstream = await proxy.handle(form)
        except RelayError as exc:
            logger.error(f"compareDocuments proxy error: {exc.to_dict()}")
            return JSONResponse(
                status_code=400,
                content={"error": exc.message or PROXY_FALLBACK_ERROR},
            )
        except StarletteHTTPException as exc:
            # Malformed multipart bodies are rejected by Starlette form parsing
            logger.error(f"compareDocuments proxy error: {exc.detail}")
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.detail or PROXY_FALLBACK_ERROR},
            )
        except Exception:  # noqa: BLE001
            logger.exception("compareDocuments proxy error")
            return JSONResponse(status_code=500, content={"error": PROXY_FALLBACK_ERROR})

        if upstream.status_code in _BODYLESS_STATUSES:
            return Response(status_code=upstream.status_code)
        return JSONResponse(status_code=upstream.status_code, content=upstream.data)

    @app.get(VIEWER_PATH, response_class=HTMLResponse)
    async def comparison_page(request: Request) -> HTMLResponse:
        viewer: ComparisonViewer = request.app.state.viewer
        return HTMLResponse(viewer.render())

    @app.post(VIEWER_PATH, response_class=HTMLResponse)
    async def submit_comparison(request: Request) -> HTMLResponse:
        """Run a comparison from the viewer form and render the result."""
        viewer: ComparisonViewer = request.app.state.viewer
        token = extract_bearer_token(request, settings.session_cookie_name)
        try:
            async with request.form() as form:
                outcome = await viewer.submit(form, token)
        except StarletteHTTPException as exc:
            logger.error(f"compareDocuments form error: {exc.detail}")
            outcome = ViewerOutcome(error=exc.detail or MISSING_DOCUMENTS_MESSAGE)
            return HTMLResponse(viewer.render(outcome), status_code=exc.status_code)
        return HTMLResponse(viewer.render(outcome))

    @app.get("/api/audit/comparisons")
    async def export_audit_log(
        format: str = "json",
        source: Optional[str] = None,
    ) -> Response:
        """Export the comparison audit trail as JSON or CSV."""
        if audit_logger is None:
            raise HTTPException(status_code=404, detail="Comparison auditing is disabled")
        if format not in {"json", "csv"}:
            raise HTTPException(status_code=400, detail="format must be 'json' or 'csv'")

        audit_source = None
        if source is not None:
            try:
                audit_source = AuditSource(source)
            except ValueError as exc:
                raise HTTPException(
                    status_code=400, detail="source must be 'proxy' or 'viewer'"
                ) from exc

        content = audit_logger.export_log(format=format, source=audit_source)
        media_type = "application/json" if format == "json" else "text/csv"
        return Response(content=content, media_type=media_type)

    return app


app = create_app()
