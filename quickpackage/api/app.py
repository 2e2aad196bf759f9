"""
QuickPackage HTTP API

    GET  /health
    GET  /api/v1/items/{item_id}/package-name   default package name
    POST /api/v1/packages                       build a package
    GET  /api/v1/packages/{package_name}        download a built package

The QuickPackage service is built from environment configuration on
first use, or injected through create_app(service=...).
"""

from __future__ import annotations

import json
import time
import traceback
from typing import Any, Optional

from fastapi import APIRouter, FastAPI, HTTPException, Query
from fastapi.responses import FileResponse
from starlette.requests import Request

from ..core import QuickPackage
from ..errors import QuickPackageError
from .models import PackageNameResponse, PackageRequest, PackageResponse

# ============================================================================
# Helpers
# ============================================================================

def _log(msg: str, **extra: Any) -> None:
    """
    Structured JSON-line logging for the HTTP layer.
    """
    try:
        print(json.dumps({"msg": msg, **extra}, ensure_ascii=False, default=str))
    except Exception:
        # Last-ditch fallback - never let logging crash the app
        print(f"{msg} {extra}")


def _http_error(exc: QuickPackageError) -> HTTPException:
    return HTTPException(exc.http_status, {"code": exc.code, "message": exc.message})


# ============================================================================
# App factory
# ============================================================================

def create_app(service: Optional[QuickPackage] = None) -> FastAPI:
    app = FastAPI(
        title="QuickPackage API",
        version="1.0.0",
    )
    app.state.service = service

    def get_service() -> QuickPackage:
        if app.state.service is None:
            app.state.service = QuickPackage.from_env()
        return app.state.service

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        _log("[http] request", method=request.method, path=request.url.path)
        try:
            resp = await call_next(request)
        except Exception as exc:
            _log("[http] error", error=str(exc), traceback=traceback.format_exc())
            raise
        _log(
            "[http] response",
            path=request.url.path,
            duration_ms=int((time.time() - start) * 1000),
            status_code=getattr(resp, "status_code", None),
        )
        return resp

    @app.get("/health")
    async def health():
        return {"status": "ok", "time": time.time()}

    router = APIRouter(prefix="/api/v1")

    # ------------------------------------------------------------------------
    # Default package name
    # ------------------------------------------------------------------------

    @router.get("/items/{item_id}/package-name", response_model=PackageNameResponse)
    def package_name(
        item_id: str,
        user: str = Query(...),
        language: Optional[str] = Query(None),
        version: Optional[int] = Query(None, ge=0),
    ):
        try:
            name = get_service().suggest_package_name(
                item_id, user, language=language, version=version
            )
        except QuickPackageError as exc:
            _log("[api] package_name failed", item_id=item_id, error=str(exc))
            raise _http_error(exc)
        return PackageNameResponse(item_id=item_id, package_name=name)

    # ------------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------------

    @router.post("/packages", response_model=PackageResponse)
    def create_package(req: PackageRequest):
        _log(
            "[api] create_package",
            item_id=req.item_id,
            user=req.user,
            include_descendants=req.include_descendants,
        )
        try:
            result = get_service().create_package(
                item_id=req.item_id,
                user_name=req.user,
                language=req.language,
                version=req.version,
                package_name=req.package_name,
                include_descendants=req.include_descendants,
            )
        except QuickPackageError as exc:
            _log("[api] create_package failed", item_id=req.item_id,
                 code=exc.code, error=exc.message)
            raise _http_error(exc)

        _log("[api] create_package complete", path=result.path,
             n_entries=len(result.references))
        return PackageResponse(
            path=result.path,
            package_name=result.package_name,
            entries=[ref.to_token() for ref in result.references],
            download_url=f"{router.prefix}/packages/{result.package_name}",
        )

    # ------------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------------

    @router.get("/packages/{package_name}")
    def download_package(package_name: str):
        service = get_service()
        try:
            path = service.builder.package_path(package_name)
        except QuickPackageError as exc:
            raise _http_error(exc)

        if not path.is_file():
            raise HTTPException(404, f"Package {package_name} not found")

        return FileResponse(
            str(path),
            media_type="application/zip",
            filename=path.name,
        )

    app.include_router(router)
    return app


app = create_app()
