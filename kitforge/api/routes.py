"""HTTP routes: project generation, registry proxy and health."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from kitforge.errors import Interrupted
from kitforge.registry import PackageInfo, RegistryProxy, SearchResults
from kitforge.scaffolder import GenerateRequest, ScaffoldGenerator

logger = logging.getLogger(__name__)

router = APIRouter()


def get_generator(request: Request) -> ScaffoldGenerator:
    return request.app.state.generator


def get_proxy(request: Request) -> RegistryProxy:
    return request.app.state.proxy


@router.post("/api/react", tags=["scaffold"])
async def generate_project(
    body: GenerateRequest,
    generator: ScaffoldGenerator = Depends(get_generator),
) -> StreamingResponse:
    """Generate a project and stream it back as a zip archive.

    Every error that can happen before the first byte (bad selection, missing
    template, failed write) is reported as a JSON error instead of a broken
    download.
    """
    project_name = body.project_name
    selection = body.to_selection()
    try:
        run = await generator.prepare(selection, project_name)
    except Interrupted:
        # Shutdown interrupted the run; the request is dropped with the server.
        logger.info("Dropped request for %s: run interrupted", project_name)
        raise asyncio.CancelledError from None
    return StreamingResponse(
        run.stream(),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{project_name}.zip"'},
        background=BackgroundTask(run.aclose),
    )


@router.get("/api/npm/search", response_model=SearchResults, tags=["registry"])
async def search_packages(
    q: str | None = Query(default=None, description="Search text"),
    limit: int | None = Query(default=None, description="Maximum number of results"),
    proxy: RegistryProxy = Depends(get_proxy),
) -> SearchResults:
    """Search the npm registry (cached)."""
    return await proxy.search(q, limit)


@router.get("/api/npm/package/{name:path}", response_model=PackageInfo, tags=["registry"])
async def package_info(
    name: str,
    proxy: RegistryProxy = Depends(get_proxy),
) -> PackageInfo:
    """Summary of one npm package (cached).  Accepts scoped names."""
    return await proxy.info(name)


@router.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    return {"status": "ok"}
