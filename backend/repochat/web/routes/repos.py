"""Repository indexing routes with SSE progress."""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response
from sse_starlette.sse import EventSourceResponse
from starlette.concurrency import run_in_threadpool
import asyncio
import logging

from ...errors import InvalidInput, StoreFailure
from ...indexing import JobTracker, RepositoryIndexer
from ...storage import VectorStore

from ..dependencies import get_indexer, get_store, get_tracker
from ..schemas import IndexRequest, IndexResponse, JobResponse, NamespaceListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/repos")

PROGRESS_INTERVAL_SECONDS = 1.0


@router.post("", response_model=IndexResponse)
async def submit_repository(
    request: IndexRequest,
    response: Response,
    background_tasks: BackgroundTasks,
    indexer: RepositoryIndexer = Depends(get_indexer),
):
    """Index a repository in the background unless its namespace already exists."""
    try:
        submission = await run_in_threadpool(indexer.submit, request.repo_url)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreFailure as e:
        logger.error(f"Vector store unavailable while submitting {request.repo_url}: {e}")
        raise HTTPException(status_code=503, detail="Vector store unavailable")

    if submission.status == "exists":
        return IndexResponse(
            namespace=submission.namespace,
            status="ready",
            message=f"Repository already indexed as '{submission.namespace}'.",
        )

    if submission.new_job:
        logger.info(f"Starting background indexing task for {submission.namespace}")
        background_tasks.add_task(indexer.run, submission.reference)

    response.status_code = 202
    return IndexResponse(
        namespace=submission.namespace,
        status="accepted",
        message=f"Accepted. Indexing '{submission.namespace}' in the background.",
    )


@router.get("", response_model=NamespaceListResponse)
async def list_repositories(store: VectorStore = Depends(get_store)):
    """List every indexed namespace."""
    try:
        namespaces = await run_in_threadpool(store.list_namespaces)
    except StoreFailure as e:
        logger.error(f"Failed to list namespaces: {e}")
        raise HTTPException(status_code=503, detail="Vector store unavailable")
    return NamespaceListResponse(namespaces=namespaces)


@router.get("/{namespace}/job", response_model=JobResponse)
async def job_status(namespace: str, tracker: JobTracker = Depends(get_tracker)):
    job = tracker.get(namespace)
    if job is None:
        raise HTTPException(status_code=404, detail="No indexing job recorded for this namespace")
    return JobResponse.model_validate(job)


@router.get("/{namespace}/progress")
async def job_progress(namespace: str, tracker: JobTracker = Depends(get_tracker)):
    """SSE endpoint for real-time indexing progress."""
    if tracker.get(namespace) is None:
        raise HTTPException(status_code=404, detail="No indexing job recorded for this namespace")

    async def event_generator():
        while True:
            job = tracker.get(namespace)
            if job is None:
                break
            yield {
                "event": "progress",
                "data": JobResponse.model_validate(job).model_dump_json(),
            }
            if job.done:
                break
            await asyncio.sleep(PROGRESS_INTERVAL_SECONDS)

    return EventSourceResponse(event_generator())
