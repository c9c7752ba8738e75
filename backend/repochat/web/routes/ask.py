"""Question answering route."""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException
from sse_starlette.sse import EventSourceResponse
from starlette.concurrency import iterate_in_threadpool, run_in_threadpool

from ...errors import EmbeddingFailure, GenerationFailure, InvalidInput, NamespaceNotFound, StoreFailure
from ...search import AnswerPipeline

from ..dependencies import get_pipeline
from ..schemas import AskRequest, SourceDocument

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/ask")
async def ask(request: AskRequest, pipeline: AnswerPipeline = Depends(get_pipeline)):
    """Stream an answer as SSE: one ``sources`` event, ``token`` events, then ``done``."""
    try:
        answer = await run_in_threadpool(pipeline.answer, request.namespace, request.question)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NamespaceNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EmbeddingFailure as e:
        logger.error(f"Question embedding failed for '{request.namespace}': {e}")
        raise HTTPException(status_code=502, detail="Embedding provider error")
    except StoreFailure as e:
        logger.error(f"Vector search failed for '{request.namespace}': {e}")
        raise HTTPException(status_code=503, detail="Vector store unavailable")

    sources = [SourceDocument(path=p.source, text=p.text, score=p.score) for p in answer.sources]
    paths = list(dict.fromkeys(s.path for s in sources))

    async def event_generator():
        yield {"event": "sources", "data": json.dumps([s.model_dump() for s in sources])}
        try:
            async for fragment in iterate_in_threadpool(answer.fragments):
                yield {"event": "token", "data": json.dumps({"text": fragment})}
        except GenerationFailure as e:
            logger.error(f"Generation failed mid-stream for '{answer.namespace}': {e}")
            yield {"event": "error", "data": json.dumps({"error": str(e)})}
            return
        finally:
            # Also runs when the client disconnects and the task is cancelled
            answer.close()
        yield {"event": "done", "data": "{}"}

    return EventSourceResponse(
        event_generator(),
        headers={"X-Source-Documents": json.dumps(paths)},
    )
