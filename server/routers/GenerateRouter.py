from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

from server.core.GenerationService import GenerationError, GenerationErrorKind
from shared.clients.synthesis.SynthesisClientInterface import SynthesisTransportError
from shared.models.synthesis import SynthesisRequest

router = APIRouter(prefix="/generate", tags=["generate"])

# upstream failures are reported as bad gateway, undecodable payloads as unprocessable
_UPSTREAM_KINDS = {GenerationErrorKind.SERVER_ERROR, GenerationErrorKind.NOT_FOUND}


@router.post("")
async def generate_document(request: Request, body: SynthesisRequest) -> Response:
    """Generate a document through the synthesis workflow and return it as PDF.

    Args:
        request (Request): FastAPI request (provides app.state.generation_service).
        body (SynthesisRequest): Form data forwarded to the workflow.

    Returns:
        Response: The document bytes. ``X-Document-Verified`` is "false" for a
        degraded success, ``X-History-Entry`` names the stored history entry.

    Raises:
        HTTPException: 502 if the workflow failed or sent no document,
            422 if the document could not be decoded.
    """
    generation_service = request.app.state.generation_service
    try:
        result = await generation_service.do_generate(body)
    except SynthesisTransportError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except GenerationError as e:
        status_code = 502 if e.kind in _UPSTREAM_KINDS else 422
        raise HTTPException(status_code=status_code, detail={"kind": e.kind.value, "message": e.message})

    headers = {
        "Content-Disposition": f'inline; filename="{result.filename}"',
        "X-Document-Verified": "true" if result.document.verified else "false",
    }
    if result.entry is not None:
        headers["X-History-Entry"] = result.entry.identifier
    return Response(content=result.document.content, media_type=result.document.media_type, headers=headers)
