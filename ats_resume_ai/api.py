"""
HTTP boundary for résumé parsing.

POST /parse-resume takes a multipart upload with exactly one `file` field and returns
the JSON envelope {success, candidate?, found_fields?, message?, error?}.
"""

from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from config import CORS_ORIGINS, PipelineConfig
from cv_pipeline.cv_parser import ResumeParsingPipeline
from cv_pipeline.errors import FileTooLarge, ResumeParseError
from schemas.document import UploadedDocument
from schemas.outcome import ErrorKind, ParseFailure, ParseResponse
from utils.logger import get_logger

logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

# ErrorKind -> HTTP status, taken from the exception classes
STATUS_BY_KIND = {cls.kind: cls.http_status for cls in ResumeParseError.__subclasses__()}
STATUS_BY_KIND[ErrorKind.UNEXPECTED] = 500


@lru_cache()
def get_pipeline() -> ResumeParsingPipeline:
    return ResumeParsingPipeline(PipelineConfig.from_env())


app = FastAPI(
    title="ATS Resume Parser API",
    description="Extracts structured candidate data from uploaded résumés",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, error: str) -> JSONResponse:
    body = ParseResponse(success=False, error=error).to_json()
    return JSONResponse(status_code=status_code, content=body, headers=CORS_HEADERS)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap framework errors (404, 405) in the same envelope."""
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return _error_response(exc.status_code, message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(400, "Invalid request")


@app.options("/parse-resume")
async def parse_resume_preflight() -> PlainTextResponse:
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@app.post("/parse-resume")
async def parse_resume(
    request: Request,
    pipeline: ResumeParsingPipeline = Depends(get_pipeline),
) -> JSONResponse:
    """Parse one uploaded résumé into a candidate record."""
    try:
        form = await request.form()
    except MultiPartException as e:
        logger.info("Rejected malformed multipart body: %s", e)
        return _error_response(400, "No file provided")

    files = [f for f in form.getlist("file") if isinstance(f, UploadFile)]
    if not files:
        return _error_response(400, "No file provided")
    if len(files) > 1:
        return _error_response(400, "Only one file can be uploaded at a time")

    upload = files[0]
    limit = pipeline.config.max_upload_bytes
    # The form parser has already spooled the part; read one byte past the limit to detect oversize files
    content = await upload.read(limit + 1)
    await upload.close()
    if len(content) > limit:
        error = FileTooLarge(f"File size exceeds {limit // (1024 * 1024)}MB limit")
        return _error_response(error.http_status, error.message)

    document = UploadedDocument(
        content=content,
        mime_type=upload.content_type or "",
        filename=upload.filename or "",
    )
    outcome = await pipeline.parse(document)
    status_code = 200
    if isinstance(outcome, ParseFailure):
        status_code = STATUS_BY_KIND.get(outcome.reason, 500)
    return JSONResponse(
        status_code=status_code,
        content=ParseResponse.from_outcome(outcome).to_json(),
        headers=CORS_HEADERS,
    )


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancer"""
    return {"status": "healthy"}
