import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from healthlog.api import insights

logger = logging.getLogger(__name__)

app = FastAPI(title="healthlog", version="0.1.0")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log rejected payloads before returning the usual 422 response."""
    logger.warning(
        "Validation failed: path=%s, errors=%d", request.url.path, len(exc.errors())
    )
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


# Include routers
app.include_router(insights.router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
