from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .database import engine, Base
from .errors import ResumeAIError, ValidationError
from . import models  # noqa: F401  registers the tables on Base
from .api.user import resumes, analyze, payment
from .api.auth import router as auth_router
from .api.webhook import router as webhook_router
from .utils.logger import get_logger

logger = get_logger("resumeai.api")

# This creates the tables. For production, use Alembic migrations.
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="ResumeAI",
    description="API for building resumes, scoring them for ATS compatibility, and buying download plans.",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ResumeAIError)
async def resumeai_error_handler(request: Request, exc: ResumeAIError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies get the same {"detail", "kind"} shape as service errors
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    error = ValidationError(problems or "Invalid request")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# --- Mount Routers ---

app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
app.include_router(resumes.router, prefix="/api/resumes", tags=["Resumes"])
app.include_router(analyze.router, prefix="/api", tags=["ATS"])
app.include_router(payment.router, prefix="/api/payment", tags=["Payment"])
app.include_router(webhook_router, prefix="/api/payment", tags=["Payment"])


@app.get("/api/health", tags=["System"])
def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("resumeai.main:app", host="0.0.0.0", port=5000)
