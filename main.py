from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import os

from core.config import logger, HOST, PORT, ALLOWED_ORIGINS, PUBLIC_DIR  # type: ignore
from core.errors import SignupError, INVALID_EMAIL_MESSAGE

# Routers
from routers import signups  # type: ignore
from utils.email_store import email_store

app = FastAPI(title="Sourdough Signups")

# ---- CORS setup ----
# Lead-capture forms may be embedded anywhere; default is any origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials="*" not in ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

_SIGNUP_PATHS = ("/api/newsletter", "/api/discount")


# ---- Error rendering ----
@app.exception_handler(SignupError)
async def signup_error_handler(request: Request, exc: SignupError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse({"success": False, "message": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def payload_error_handler(request: Request, exc: RequestValidationError):
    # Unparseable signup bodies count as a missing email
    if request.url.path in _SIGNUP_PATHS:
        return JSONResponse({"success": False, "message": INVALID_EMAIL_MESSAGE}, status_code=400)
    return await request_validation_exception_handler(request, exc)


# ---- Include routers ----
app.include_router(signups.router)


@app.on_event("startup")
async def _init_email_store():
    await email_store.initialize()
    logger.info(f"Server running on http://localhost:{PORT}")
    logger.info(f"Admin endpoint: http://localhost:{PORT}/api/emails")


# ---- Static mount (front-end site, optional) ----
# Mounted last so the /api routes above always win
if os.path.isdir(PUBLIC_DIR):
    app.mount("/", StaticFiles(directory=PUBLIC_DIR, html=True), name="public")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT)
