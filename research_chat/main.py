from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from research_chat.api.routes import chat, sessions
from research_chat.config import settings
from research_chat.errors import ResearchChatError, UnauthorizedError
from research_chat.services import logger as log_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    log_service.log_event(event_type="startup", message="research-chat started")
    yield
    log_service.log_event(event_type="shutdown", message="research-chat stopped")


app = FastAPI(
    title="research-chat",
    description="Web research with per-source and overall summaries",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UnauthorizedError)
async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    return JSONResponse(status_code=401, content={"error": "Unauthorized"})


@app.exception_handler(ResearchChatError)
async def research_chat_error_handler(request: Request, exc: ResearchChatError):
    log_service.log_event(
        event_type="request_failed",
        message="Request failed before reaching the route",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # The chat contract has no client-error status; bad bodies are internal errors.
    log_service.log_event(
        event_type="request_invalid",
        message="Request body failed validation",
        path=request.url.path,
        errors=str(exc.errors()),
    )
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


# Routes
app.include_router(chat.router)
app.include_router(sessions.router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "research-chat"}
