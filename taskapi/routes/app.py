import json
from datetime import timedelta
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from taskapi.config import get_settings
from taskapi.exceptions import BadRequestError, TaskNotFoundError
from taskapi.logging_config import app_logger
from taskapi.services.task_manager import TaskRegistry
from taskapi.services.task_runner import LifecycleRunner

from .tasks_routes import tasks_router

MAX_LOG_BYTES = 2000


def _is_textual(content_type: str) -> bool:
    if not content_type:
        return False
    ct = content_type.lower()
    return ct.startswith("text/") or "application/json" in ct


def _safe_decode(body: bytes, content_type: str) -> str:
    """
    Compact JSON, plain text as is, anything else as <N bytes binary data>.
    """
    if not _is_textual(content_type):
        return f"<{len(body)} bytes binary data>"
    if "application/json" in content_type.lower():
        try:
            return json.dumps(json.loads(body), ensure_ascii=False, separators=(",", ":"))
        except ValueError:
            pass
    return body.decode("utf-8", errors="replace")


def _default_runner() -> LifecycleRunner:
    settings = get_settings()
    return LifecycleRunner(
        min_duration=timedelta(seconds=settings.task_min_duration_seconds),
        max_duration=timedelta(seconds=settings.task_max_duration_seconds),
    )


def create_app(
    registry: Optional[TaskRegistry] = None,
    runner: Optional[LifecycleRunner] = None,
) -> FastAPI:
    app = FastAPI(title="Task lifecycle API")
    app.state.registry = registry if registry is not None else TaskRegistry()
    app.state.runner = runner if runner is not None else _default_runner()

    @app.exception_handler(TaskNotFoundError)
    async def task_not_found_handler(request: Request, exc: TaskNotFoundError):
        app_logger.warning("%s %s: %s", request.method, request.url.path, exc)
        return PlainTextResponse(str(exc), status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(BadRequestError)
    async def bad_request_handler(request: Request, exc: BadRequestError):
        app_logger.warning("%s %s: %s", request.method, request.url.path, exc)
        return PlainTextResponse(str(exc), status_code=status.HTTP_400_BAD_REQUEST)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        req_body = await request.body()
        req_ct = request.headers.get("content-type", "")
        req_text = _safe_decode(req_body[:MAX_LOG_BYTES], req_ct) if req_body else ""
        app_logger.info(
            "REQUEST %s %s | content-type=%s | body=%s",
            request.method, str(request.url), req_ct, req_text,
        )

        response = await call_next(request)

        try:
            response_body = b""
            async for chunk in response.body_iterator:
                response_body += chunk

            async def new_body_iterator() -> AsyncIterator[bytes]:
                yield response_body
            response.body_iterator = new_body_iterator()

            resp_ct = response.headers.get("content-type", "")
            resp_text = _safe_decode(response_body[:MAX_LOG_BYTES], resp_ct) if response_body else ""
            app_logger.info(
                "RESPONSE %s %s | status=%s | content-type=%s | body=%s",
                request.method, str(request.url), response.status_code, resp_ct, resp_text,
            )
        except Exception:
            app_logger.exception("log_requests: failed to log response")

        return response

    @app.get("/ping")
    def ping():
        return {"status": "ok", "message": "Service is up"}

    app.include_router(tasks_router)
    return app


app = create_app()
