"""
Name: RPC Request Middleware

Responsibilities:
  - Assign a correlation id (honour a well-formed inbound X-Request-Id)
  - Set request context for logging
  - Log one outcome line per call: RPC method, problem code, rpc_status
    and latency

Collaborators:
  - context.py: ContextVars for request-scoped data
  - rpc_routes.rpc_method: tags request.state.rpc_method
  - error_responses.app_exception_handler: tags error_code / rpc_status
  - logger.py: Structured logging

Constraints:
  - Must be the outermost application middleware (added last)
  - Must clear context after response
  - Outcome tags travel on request.state; endpoint ContextVars do not
    flow back into BaseHTTPMiddleware

Notes:
  - Untagged non-2xx responses (e.g. 404 on an unknown path) log code
    "HTTP_<status>"
"""

import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .context import (
    clear_context,
    http_method_var,
    http_path_var,
    request_id_var,
)
from .error_responses import RPC_STATUS, ErrorCode
from .logger import logger

REQUEST_ID_HEADER = "X-Request-Id"
OK_CODE = "OK"
OK_RPC_STATUS = 0

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_request_id(inbound: str | None) -> str:
    """R: Reuse the caller's id when it is safe to echo, else mint a UUID4."""
    if inbound and _REQUEST_ID_PATTERN.match(inbound):
        return inbound
    return str(uuid.uuid4())


def _outcome(request: Request, status_code: int) -> tuple[str, int]:
    code = getattr(request.state, "error_code", None)
    if code is not None:
        return code, getattr(request.state, "rpc_status", RPC_STATUS[ErrorCode.INTERNAL])
    if status_code < 400:
        return OK_CODE, OK_RPC_STATUS
    return f"HTTP_{status_code}", RPC_STATUS[ErrorCode.INTERNAL]


class RpcRequestMiddleware(BaseHTTPMiddleware):
    """
    R: Establishes request context and logs the outcome of each call.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        request_id_var.set(request_id)
        http_method_var.set(request.method)
        http_path_var.set(request.url.path)
        request.state.request_id = request_id

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception(
                "rpc failed",
                extra={
                    "rpc_method": getattr(request.state, "rpc_method", None),
                    "code": ErrorCode.INTERNAL.value,
                    "rpc_status": RPC_STATUS[ErrorCode.INTERNAL],
                    "latency_ms": _elapsed_ms(start_time),
                    "error": str(exc),
                },
            )
            raise
        else:
            response.headers[REQUEST_ID_HEADER] = request_id
            code, rpc_status = _outcome(request, response.status_code)
            log = logger.info if code == OK_CODE else logger.warning
            log(
                "rpc completed",
                extra={
                    "rpc_method": getattr(request.state, "rpc_method", None),
                    "code": code,
                    "rpc_status": rpc_status,
                    "status_code": response.status_code,
                    "latency_ms": _elapsed_ms(start_time),
                },
            )
            return response
        finally:
            clear_context()


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)
