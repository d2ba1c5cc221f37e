from fastapi import Request
import time
import uuid
import logging

from guardian.utils.logging import operation_context, request_id_context

logger = logging.getLogger(__name__)


class LoggingMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        request_id = str(uuid.uuid4())
        request_id_context.set(request_id)
        start_time = time.time()
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            process_time = time.time() - start_time
            logger.info(
                f"{request.method} {request.url.path} - "
                f"{status_code} - {process_time:.3f}s - "
                f"{request.client.host if request.client else 'unknown'}"
            )
            request_id_context.set('')
            operation_context.set('')
