import time
import uuid
from fastapi import Request
from chauffeur_api.core.logger import get_logger

logger = get_logger("request_logger")

REQUEST_ID_HEADER = "X-Request-ID"


async def log_requests(request: Request, call_next):
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request.state.request_id = request_id
    client_ip = request.client.host if request.client else "unknown"

    start_time = time.time()
    logger.info(f"[{request_id}] Started request {request.method} {request.url.path} from {client_ip}")
    response = await call_next(request)
    duration = time.time() - start_time

    message = (
        f"[{request_id}] Completed request {request.method} {request.url.path} "
        f"with status={response.status_code} in {duration:.3f}s"
    )
    if response.status_code >= 500:
        logger.error(message)
    elif response.status_code >= 400:
        logger.warning(message)
    else:
        logger.info(message)

    response.headers[REQUEST_ID_HEADER] = request_id
    return response
