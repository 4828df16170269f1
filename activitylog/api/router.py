from fastapi import APIRouter, Depends, Query, Request, status
import orjson
import structlog
from .schemas import ClearResponse, LogListResponse, LogReceipt, LogStatsResponse
from ..event_models import LogFilter
from ..metrics import Metrics
from ..middleware.error_handler import failure_response
from ..services.stats import summarize
from ..store import ActivityLogStore

log = structlog.get_logger()

router = APIRouter(tags=["log"])

FORWARDING_HEADERS = ("x-forwarded-for", "x-real-ip", "cf-connecting-ip")


def get_store(request: Request) -> ActivityLogStore:
    return request.app.state.store


def get_metrics(request: Request) -> Metrics:
    return request.app.state.metrics


def _parse_flag(value: str | None) -> bool | None:
    if value is None:
        return None
    return value.strip().lower() == "true"


def log_filter(
    method: str | None = None,
    search: str | None = None,
    email_type: str | None = Query(None, alias="emailType"),
    is_email: str | None = Query(None, alias="isEmail"),
    is_scraper: str | None = Query(None, alias="isScraper"),
    source: str | None = None,
    scraper_status: str | None = Query(None, alias="status"),
    content_type: str | None = Query(None, alias="contentType"),
    sender_id: str | None = Query(None, alias="senderId"),
    session_id: str | None = Query(None, alias="sessionId"),
    sender_name: str | None = Query(None, alias="senderName"),
    recipient_id: str | None = Query(None, alias="recipientId"),
    recipient_name: str | None = Query(None, alias="recipientName"),
    recipient_email: str | None = Query(None, alias="recipientEmail"),
) -> LogFilter:
    """Map query-string parameters onto a LogFilter; flags are true only for 'true'."""
    return LogFilter(
        method=method,
        search=search,
        email_type=email_type,
        is_email=_parse_flag(is_email),
        is_scraper=_parse_flag(is_scraper),
        source=source,
        status=scraper_status,
        content_type=content_type,
        sender_id=sender_id,
        session_id=session_id,
        sender_name=sender_name,
        recipient_id=recipient_id,
        recipient_name=recipient_name,
        recipient_email=recipient_email,
    )


def client_address(request: Request) -> str:
    """Best-effort originating address: proxy headers first, then the socket peer."""
    for header in FORWARDING_HEADERS:
        value = request.headers.get(header)
        if value:
            return value.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def decode_body(raw: bytes):
    """Decode a JSON body, or None when it is empty or not valid JSON."""
    if not raw:
        return None
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        log.info("log.body_undecodable", error=str(e), size=len(raw))
        return None


@router.api_route(
    "/log",
    methods=["POST", "PUT", "PATCH"],
    response_model=LogReceipt,
    status_code=status.HTTP_201_CREATED,
)
async def append_log(
    request: Request,
    store: ActivityLogStore = Depends(get_store),
    metrics: Metrics = Depends(get_metrics),
):
    """
    Capture the submission, whatever its body.

    Undecodable bodies are stored with a null body rather than rejected.
    """
    try:
        raw = await request.body()
        event = store.append(
            decode_body(raw),
            method=request.method,
            headers=dict(request.headers),
            client_address=client_address(request),
            request_url=str(request.url),
        )
        metrics.record_event_logged(event, size_bytes=len(raw), stored=len(store))
        return LogReceipt.for_event(event)
    except Exception as e:
        log.error("log.append_failed", error=str(e), error_type=type(e).__name__, exc_info=True)
        return failure_response("Failed to log request", status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("/log", response_model=LogListResponse, response_model_exclude_unset=True)
async def list_log(
    flt: LogFilter = Depends(log_filter),
    store: ActivityLogStore = Depends(get_store),
):
    events = store.query(flt)
    return LogListResponse(requests=events, total=len(events))


@router.get("/log/stats", response_model=LogStatsResponse)
async def log_stats(
    flt: LogFilter = Depends(log_filter),
    store: ActivityLogStore = Depends(get_store),
):
    """Sender, recipient and per-source activity over the matching events."""
    return summarize(store.query(flt))


@router.delete("/log", response_model=ClearResponse)
async def clear_log(
    store: ActivityLogStore = Depends(get_store),
    metrics: Metrics = Depends(get_metrics),
):
    cleared = store.clear()
    metrics.record_cleared(cleared)
    return ClearResponse(cleared=cleared)
