from .entities import decode_entity
from .exchange import ExchangeError, HttpRequest, HttpResponse, NetDirectory, ResponsePending, http_get
from .scanner import ScanState, ScanStep
from .stream import TextStream, collapse_newlines, html_to_text

__version__ = "1.0.0"

__all__ = [
    "ExchangeError",
    "HttpRequest",
    "HttpResponse",
    "NetDirectory",
    "ResponsePending",
    "ScanState",
    "ScanStep",
    "TextStream",
    "__version__",
    "collapse_newlines",
    "decode_entity",
    "html_to_text",
    "http_get",
]
