from .transport import ResponseFrame, DuplexTransport
from .websocket_transport import WebSocketDuplexTransport, to_response_frame

__all__ = ["DuplexTransport", "ResponseFrame", "WebSocketDuplexTransport", "to_response_frame"]
