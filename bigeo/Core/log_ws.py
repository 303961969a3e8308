"""
Log WebSocket Management Module
================================

Real-time log streaming for the shipment backend. Every server-side log
line is printed to the console with a `[TAG]` prefix and, when monitoring
clients are connected to `/logs`, broadcast to them as JSON.

Message Format:
--------------
    {
        "msg_type": "log" | "error" | "warning",
        "message": "[SHIPMENTS] Created shipment id=4 device_id=iot-00042",
        "timestamp": "2025-12-01T10:30:00Z"
    }

Usage Example:
-------------
    from bigeo.Core.log_ws import log_from_thread

    log_from_thread("[SHIPMENTS] Created shipment id=4")
    log_from_thread("[STORE] Insert failed: storage unavailable", "error")

Thread Safety:
-------------
Route handlers are plain `def` functions executed in the threadpool, so
they always go through log_from_thread(), which schedules the broadcast on
the main loop.
"""

from datetime import datetime, timezone
from typing import Dict, Any
from fastapi import WebSocket
from .wsBase import WebSocketManager


LOG_LEVELS = ("log", "warning", "error")


def log_from_thread(message: str, msg_type: str = "log") -> Dict[str, Any]:
    """
    Thread-safe entry point for emitting a log message.

    Args:
        message: The log message content
        msg_type: One of "log", "warning", "error" (unknown values become "log")

    Returns:
        The payload that was printed and, if clients are connected, broadcast.
    """
    if msg_type not in LOG_LEVELS:
        msg_type = "log"

    payload: Dict[str, Any] = {
        "msg_type": msg_type,
        "message": str(message),
        "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
    }

    print(f"[{msg_type.upper()}] {payload['message']}")
    log_ws_manager.send_from_thread(payload)
    return payload


class LogWebSocketManager(WebSocketManager):
    """
    WebSocket manager for the `/logs` stream.

    Clients only listen; anything they send is echoed to the console.
    """

    async def handle_message(self, ws: WebSocket, message: str):
        print(f"[LOG-WS] Received message from client: {message}")


# ============================================================
# GLOBAL LOG WEBSOCKET MANAGER INSTANCE
# ============================================================
log_ws_manager = LogWebSocketManager()
