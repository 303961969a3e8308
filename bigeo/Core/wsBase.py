"""
WebSocket Base Manager Module
==============================

Thread-safe foundation for WebSocket connection management. Request
handlers run in FastAPI's worker threads, so anything they broadcast has to
be scheduled onto the main event loop; this class owns that hand-off.

Architecture:
------------
- Thread-Safe Operations: Client list modifications are protected by a lock
- Lifecycle Management: Registration on connect, cleanup on disconnect
- Broadcasting: Messages go to every connected client; dead ones are dropped
- Event Loop Integration: send_from_thread() bridges sync handlers and asyncio

Usage Example:
-------------
    manager = WebSocketManager()
    manager.set_main_loop(asyncio.get_running_loop())

    @app.websocket("/custom")
    async def websocket_endpoint(ws: WebSocket):
        await manager.register(ws)
        try:
            while True:
                message = await ws.receive_text()
                await manager.handle_message(ws, message)
        finally:
            manager.unregister(ws)
"""

from fastapi import WebSocket
import asyncio
from typing import List, Optional, Dict, Any
import json
import threading


class WebSocketManager:
    """
    Base WebSocket manager for handling multiple concurrent client connections.

    Attributes:
        clients (List[WebSocket]): Currently active WebSocket connections
        main_loop (Optional[asyncio.AbstractEventLoop]): FastAPI's main event loop
        _lock (threading.Lock): Guards self.clients

    Lifecycle:
        1. Instantiate manager
        2. Call set_main_loop() during application startup
        3. Call register() when a client connects
        4. Call broadcast() / send_from_thread() to send messages
        5. Call unregister() when the client disconnects
    """

    def __init__(self):
        self.clients: List[WebSocket] = []
        self.main_loop: Optional[asyncio.AbstractEventLoop] = None
        self._lock = threading.Lock()

    def set_main_loop(self, loop: Optional[asyncio.AbstractEventLoop]):
        """
        Register FastAPI's main event loop.

        Must be called from the lifespan handler; without it send_from_thread()
        has nowhere to schedule the broadcast.
        """
        self.main_loop = loop

    async def register(self, ws: WebSocket):
        """
        Accept and register a new WebSocket client connection.

        The client is added before accept() so no message is lost between
        the handshake and registration. On handshake failure the client is
        unregistered and the exception re-raised.
        """
        with self._lock:
            if ws not in self.clients:
                self.clients.append(ws)

        try:
            await ws.accept()
            print(f"[WSBase] Client registered. Total clients: {len(self.clients)}")
        except Exception:
            self.unregister(ws)
            raise

    def unregister(self, ws: WebSocket):
        """Remove a client from the active list. Idempotent."""
        with self._lock:
            if ws in self.clients:
                self.clients.remove(ws)
                print(f"[WSBase] Client unregistered. Total clients: {len(self.clients)}")

    @property
    def has_clients(self) -> bool:
        with self._lock:
            return len(self.clients) > 0

    async def broadcast(self, message: Dict[str, Any]):
        """
        Send a JSON message to every connected client.

        The client list is snapshotted under the lock and the lock released
        before any I/O. Clients whose send fails are unregistered.
        """
        to_remove = []

        with self._lock:
            current_clients = list(self.clients)

        for ws in current_clients:
            try:
                await ws.send_text(json.dumps(message))
            except Exception:
                to_remove.append(ws)

        for ws in to_remove:
            self.unregister(ws)

    def send_from_thread(self, message: Dict[str, Any]) -> bool:
        """
        Schedule a broadcast on the main loop from any thread.

        Returns:
            bool: True if the broadcast was scheduled, False when there are
            no clients or the main loop is not running.
        """
        if not self.has_clients:
            return False

        loop = self.main_loop
        if loop is None or loop.is_closed():
            return False

        asyncio.run_coroutine_threadsafe(self.broadcast(message), loop)
        return True

    async def handle_message(self, ws: WebSocket, message: str):
        """
        Handle an incoming client message.

        Template method for subclasses; the base implementation ignores it.
        """
        return None
