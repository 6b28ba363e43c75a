"""In-memory stand-ins for the feed transport and message builders."""

import asyncio
import json


def book_message(bids, asks, timestamp=1700000000000, message_type="snapshot"):
    return json.dumps({
        "type": message_type,
        "data": {"bids": bids, "asks": asks, "timestamp": timestamp}
    })


class FakeWebSocket:
    """Yields queued messages, then fails, ends, or stays open until closed."""

    def __init__(self, messages=(), error=None, hold_open=False, connect_error=None):
        self.messages = list(messages)
        self.error = error
        self.hold_open = hold_open
        self.connect_error = connect_error
        self.closed = False
        self._closed_event = asyncio.Event()

    async def __aenter__(self):
        if self.connect_error is not None:
            raise self.connect_error
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True
        return False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for message in self.messages:
            yield message
            await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        if self.hold_open:
            await self._closed_event.wait()

    async def close(self):
        self.closed = True
        self._closed_event.set()


class FakeConnector:
    """Drop-in for websockets.connect handing out scripted connections in order."""

    def __init__(self, *sockets):
        self.sockets = list(sockets)
        self.calls = []
        self.handed_out = []

    def __call__(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.sockets:
            socket = self.sockets.pop(0)
        else:
            socket = FakeWebSocket(hold_open=True)
        self.handed_out.append(socket)
        return socket
