import http.client
import logging
import sys
import urllib.error
import urllib.request
from typing import Iterable, Optional, Protocol, TextIO

from winevt.types import EventRecord


logger = logging.getLogger("winevt.sink")


class SinkError(RuntimeError):
    pass


# ---------- Sink Interface ----------

class LogSink(Protocol):
    def send(self, record: EventRecord) -> None:
        ...


def send_all(sink: LogSink, records: Iterable[EventRecord]) -> int:
    sent = 0
    for record in records:
        sink.send(record)
        sent += 1
    return sent


# ---------- Console ----------

class ConsoleSink:
    """Writes one JSON document per line."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def send(self, record: EventRecord) -> None:
        self.stream.write(record.to_json() + "\n")
        self.stream.flush()


# ---------- HTTP ----------

class HttpLogSink:
    def __init__(
        self,
        url: str,
        app: str,
        timeout: int = 10,
    ):
        if not url:
            raise ValueError("sink URL not set")

        self.url = url
        self.app = app
        self.timeout = timeout

    def send(self, record: EventRecord) -> None:
        data = record.to_json().encode("utf-8")

        req = urllib.request.Request(
            self.url,
            data=data,
            headers={
                "Content-Type": "application/json",
                "X-Log-App": self.app,
            },
            method="POST",
        )

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                status = resp.status
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            raise SinkError(f"POST {self.url} failed: {e}") from e

        if status >= 300:
            raise SinkError(f"POST {self.url} returned HTTP {status}")

        logger.debug("sent record %d (HTTP %d)", record.identity, status)
