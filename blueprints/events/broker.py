# blueprints/events/broker.py
from __future__ import annotations
import itertools
import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Any

log = logging.getLogger(__name__)

ASSIGNMENT_CREATED = "assignment_created"
SUBMISSION_CREATED = "submission_created"
SUBMISSION_UPDATED = "submission_updated"

# сигнал подписчику: брокер закрыт, поток надо завершить
CLOSED = object()


@dataclass
class Subscriber:
    id: int
    queue: queue.Queue
    dropped: int = field(default=0)


class EventBroker:
    """Реестр подключённых SSE-клиентов. Живёт столько же, сколько приложение.

    Доставка best-effort: у каждого клиента своя ограниченная очередь,
    переполненная очередь пропускается и на других клиентов не влияет.
    """

    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._subs: dict[int, Subscriber] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._closed = False

    def subscribe(self) -> Subscriber:
        sub = Subscriber(id=next(self._ids), queue=queue.Queue(maxsize=self.queue_size))
        with self._lock:
            self._subs[sub.id] = sub
        log.info("sse client connected", extra={"event": "sse_connect", "client_id": sub.id})
        return sub

    def unsubscribe(self, sub: Subscriber) -> None:
        with self._lock:
            self._subs.pop(sub.id, None)
        log.info("sse client disconnected", extra={"event": "sse_disconnect", "client_id": sub.id})

    @property
    def client_count(self) -> int:
        with self._lock:
            return len(self._subs)

    def publish(self, type_: str, data: Any) -> int:
        """Разослать событие всем клиентам. Возвращает число успешных доставок."""
        message = {"type": type_, "data": data}
        with self._lock:
            subs = list(self._subs.values())
        delivered = 0
        for sub in subs:
            try:
                sub.queue.put_nowait(message)
            except queue.Full:
                sub.dropped += 1
                log.warning("sse queue full, event dropped",
                            extra={"event": "sse_drop", "client_id": sub.id})
                continue
            delivered += 1
        return delivered

    def close(self) -> None:
        with self._lock:
            self._closed = True
            subs = list(self._subs.values())
            self._subs.clear()
        for sub in subs:
            try:
                sub.queue.put_nowait(CLOSED)
            except queue.Full:
                # клиент всё равно отвалится по таймауту keepalive
                pass

    @property
    def closed(self) -> bool:
        return self._closed
