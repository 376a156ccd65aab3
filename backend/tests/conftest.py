import json

import pytest

from rendezvous.broker import Broker


class FakeTransport:
    """Транспорт в памяти: запоминает отправленное."""

    def __init__(self):
        self.sent: list[str] = []
        self.live = True
        self.closed = False

    @property
    def is_live(self) -> bool:
        return self.live and not self.closed

    def send_text(self, text: str) -> None:
        self.sent.append(text)

    def close(self) -> None:
        self.closed = True

    def messages(self) -> list[dict]:
        return [json.loads(t) for t in self.sent]

    def types(self) -> list[str]:
        return [m["type"] for m in self.messages()]

    def drain(self) -> list[dict]:
        out = self.messages()
        self.sent.clear()
        return out


@pytest.fixture()
def broker():
    return Broker()


@pytest.fixture()
def connect(broker):
    def _connect():
        return broker.connect(FakeTransport())
    return _connect


@pytest.fixture()
def send(broker):
    def _send(conn, **payload):
        broker.handle_message(conn, json.dumps(payload))
    return _send
