import random

from rendezvous.sessions import is_valid_room_id


def test_first_player_waits(broker, connect):
    a = connect()
    assert broker.queue.enqueue_public(a, "Alice") is None
    assert len(broker.queue) == 1
    assert a.transport.types() == ["waiting"]


def test_second_player_is_paired_with_oldest(broker, connect):
    a, b = connect(), connect()
    broker.queue.enqueue_public(a, "Alice")
    a.transport.drain()

    session = broker.queue.enqueue_public(b, "Bob")

    assert session is not None
    assert not session.is_private
    assert is_valid_room_id(session.id)
    assert session.participants == [a, b]
    assert len(broker.queue) == 0
    (to_a,) = a.transport.messages()
    (to_b,) = b.transport.messages()
    assert to_a == {"type": "matchFound", "roomId": session.id, "isCaller": True, "opponentName": "Bob"}
    assert to_b == {"type": "matchFound", "roomId": session.id, "isCaller": False, "opponentName": "Alice"}


def test_dead_entries_are_pruned_before_pairing(broker, connect):
    a, b, c = connect(), connect(), connect()
    broker.queue.enqueue_public(a, "Alice")
    a.transport.live = False
    broker.queue.enqueue_public(b, "Bob")
    assert len(broker.queue) == 1
    assert len(broker.sessions) == 0

    session = broker.queue.enqueue_public(c, "Carol")
    assert session.participants == [b, c]


def test_enqueue_twice_keeps_single_entry(broker, connect):
    a = connect()
    broker.queue.enqueue_public(a, "Alice")
    broker.queue.enqueue_public(a, "Alice")
    assert len(broker.queue) == 1
    assert len(broker.sessions) == 0
    assert a.transport.types() == ["waiting", "waiting"]


def test_dequeue(broker, connect):
    a, b = connect(), connect()
    broker.queue.enqueue_public(a, "Alice")
    assert broker.queue.dequeue(a) is True
    assert broker.queue.dequeue(a) is False
    assert broker.queue.enqueue_public(b, "Bob") is None


def test_random_enqueue_dequeue_keeps_invariants(broker, connect):
    rng = random.Random(7)
    conns = [connect() for _ in range(12)]
    sessions = []
    for _ in range(300):
        conn = rng.choice(conns)
        if rng.random() < 0.6:
            if conn.session_id is None:
                session = broker.queue.enqueue_public(conn, "P")
                if session is not None:
                    sessions.append(session)
        else:
            broker.queue.dequeue(conn)
        waiting = broker.queue._waiting
        assert len(waiting) == len({id(c) for c in waiting})
        if rng.random() < 0.2 and sessions:
            broker.sessions.remove(sessions.pop(0).id)

    for session in sessions:
        first, second = session.participants
        assert first is not second
