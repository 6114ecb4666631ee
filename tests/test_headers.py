"""Tests for shared headers and the authenticated transport."""

import threading

from insforge.auth import HeaderAuth, SharedHeaders


def test_snapshot_is_a_copy():
    # Arrange
    shared = SharedHeaders({"apikey": "k"})

    # Act: mutate the snapshot
    snap = shared.snapshot()
    snap["apikey"] = "changed"

    # Assert: shared state untouched
    assert shared.get("apikey") == "k"


def test_set_authorization_uses_bearer_scheme():
    shared = SharedHeaders()

    shared.set_authorization("tok")

    assert shared.get("Authorization") == "Bearer tok"


def test_concurrent_readers_never_see_a_torn_map():
    # Arrange: writers keep the two headers equal, readers check they match
    shared = SharedHeaders({"Authorization": "Bearer 0", "X-Token": "0"})
    torn: list[dict] = []
    stop = threading.Event()

    def writer(n: int):
        for i in range(500):
            value = f"{n}-{i}"
            shared.update({"Authorization": f"Bearer {value}", "X-Token": value})

    def reader():
        while not stop.is_set():
            snap = shared.snapshot()
            if snap["Authorization"] != f"Bearer {snap['X-Token']}":
                torn.append(snap)

    readers = [threading.Thread(target=reader) for _ in range(4)]
    writers = [threading.Thread(target=writer, args=(n,)) for n in range(4)]

    # Act
    for t in readers + writers:
        t.start()
    for t in writers:
        t.join()
    stop.set()
    for t in readers:
        t.join()

    # Assert
    assert torn == []


async def test_authenticated_transport_reads_headers_per_request(router, transport):
    # Arrange
    shared = SharedHeaders({"Authorization": "Bearer key", "apikey": "key"})
    secured = HeaderAuth(shared).decorate(transport)
    router.add("GET", "/api/ping", json={})

    # Act: swap the token between two requests
    await secured.arequest("GET", "/api/ping")
    shared.set_authorization("user-token")
    await secured.arequest("GET", "/api/ping")

    # Assert: second request sees the new token
    assert router.requests[0].headers["Authorization"] == "Bearer key"
    assert router.requests[1].headers["Authorization"] == "Bearer user-token"


async def test_per_request_headers_win(router, transport):
    shared = SharedHeaders({"Content-Type": "text/plain", "apikey": "key"})
    secured = HeaderAuth(shared).decorate(transport)
    router.add("GET", "/api/ping", json={})

    await secured.arequest("GET", "/api/ping", headers={"Content-Type": "application/json"})

    assert router.last.headers["Content-Type"] == "application/json"
    assert router.last.headers["apikey"] == "key"
