import threading
from types import SimpleNamespace

from sweepscope.mqtt_client import RadarMQTT


def _msg(text):
    return SimpleNamespace(payload=text.encode())


def _drain(q):
    out = []
    while not q.empty():
        out.append(q.get_nowait())
    return out


def test_payload_records_are_queued():
    m = RadarMQTT("127.0.0.1", 1883, "sweepscope/samples")
    m._on_msg(None, None, _msg("10,100\n 20 , 200 \r\n"))
    assert _drain(m.q) == [(10, 100), (20, 200)]


def test_malformed_payload_is_dropped():
    m = RadarMQTT("127.0.0.1", 1883, "sweepscope/samples")
    m._on_msg(None, None, _msg("90,abc"))
    m._on_msg(None, None, _msg("250,10\n\n"))
    m._on_msg(None, None, SimpleNamespace(payload=b"\xff\xfe"))
    assert m.q.empty()


def test_worker_delivers_to_sample_callback():
    m = RadarMQTT("127.0.0.1", 1883, "sweepscope/samples")
    got, done = [], threading.Event()

    def collect(angle, distance):
        got.append((angle, distance))
        if len(got) == 2:
            done.set()

    m.on_sample(collect)
    m._on_msg(None, None, _msg("1,2\n3,4"))
    worker = threading.Thread(target=m._worker_loop, daemon=True)
    worker.start()
    assert done.wait(timeout=2)
    m._stop.set()
    worker.join(timeout=2)
    assert got == [(1, 2), (3, 4)]


def test_start_leaves_connecting_to_the_network_thread(monkeypatch):
    m = RadarMQTT("10.255.255.1", 1883, "sweepscope/samples")
    calls = []
    monkeypatch.setattr(m.cli, "connect", lambda *a, **kw: calls.append("connect"))
    monkeypatch.setattr(m.cli, "connect_async", lambda *a, **kw: calls.append(("async",) + a))
    monkeypatch.setattr(m.cli, "loop_start", lambda: calls.append("loop"))
    m.start()
    try:
        assert calls == [("async", "10.255.255.1", 1883, 60), "loop"]
        assert m.is_running
    finally:
        m.stop()
    assert not m.is_running


def test_bad_broker_address_reports_disconnected(monkeypatch):
    m = RadarMQTT("", 1883, "sweepscope/samples")

    def reject(*a, **kw):
        raise ValueError("Invalid host.")

    monkeypatch.setattr(m.cli, "connect_async", reject)
    status = []
    m.on_status_change(status.append)
    m.start()
    assert status == [False]
    assert not m.is_running


def test_failed_connect_attempt_reports_disconnected():
    m = RadarMQTT("127.0.0.1", 1883, "sweepscope/samples")
    status = []
    m.on_status_change(status.append)
    m._on_connect_fail(None, None)
    assert status == [False]
    assert not m.connected


def test_connect_subscribes_and_reports_status():
    m = RadarMQTT("127.0.0.1", 1883, "radar/t")
    subscribed, status = [], []
    m.on_status_change(status.append)
    m._on_connect(SimpleNamespace(subscribe=subscribed.append), None, {}, 0, None)
    m._on_disconnect(None, None, {}, 0, None)
    assert subscribed == ["radar/t"]
    assert status == [True, False]
