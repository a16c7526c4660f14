import logging
import threading
import uuid
from queue import Empty, Queue

import paho.mqtt.client as mqtt

from sweepscope.sources import SampleSource, parse_line

log = logging.getLogger(__name__)


class RadarMQTT(SampleSource):
    """
    Connects to the broker, parses `"<angle>,<distance>"` text payloads and
    hands the samples to the sample callback from a background worker
    thread, so slow consumers never stall the paho network loop.

    A payload may carry several newline-separated records.
    """

    def __init__(self, host, port, topic):
        super().__init__()
        self.host, self.port, self.topic = host, port, topic

        random_id = f"sweepscope-{uuid.uuid4().hex[:8]}"
        self.cli = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=random_id)
        self.cli.on_connect = self._on_connect
        self.cli.on_disconnect = self._on_disconnect
        self.cli.on_connect_fail = self._on_connect_fail
        self.cli.on_message = self._on_msg

        self.q = Queue()
        self._stop = threading.Event()
        self.worker = None

    def start(self):
        if self.is_running:
            return
        self._stop.clear()
        self.worker = threading.Thread(target=self._worker_loop, daemon=True,
                                       name="mqtt-worker")
        self.worker.start()
        # the network thread does the (possibly slow) connect and retries it
        try:
            self.cli.connect_async(self.host, self.port, 60)
        except (OSError, ValueError) as exc:
            log.error("mqtt: bad broker address %s:%s: %s", self.host, self.port, exc)
            self.stop()
            self._set_status(False)
            return
        self.cli.loop_start()

    def stop(self):
        self._stop.set()
        self.cli.loop_stop()
        self.cli.disconnect()
        if self.worker and self.worker.is_alive() and self.worker is not threading.current_thread():
            self.worker.join(timeout=1)

    @property
    def is_running(self):
        return bool(self.worker and self.worker.is_alive())

    def _on_connect(self, client, *_):
        client.subscribe(self.topic)
        log.info("mqtt: subscribed to %s on %s:%s", self.topic, self.host, self.port)
        self._set_status(True)

    def _on_disconnect(self, *_):
        self._set_status(False)

    def _on_connect_fail(self, *_):
        log.warning("mqtt: cannot reach %s:%s, retrying", self.host, self.port)
        self._set_status(False)

    def _on_msg(self, _cli, _userdata, msg):
        text = msg.payload.decode("utf-8", errors="ignore")
        for line in text.splitlines():
            sample = parse_line(line)
            if sample is None:
                if line.strip():
                    log.debug("mqtt: dropping malformed record %r", line)
                continue
            self.q.put_nowait(sample)

    def _worker_loop(self):
        while not self._stop.is_set():
            try:
                angle, distance = self.q.get(timeout=0.2)
            except Empty:
                continue
            self._emit(angle, distance)
