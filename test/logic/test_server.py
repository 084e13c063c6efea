import json
import threading

import pytest
import zmq

import painlab_nidaq.system.sysconfig as sysconfig
import painlab_nidaq.util
from painlab_nidaq.device import MockDAQ
from painlab_nidaq.server import MSG_KIND, build_device, run_device
from painlab_nidaq.util import TEST_LOGLEVEL


@pytest.fixture()
def hub():
    context = zmq.Context()
    socket = context.socket(zmq.ROUTER)
    socket.setsockopt(zmq.LINGER, 0)
    socket.setsockopt(zmq.RCVTIMEO, 5000)
    port = socket.bind_to_random_port("tcp://127.0.0.1")
    yield socket, port
    socket.close()
    context.term()


def test_build_mock_device(single_config):
    assert isinstance(build_device(single_config, mock=True), MockDAQ)


@pytest.mark.slow
def test_run_device_with_mock(hub, tmp_path, monkeypatch):
    socket, port = hub
    monkeypatch.setattr(sysconfig, "USER_CONFIG_DIR", tmp_path / "user")
    (tmp_path / sysconfig.NETWORK_CONFIG_FILE).write_text(
        json.dumps({"host": "127.0.0.1", "port": port}), encoding="utf-8"
    )
    stop = threading.Event()
    runner = threading.Thread(
        target=run_device,
        kwargs=dict(
            config_dir=tmp_path,
            mock=True,
            settle_delay_s=0.0,
            log_to_file=False,
            log_to_stdout=True,
            log_level=TEST_LOGLEVEL,
            stop_event=stop,
        ),
        daemon=True,
    )
    runner.start()
    try:
        identity, kind, payload = socket.recv_multipart()
        assert kind == MSG_KIND.DESCRIPTOR
        json.loads(payload)

        socket.send_multipart(
            [identity, MSG_KIND.CONTROL, b'{"normalised_current_level": 0.4}']
        )
        shock_ts = -1
        for _ in range(500):
            _, kind, payload = socket.recv_multipart()
            assert kind == MSG_KIND.DATA
            shock_ts = json.loads(payload)["last_shock_on_device"]
            if shock_ts != -1:
                break
        assert shock_ts > 0
    finally:
        stop.set()
        runner.join(10.0)
        # run_device tears down the log sinks on exit
        painlab_nidaq.util.start_device_log(
            log_to_file=False, log_to_stdout=True, log_level=TEST_LOGLEVEL
        )
    assert not runner.is_alive()
