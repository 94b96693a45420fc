import threading

import pytest

from conftest import FakeConnection
from rasterpos.errors import ChannelClosedError, ProtocolError
from rasterpos.transport import ChannelState, LpdChannel, PrintJob


def _channel(connection, **kwargs):
    kwargs.setdefault("host_name", "printhost.example.com")
    kwargs.setdefault("user_name", "alice")
    return LpdChannel(connection, **kwargs)


def test_writes_are_buffered_until_close(acking_connection):
    channel = _channel(acking_connection)

    assert channel.write(b"\x1b@") == 2
    assert channel.write(b"hello") == 5

    assert acking_connection.writes == []
    assert acking_connection.close_count == 0
    assert channel.buffered == 7
    assert channel.state is ChannelState.OPEN


def test_successful_flush_sends_three_stages_in_order(acking_connection):
    channel = _channel(acking_connection, queue="receipts", ack_timeout=7.5)
    channel.write(b"\x1b@")
    channel.write(b"payload")

    channel.close()

    job = channel.last_job
    assert len(acking_connection.writes) == 3
    stage1, stage2, stage3 = acking_connection.writes
    assert stage1 == b"\x02receipts\n"

    control = job.control_file()
    assert stage2 == b"\x02" + f"{len(control)} {job.control_file_name}\n".encode() + control + b"\x00"

    data = b"\x1b@payload"
    assert stage3 == b"\x03" + f"{len(data)} {job.data_file_name}\n".encode() + data + b"\x00"

    assert acking_connection.read_timeouts == [7.5, 7.5, 7.5]
    assert acking_connection.close_count == 1
    assert channel.buffered == 0
    assert channel.state is ChannelState.CLOSED


def test_control_file_contents(acking_connection):
    channel = _channel(acking_connection)
    channel.write(b"x")
    channel.close()

    job = channel.last_job
    suffix = f"{job.job_id % 1000:03d}printhost"
    assert job.control_file_name == "cfA" + suffix
    assert job.data_file_name == "dfA" + suffix
    assert job.control_file() == (
        "Hprinthost.example.com\n"
        "Palice\n"
        f"Jescpos-{job.job_id}\n"
        f"NdfA{suffix}\n"
        f"UdfA{suffix}\n"
    ).encode()


def test_default_queue_is_lp(acking_connection):
    channel = _channel(acking_connection, queue=None)
    channel.write(b"x")
    channel.close()

    assert acking_connection.writes[0] == b"\x02lp\n"


def test_rejected_control_file_aborts_before_data_file():
    connection = FakeConnection(acks=[b"\x00", b"\x01", b"\x00"])
    channel = _channel(connection)
    channel.write(b"data")

    with pytest.raises(ProtocolError) as excinfo:
        channel.close()

    assert excinfo.value.stage == 2
    assert len(connection.writes) == 2
    assert not connection.writes[-1].startswith(b"\x03")
    assert connection.close_count == 1
    assert channel.state is ChannelState.CLOSED


def test_missing_ack_is_a_protocol_error():
    connection = FakeConnection(acks=[])
    channel = _channel(connection)
    channel.write(b"data")

    with pytest.raises(ProtocolError) as excinfo:
        channel.close()

    assert excinfo.value.stage == 1
    assert len(connection.writes) == 1
    assert connection.close_count == 1


def test_ack_timeout_is_a_protocol_error():
    connection = FakeConnection(acks=[b"\x00", b"\x00", TimeoutError("timed out")])
    channel = _channel(connection)
    channel.write(b"data")

    with pytest.raises(ProtocolError) as excinfo:
        channel.close()

    assert excinfo.value.stage == 3
    assert "acknowledgment" in excinfo.value.reason
    assert isinstance(excinfo.value.__cause__, TimeoutError)
    assert connection.close_count == 1


def test_write_failure_during_stage_is_a_protocol_error():
    connection = FakeConnection(acks=[b"\x00", b"\x00", b"\x00"], fail_write_at=1)
    channel = _channel(connection)
    channel.write(b"data")

    with pytest.raises(ProtocolError) as excinfo:
        channel.close()

    assert excinfo.value.stage == 2
    assert isinstance(excinfo.value.__cause__, ConnectionResetError)
    assert connection.close_count == 1


def test_close_is_idempotent(acking_connection):
    channel = _channel(acking_connection)
    channel.write(b"data")
    channel.close()
    writes = list(acking_connection.writes)

    channel.close()

    assert acking_connection.writes == writes
    assert acking_connection.close_count == 1


def test_close_after_failure_is_a_noop():
    connection = FakeConnection(acks=[b"\x05"])
    channel = _channel(connection)
    channel.write(b"data")
    with pytest.raises(ProtocolError):
        channel.close()

    channel.close()

    assert connection.close_count == 1
    assert len(connection.writes) == 1


def test_empty_buffer_skips_handshake(fake_connection):
    channel = _channel(fake_connection)

    channel.close()

    assert fake_connection.writes == []
    assert fake_connection.close_count == 1
    assert channel.last_job is None


def test_write_after_close_fails(acking_connection):
    channel = _channel(acking_connection)
    channel.close()

    with pytest.raises(ChannelClosedError):
        channel.write(b"late")


def test_context_manager_flushes(acking_connection):
    with _channel(acking_connection) as channel:
        channel.write(b"abc")

    assert len(acking_connection.writes) == 3
    assert acking_connection.close_count == 1


def test_concurrent_writes_are_all_delivered(acking_connection):
    channel = _channel(acking_connection)

    def writer(tag):
        for _ in range(100):
            channel.write(tag)

    threads = [threading.Thread(target=writer, args=(bytes([65 + i]),)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    channel.close()

    data = bytes(channel.last_job.payload)
    assert len(data) == 400
    for i in range(4):
        assert data.count(bytes([65 + i])) == 100


def test_print_job_short_host_and_names():
    job = PrintJob.create("lp", b"", host_name="box.lan", user_name="bob", job_id=123456)

    assert job.short_host == "box"
    assert job.job_name == "escpos-123456"
    assert job.control_file_name == "cfA456box"
    assert job.data_file_name == "dfA456box"


def test_print_job_defaults(monkeypatch):
    monkeypatch.setenv("USER", "carol")
    job = PrintJob.create("lp")

    assert job.user_name == "carol"
    assert job.host_name
    assert 0 <= job.job_id < 1_000_000


class _HeldAckConnection(FakeConnection):
    """Connection whose acknowledgment reads wait until ``release`` is set."""

    def __init__(self):
        super().__init__(acks=[b"\x00", b"\x00", b"\x00"])
        self.reading = threading.Event()
        self.release = threading.Event()

    def read(self, size, timeout=None):
        self.reading.set()
        self.release.wait(5)
        return super().read(size, timeout)


def test_write_racing_close_waits_for_flush_then_fails():
    connection = _HeldAckConnection()
    channel = _channel(connection)
    channel.write(b"before")
    outcome = {}

    def late_writer():
        try:
            channel.write(b"late")
            outcome["result"] = "written"
        except ChannelClosedError:
            outcome["result"] = "closed"
            outcome["writes_at_failure"] = len(connection.writes)

    closer = threading.Thread(target=channel.close)
    closer.start()
    assert connection.reading.wait(5)

    writer = threading.Thread(target=late_writer)
    writer.start()
    writer.join(timeout=0.2)
    # the write is held by the flush lock
    assert writer.is_alive()
    assert "result" not in outcome

    connection.release.set()
    closer.join(timeout=5)
    writer.join(timeout=5)

    assert outcome["result"] == "closed"
    assert outcome["writes_at_failure"] == 3
    assert bytes(channel.last_job.payload) == b"before"
    stage3 = connection.writes[2]
    assert stage3.startswith(b"\x03")
    assert b"before" in stage3
    assert b"late" not in stage3
    assert connection.close_count == 1
