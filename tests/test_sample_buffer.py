"""Tests for samples, node readings and the sample buffer."""

import threading
from datetime import datetime, timedelta

import pytest

from nodepush_client.buffer import SampleBuffer, SampleProducer
from nodepush_client.core import NodeReading, Sample, build_node_readings


def test_sample_from_dict():
    sample = Sample.from_dict({"id": "temp1", "data": {"celsius": 21.5}})

    assert sample.id == "temp1"
    assert sample.data == {"celsius": 21.5}
    assert sample.sensor_count() == 1


def test_sample_from_dict_without_data_is_empty():
    sample = Sample.from_dict({"id": "door"})

    assert sample.data == {}


@pytest.mark.parametrize("raw", [None, [], "temp1", {"data": {"a": 1}}, {"id": ""}, {"id": "x", "data": [1, 2]}])
def test_sample_from_dict_rejects_malformed_input(raw):
    with pytest.raises(ValueError):
        Sample.from_dict(raw)


def test_node_reading_wire_format():
    reading = NodeReading.from_sample(Sample(id="temp1", data={"celsius": 21.5}), mac="AA:BB")

    assert reading.to_dict() == {"mac": "AA:BB", "sensors": [{"name": "temp1-celsius", "value": 21.5}]}


def test_build_node_readings_distinguishes_no_data_from_empty_list():
    assert build_node_readings([], "AA:BB") is None
    assert build_node_readings([Sample(id="a"), Sample(id="b")], "AA:BB") is None

    readings = build_node_readings([Sample(id="a"), Sample(id="b", data={"x": 1})], "AA:BB")
    assert [reading.to_dict() for reading in readings] == [
        {"mac": "AA:BB", "sensors": []},
        {"mac": "AA:BB", "sensors": [{"name": "b-x", "value": 1}]},
    ]


def test_drain_all_returns_samples_in_order_and_clears():
    buffer = SampleBuffer()
    for i in range(5):
        buffer.add(Sample(id=f"s{i}", data={"v": i}))

    drained = buffer.drain_all()

    assert [sample.id for sample in drained] == ["s0", "s1", "s2", "s3", "s4"]
    assert buffer.is_empty()
    assert buffer.drain_all() == []

    stats = buffer.get_stats()
    assert stats["total_added"] == 5
    assert stats["total_drained"] == 5
    assert stats["current_size"] == 0


def test_add_data_validates_input():
    buffer = SampleBuffer()

    assert buffer.add_data({"id": "temp1", "data": {"celsius": 20}})
    assert buffer.size() == 1

    with pytest.raises(ValueError):
        buffer.add_data(["not", "a", "mapping"])
    assert buffer.size() == 1


def test_concurrent_producers_and_drains_lose_nothing():
    buffer = SampleBuffer()
    drained = []

    def produce(prefix):
        for i in range(200):
            buffer.add(Sample(id=f"{prefix}{i}", data={"v": i}))

    def drain():
        for _ in range(50):
            drained.extend(buffer.drain_all())

    threads = [threading.Thread(target=produce, args=(p,)) for p in "abc"] + [threading.Thread(target=drain)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    drained.extend(buffer.drain_all())

    assert len(drained) == 600
    assert len({sample.id for sample in drained}) == 600


def test_producer_emits_into_buffer():
    buffer = SampleBuffer()
    producer = SampleProducer(buffer, component_name="test")

    assert producer.emit(Sample(id="temp1", data={"celsius": 19}))
    assert buffer.size() == 1


def test_sample_age_is_measured_from_received_at():
    received = datetime(2024, 5, 1, 12, 0, 0)
    sample = Sample(id="temp1", data={"celsius": 1}, received_at=received)

    assert sample.age_seconds(now=received + timedelta(seconds=90)) == 90.0


def test_buffer_stats_report_oldest_sample_age():
    buffer = SampleBuffer()
    assert buffer.get_stats()["oldest_sample_age_seconds"] is None

    buffer.add(Sample(id="old", received_at=datetime.now() - timedelta(minutes=5)))
    buffer.add(Sample(id="new"))

    age = buffer.get_stats()["oldest_sample_age_seconds"]
    assert 300 <= age < 360

    buffer.drain_all()
    assert buffer.get_stats()["oldest_sample_age_seconds"] is None
