from pathlib import Path

import pytest

from cpusched.errors import InvalidInputError
from cpusched.models import Process
from cpusched.workload_io import default_workload, load_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","arrival_time":0,"burst_time":3,"priority":1},'
                 '{"pid":"B","arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0].priority == 1
    assert procs[1].priority is None
    assert procs[1].arrival_time == 1


def test_load_json_camel_case(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"id":"P1","arrivalTime":2,"burstTime":5,"priority":4}]')
    assert load_workload(p) == [Process("P1", arrival_time=2, burst_time=5, priority=4)]


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\nA,0,3,1\nB,1,2,\n")
    procs = load_workload(p)
    assert procs[0].pid == "A"
    assert procs[0].priority == 1
    assert procs[1].priority is None


def test_invalid_entry(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\nA,zero,3\n")
    with pytest.raises(ValueError):
        load_workload(p)


def test_non_positive_burst_rejected(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","arrival_time":0,"burst_time":0}]')
    with pytest.raises(InvalidInputError):
        load_workload(p)


def test_json_must_be_a_list(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"pid":"A"}')
    with pytest.raises(InvalidInputError):
        load_workload(p)


def test_unsupported_suffix(tmp_path: Path):
    with pytest.raises(InvalidInputError, match="Unsupported"):
        load_workload(tmp_path / "w.yaml")


def test_default_workload():
    procs = default_workload()
    assert [p.pid for p in procs] == ["P1", "P2", "P3"]
    assert all(p.priority is not None for p in procs)


@pytest.mark.parametrize(
    "entry",
    [
        '{"pid":"A","arrival_time":0.9,"burst_time":2}',
        '{"pid":"A","arrival_time":0,"burst_time":2.7}',
        '{"pid":"A","arrival_time":false,"burst_time":2}',
        '{"pid":"A","arrival_time":0,"burst_time":2,"priority":1.5}',
        '{"pid":"A","arrival_time":0,"burst_time":2,"priority":true}',
    ],
)
def test_fractional_and_boolean_values_rejected(tmp_path: Path, entry):
    p = tmp_path / "w.json"
    p.write_text(f"[{entry}]")
    with pytest.raises(InvalidInputError):
        load_workload(p)


def test_integral_floats_accepted(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":"A","arrival_time":1.0,"burst_time":3.0,"priority":2.0}]')
    assert load_workload(p) == [Process("A", arrival_time=1, burst_time=3, priority=2)]


@pytest.mark.parametrize("name", ["w.csv", "w.json"])
def test_undecodable_file_rejected(tmp_path: Path, name):
    p = tmp_path / name
    p.write_bytes(b"\xff\xfe\x00pid")
    with pytest.raises(InvalidInputError):
        load_workload(p)
