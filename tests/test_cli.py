import json

import pytest

from pmuevents.cli import listevents_main, rmap_main

EVENTS = [
    {
        "EventCode": "0xC0",
        "UMask": "0x00",
        "EventName": "INST_RETIRED.ANY",
        "BriefDescription": "Instructions retired.",
    },
    {
        "EventCode": "0xD1",
        "UMask": "0x01",
        "EventName": "MEM_LOAD_RETIRED.L1_HIT",
        "BriefDescription": "Loads hit L1",
    },
    {
        "EventCode": "0x3C",
        "UMask": "0x00",
        "EventName": "CPU_CLK_UNHALTED.THREAD",
        "BriefDescription": "Core cycles",
    },
]


@pytest.fixture
def eventmap(tmp_path, monkeypatch):
    path = tmp_path / "events.json"
    path.write_text(json.dumps(EVENTS))
    monkeypatch.setenv("EVENTMAP", str(path))
    return path


@pytest.fixture
def no_events(tmp_path, monkeypatch):
    monkeypatch.setenv("EVENTMAP", str(tmp_path / "missing"))
    monkeypatch.setenv("JEVENTS_CACHEDIR", str(tmp_path / "cache"))


def test_rmap_found_and_missing(eventmap, capsys):
    assert rmap_main(["0x1d1", "0x9999"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "1d1: mem_load_retired.l1_hit : Loads hit L1",
        "9999 not found",
    ]


def test_rmap_decimal_argument(eventmap, capsys):
    rmap_main([str(0xC0)])
    assert capsys.readouterr().out.startswith("c0: inst_retired.any : ")


def test_rmap_without_event_list(no_events, capsys):
    assert rmap_main(["0xc0"]) == 0
    assert capsys.readouterr().out == "c0 not found\n"


def test_listevents_sorted(eventmap, capsys):
    assert listevents_main([]) == 0
    lines = capsys.readouterr().out.splitlines()
    names = [line.split()[0] for line in lines]
    assert names == sorted(names)
    assert set(names) == {
        "cpu_clk_unhalted.thread",
        "inst_retired.any",
        "mem_load_retired.l1_hit",
    }


def test_listevents_line_format(eventmap, capsys):
    listevents_main(["mem_*"])
    lines = capsys.readouterr().out.splitlines()
    assert lines
    assert all(
        line == "mem_load_retired.l1_hit".ljust(40) + " cpu/umask=0x01,event=0xd1/"
        for line in lines
    )


def test_listevents_verbose(eventmap, capsys):
    listevents_main(["-v", "inst_*"])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("inst_retired.any")
    assert lines[1] == "\tInstructions retired"


def test_listevents_pattern_without_match(eventmap, capsys):
    listevents_main(["nothing*"])
    assert capsys.readouterr().out == ""


def test_listevents_without_event_list(no_events, capsys):
    assert listevents_main([]) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err != ""