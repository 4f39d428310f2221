import pytest

from pmuevents.cpustr import (
    CpuSignature,
    format_cpu_str,
    get_cpu_str,
    get_cpu_str_type,
    read_cpu_signature,
)

CPUINFO = """processor\t: 0
vendor_id\t: GenuineIntel
cpu family\t: 6
model\t\t: 85
model name\t: Example CPU @ 2.00GHz
stepping\t: 4
microcode\t: 0x1

processor\t: 1
vendor_id\t: OtherVendor
cpu family\t: 7
model\t\t: 1
stepping\t: 1
"""


@pytest.fixture
def cpuinfo(tmp_path):
    path = tmp_path / "cpuinfo"
    path.write_text(CPUINFO)
    return path


def test_read_signature_uses_first_cpu(cpuinfo):
    assert read_cpu_signature(cpuinfo) == CpuSignature("GenuineIntel", 6, 85, 4)


def test_read_signature_missing_field(tmp_path):
    path = tmp_path / "cpuinfo"
    path.write_text("processor\t: 0\nvendor_id\t: GenuineIntel\nmodel\t: 1\n")
    with pytest.raises(ValueError, match="cpu family"):
        read_cpu_signature(path)


def test_read_signature_non_numeric(tmp_path):
    path = tmp_path / "cpuinfo"
    path.write_text(
        "vendor_id\t: GenuineIntel\ncpu family\t: 6\nmodel\t: 1\nstepping\t: unknown\n"
    )
    with pytest.raises(ValueError):
        read_cpu_signature(path)


def test_read_signature_missing_file(tmp_path):
    with pytest.raises(OSError):
        read_cpu_signature(tmp_path / "absent")


def test_format_without_stepping():
    sig = CpuSignature("GenuineIntel", 6, 0x55, 4)
    assert format_cpu_str(sig, "-core", False) == "GenuineIntel-6-55-core"


def test_format_with_stepping_uses_upper_hex():
    sig = CpuSignature("GenuineIntel", 6, 0x9E, 0xA)
    assert format_cpu_str(sig, "-uncore", True) == "GenuineIntel-6-9E-A-uncore"


@pytest.mark.parametrize("kind", ["-core", "-uncore"])
def test_get_cpu_str_type_matches_format(cpuinfo, kind):
    sig = read_cpu_signature(cpuinfo)
    plain, stepped = get_cpu_str_type(kind, cpuinfo)
    assert plain == format_cpu_str(sig, kind, False)
    assert stepped == format_cpu_str(sig, kind, True)
    assert plain.endswith(kind) and stepped.endswith(kind)
    assert stepped.startswith(plain[: -len(kind)] + "-")


def _outcome(func):
    try:
        return ("ok", func())
    except (OSError, ValueError) as exc:
        return ("error", type(exc))


def test_get_cpu_str_is_core_string():
    assert _outcome(get_cpu_str) == _outcome(lambda: get_cpu_str_type("-core")[0])