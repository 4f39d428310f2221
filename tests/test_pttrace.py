from pmuevents.pttrace import PSB, find_trace_start, find_tsc


def tsc_packet(value):
    return bytes([0x19]) + value.to_bytes(7, "little")


PSBEND = bytes([0x02, 0x23])
CBR = bytes([0x02, 0x03, 0x20, 0x00])


def segment(value, size=64):
    body = PSB + CBR + tsc_packet(value) + PSBEND
    return body + bytes(size - len(body))


def test_find_tsc_reads_seven_byte_value():
    value = 0x00123456789ABC
    data = segment(value) + bytes(200)
    assert find_tsc(data, 0) == value


def test_find_tsc_without_time_stamp_returns_zero():
    data = PSB + PSBEND + bytes(200)
    assert find_tsc(data, 0) == 0


def test_find_tsc_on_padding_only_returns_zero():
    assert find_tsc(bytes(300), 0) == 0


def test_find_tsc_stops_on_unknown_packet():
    data = PSB + bytes([0xFF]) + tsc_packet(77) + bytes(200)
    assert find_tsc(data, 0) == 0


def test_find_tsc_skips_mode_and_mtc():
    data = PSB + bytes([0x99, 0x01, 0x59, 0x02]) + tsc_packet(4242) + bytes(200)
    assert find_tsc(data, 0) == 4242


def test_find_tsc_wraps_around_ring_buffer():
    value = 987654321
    data = bytearray(200)
    data[0:8] = tsc_packet(value)
    data[200 - 16:] = PSB
    assert find_tsc(bytes(data), 200 - 16) == value


def test_find_trace_start_picks_oldest_stamp():
    data = segment(5000) + segment(1000) + segment(3000)
    assert find_trace_start(data) == 64


def test_find_trace_start_first_is_oldest():
    data = segment(10) + segment(20)
    assert find_trace_start(data) == 0


def test_find_trace_start_without_psb():
    assert find_trace_start(bytes(500)) is None


def test_find_trace_start_ignores_psb_without_stamp():
    data = PSB + PSBEND + bytes(200)
    assert find_trace_start(data) is None


def test_find_trace_start_skips_stampless_psb():
    data = PSB + PSBEND + bytes(46) + segment(99)
    assert find_trace_start(data) == 64