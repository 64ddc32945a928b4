import pytest

from transit.felica_frames import (
    build_read_frame,
    encode_block_list,
    encode_service_code,
    parse_exchange_response,
    parse_read_response,
)

IDM = bytes.fromhex("0114b3a1c20e4f21")


def test_service_code_byte_orders():
    assert encode_service_code(0x090F, "le") == b"\x0f\x09"
    assert encode_service_code(0x090F, "be") == b"\x09\x0f"


def test_block_list_layouts():
    assert encode_block_list(3, 2, "short") == b"\x80\x03\x80\x04"
    assert encode_block_list(0x0102, 1, "long") == b"\x00\x02\x01"


@pytest.mark.parametrize("call", [
    lambda: encode_service_code(0x090F, "middle"),
    lambda: encode_block_list(0, 1, "wide"),
    lambda: build_read_frame(b"\x01\x02", 0x090F, "le", "short", 0, 1),
])
def test_unknown_modes_and_bad_idm_raise(call):
    with pytest.raises(ValueError):
        call()


def test_build_read_frame():
    frame = build_read_frame(IDM, 0x090F, "le", "short", 5, 1)

    assert frame == bytes([16, 0x06]) + IDM + bytes([1, 0x0F, 0x09, 1, 0x80, 5])
    assert frame[0] == len(frame)


def _response(status1=0, status2=0, count=1, data=b"\x11" * 16, code=0x07):
    body = bytes([code]) + IDM + bytes([status1, status2, count]) + data
    return bytes([len(body) + 1]) + body


def test_parse_good_response():
    ok, data = parse_read_response(_response(), 1)
    assert ok
    assert data == b"\x11" * 16


@pytest.mark.parametrize("resp", [
    b"",
    _response(status1=0x01, status2=0xA6, count=0, data=b""),
    _response(code=0x05),
    _response(count=2),
    _response(data=b"\x11" * 8),
])
def test_parse_bad_responses(resp):
    ok, data = parse_read_response(resp, 1)
    assert not ok
    assert data == b""


def test_exchange_response_drops_pn532_status():
    ok, data = parse_exchange_response(b"\x00" + _response(), 1)
    assert ok
    assert data == b"\x11" * 16


def test_exchange_response_ignores_upper_status_bits():
    # bit 6 is the NAD flag, only the lower 6 bits carry the error code
    ok, _ = parse_exchange_response(b"\x40" + _response(), 1)
    assert ok


@pytest.mark.parametrize("resp", [None, b"", b"\x01" + _response(), b"\x13" + _response()])
def test_exchange_response_with_pn532_error(resp):
    assert parse_exchange_response(resp, 1) == (False, b"")
