"""
Tests for the wire helpers.
"""

import json

from colorrelay.services.messages import decode_frame, encode_color


def test_encode_color():
    assert json.loads(encode_color("red")) == {"type": "color", "data": "red"}


class TestDecodeFrame:

    def test_text(self):
        assert decode_frame({"type": "websocket.receive", "text": "red"}) == "red"

    def test_bytes(self):
        assert decode_frame({"type": "websocket.receive", "bytes": b"blue"}) == "blue"

    def test_invalid_utf8_is_replaced(self):
        assert decode_frame({"type": "websocket.receive", "bytes": b"\xffred"}) == "\ufffdred"

    def test_text_none_falls_back_to_bytes(self):
        assert decode_frame({"type": "websocket.receive", "text": None, "bytes": b"x"}) == "x"

    def test_empty(self):
        assert decode_frame({"type": "websocket.receive"}) is None
