import json
import unittest

from game import (
    Board,
    Connected,
    Done,
    GameOver,
    Match,
    MessageKind,
    ProtocolError,
    Start,
    Update,
    decode_inbound,
)


def layout_json(code_at_origin=7):
    layout = [[[0] * 15] for _ in range(5)]
    layout[0][0][0] = code_at_origin
    layout[0][0][1] = -1
    return json.dumps(layout)


class TestDecodeInbound(unittest.TestCase):
    def test_given_connected_when_decoding_then_pid_extracted(self):
        msg = decode_inbound("connected_abc123")
        self.assertEqual(msg, Connected(pid="abc123"))
        self.assertEqual(msg.kind, MessageKind.CONNECTED)

    def test_given_start_when_decoding_then_board_built_from_json(self):
        msg = decode_inbound("start_" + layout_json())
        self.assertIsInstance(msg, Start)
        assert isinstance(msg, Start)
        self.assertIsInstance(msg.board, Board)
        self.assertEqual(msg.board.depth, 5)
        self.assertEqual(msg.board.width, 15)
        self.assertEqual(msg.board.at(0, 0, 0), 7)
        self.assertEqual(msg.board.at(0, 0, 1), -1)

    def test_given_update_and_game_over_when_decoding_then_typed_fields(self):
        self.assertEqual(decode_inbound("update_p2_42"), Update(pid="p2", score=42))
        self.assertEqual(decode_inbound("gameOver_p1"), GameOver(winner_pid="p1"))

    def test_given_extra_trailing_fields_when_decoding_then_ignored(self):
        self.assertEqual(decode_inbound("update_p2_42_extra"), Update(pid="p2", score=42))
        self.assertEqual(decode_inbound("connected_p1_x"), Connected(pid="p1"))

    def test_given_unknown_kind_when_decoding_then_none(self):
        self.assertIsNone(decode_inbound("foo_bar"))
        self.assertIsNone(decode_inbound(""))
        # Outbound kinds are not valid server messages
        self.assertIsNone(decode_inbound("match_p1_10"))

    def test_given_malformed_known_kinds_when_decoding_then_protocol_error(self):
        bad = [
            "connected",
            "connected_",
            "start",
            "start_{not json",
            "start_[1, 2, 3]",
            "start_" + json.dumps([[[0] * 15]]),  # one layer only
            "start_" + layout_json(code_at_origin=500),
            "update_p2",
            "update_p2_abc",
            "update_p2_4.5",
            "gameOver",
        ]
        for raw in bad:
            with self.assertRaises(ProtocolError, msg=raw):
                decode_inbound(raw)

    def test_given_deeply_nested_layout_when_decoding_then_protocol_error(self):
        with self.assertRaises(ProtocolError):
            decode_inbound("start_" + "[" * 200000)
        with self.assertRaises(ProtocolError):
            decode_inbound("start_" + "[" * 200000 + "]" * 200000)

    def test_given_negative_score_when_decoding_update_then_protocol_error(self):
        with self.assertRaises(ProtocolError):
            decode_inbound("update_p2_-50")
        self.assertEqual(decode_inbound("update_p2_0"), Update(pid="p2", score=0))

    def test_given_protocol_error_when_caught_as_value_error_then_compatible(self):
        with self.assertRaises(ValueError):
            decode_inbound("update_p2_x")


class TestEncodeOutbound(unittest.TestCase):
    def test_given_match_and_done_when_encoding_then_wire_format(self):
        self.assertEqual(Match(pid="p1", points=8).encode(), "match_p1_8")
        self.assertEqual(Match(pid="p1", points=100).encode(), "match_p1_100")
        self.assertEqual(Done(pid="p1").encode(), "done_p1")

    def test_given_pid_with_delimiter_when_encoding_then_protocol_error(self):
        with self.assertRaises(ProtocolError):
            Done(pid="p_1").encode()


if __name__ == '__main__':
    unittest.main(verbosity=2)
