import json
import unittest

import app as app_mod
from app import app as flask_app


class FakeClock:
    def __init__(self, now=1000):
        self.now = now

    def __call__(self):
        return self.now


def layout(tiles):
    out = [[[0] * 15] for _ in range(5)]
    for (l, r, c), code in tiles.items():
        out[l][r][c] = code
    return out


class TestFlaskAPI(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        app_mod.reset_session(clock=self.clock)
        self.client = flask_app.test_client()

    def post(self, path, payload):
        return self.client.post(path, data=json.dumps(payload), content_type="application/json")

    def send_message(self, raw):
        r = self.post("/api/message", {"message": raw})
        self.assertEqual(r.status_code, 200)
        return r.get_json()["state"]

    def test_given_fresh_session_when_reading_state_then_awaiting_opponent(self):
        r = self.client.get("/api/state")
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertTrue(d["ok"])
        state = d["state"]
        self.assertEqual(state["gameState"], "awaitingOpponent")
        self.assertEqual(state["scores"], {"player": 0, "opponent": 0})
        self.assertEqual(state["layout"], [])
        self.assertEqual(state["selectedTiles"], [])

    def test_given_started_game_when_clicking_pair_then_score_and_outbox(self):
        self.send_message("connected_p1")
        state = self.send_message("start_" + json.dumps(layout({(0, 0, 0): 4, (0, 0, 14): 4, (3, 0, 7): 9})))
        self.assertEqual(state["pid"], "p1")
        self.assertEqual(state["gameState"], "playing")
        self.assertEqual(state["layout"][0][0][0], 4)

        r1 = self.post("/api/click", {"layer": 0, "row": 0, "column": 0})
        self.assertEqual(r1.status_code, 200)
        s1 = r1.get_json()["state"]
        self.assertEqual(s1["layout"][0][0][0], 1004)
        self.assertEqual(s1["selectedTiles"], [{"layer": 0, "row": 0, "column": 0, "type": 4}])

        self.clock.now = 2200
        s2 = self.post("/api/click", {"layer": 0, "row": 0, "column": 14}).get_json()["state"]
        self.assertEqual(s2["scores"]["player"], 8)
        self.assertEqual(s2["gameState"], "deadEnd")
        self.assertEqual(s2["timeSinceLastMatch"], 2200)

        out = self.client.get("/api/outbox").get_json()
        self.assertTrue(out["ok"])
        self.assertEqual(out["messages"], ["match_p1_8", "done_p1"])
        self.assertEqual(self.client.get("/api/outbox").get_json()["messages"], [])

    def test_given_game_over_message_when_posted_then_outcome_reported(self):
        self.send_message("connected_p1")
        self.send_message("update_p2_17")
        state = self.send_message("gameOver_p2")
        self.assertEqual(state["gameState"], "gameOver")
        self.assertIn("lost", state["gameOutcome"])
        self.assertEqual(state["scores"]["opponent"], 17)

    def test_given_bad_bodies_when_posted_then_400(self):
        r1 = self.post("/api/click", {"layer": 0, "row": "x"})
        self.assertEqual(r1.status_code, 400)
        self.assertFalse(r1.get_json()["ok"])

        r2 = self.post("/api/message", {"msg": "connected_p1"})
        self.assertEqual(r2.status_code, 400)
        self.assertFalse(r2.get_json()["ok"])

    def test_given_non_object_json_body_when_posted_then_400(self):
        for path in ("/api/message", "/api/click"):
            r = self.post(path, [1])
            self.assertEqual(r.status_code, 400, path)
            self.assertFalse(r.get_json()["ok"])
        r = self.client.post("/api/message", data="not json", content_type="application/json")
        self.assertEqual(r.status_code, 400)

    def test_given_malformed_or_unknown_message_when_posted_then_state_unchanged(self):
        before = self.client.get("/api/state").get_json()["state"]
        self.assertEqual(self.send_message("start_{oops"), before)
        self.assertEqual(self.send_message("foo_bar"), before)

    def test_given_reset_when_posted_then_fresh_session(self):
        self.send_message("connected_p1")
        r = self.post("/api/reset", {})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.get_json()["state"]["pid"], "")
        self.assertEqual(self.client.get("/api/state").get_json()["state"]["pid"], "")


if __name__ == "__main__":
    unittest.main(verbosity=2)
