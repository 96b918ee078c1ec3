from __future__ import annotations

import unittest

from lottery_skill import create_app
from lottery_skill.config import TestingConfig
from lottery_skill.repositories.ledger_repository import InMemoryLedgerStore

USER_ID = "amzn1.ask.account.ROUTE"


class RouteTestConfig(TestingConfig):
    SKILL_NAME = "Office Lottery"
    SEED_APPLICANTS = tuple(range(1, 11))
    REPEAT_WINDOW_SECONDS = 60
    LOG_LEVEL = "WARNING"


def envelope(request: dict, user_id: str | None = USER_ID) -> dict:
    body: dict = {"version": "1.0", "request": request}
    if user_id is not None:
        body["session"] = {"new": True, "sessionId": "session-1", "user": {"userId": user_id}}
        body["context"] = {"System": {"user": {"userId": user_id}}}
    return body


def draw_request(count: str | None, dialog_state: str = "COMPLETED") -> dict:
    slots = {"winnerCount": {"name": "winnerCount"}}
    if count is not None:
        slots["winnerCount"]["value"] = count
    return {
        "type": "IntentRequest",
        "requestId": "req-1",
        "dialogState": dialog_state,
        "intent": {"name": "DrawLotsIntent", "confirmationStatus": "NONE", "slots": slots},
    }


class SkillRouteTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryLedgerStore()
        self.app = create_app(RouteTestConfig, store=self.store)
        self.client = self.app.test_client()

    def post_skill(self, request: dict, **kwargs):  # type: ignore[no-untyped-def]
        return self.client.post("/skill", json=envelope(request, **kwargs))

    def test_health(self) -> None:
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.get_json()["success"])
        self.assertEqual(resp.get_json()["data"]["status"], "ok")
        self.assertEqual(resp.get_json()["data"]["store"], "InMemoryLedgerStore")

    def test_launch(self) -> None:
        resp = self.post_skill({"type": "LaunchRequest", "requestId": "req-0"})

        self.assertEqual(resp.status_code, 200)
        body = resp.get_json()["response"]
        self.assertEqual(
            body["outputSpeech"],
            {"type": "SSML", "ssml": "<speak>There are 10 applicants. Shall we start the draw?</speak>"},
        )
        self.assertEqual(
            body["reprompt"]["outputSpeech"]["ssml"],
            "<speak>Shall we start the draw?</speak>",
        )
        self.assertFalse(body["shouldEndSession"])

    def test_incomplete_draw_is_delegated(self) -> None:
        resp = self.post_skill(draw_request(None, dialog_state="STARTED"))

        body = resp.get_json()["response"]
        self.assertEqual(body["directives"], [{"type": "Dialog.Delegate"}])
        self.assertNotIn("outputSpeech", body)
        self.assertFalse(body["shouldEndSession"])

    def test_invalid_count_elicits_slot(self) -> None:
        resp = self.post_skill(draw_request("0"))

        body = resp.get_json()["response"]
        self.assertEqual(body["directives"], [{"type": "Dialog.ElicitSlot", "slotToElicit": "winnerCount"}])
        self.assertEqual(body["outputSpeech"]["ssml"], "<speak>How many winners should I draw?</speak>")
        self.assertIsNone(self.store.load(USER_ID))

    def test_draw_then_inspect_and_reset(self) -> None:
        resp = self.post_skill(draw_request("3"))

        body = resp.get_json()["response"]
        self.assertEqual(body["card"]["type"], "Simple")
        self.assertEqual(body["card"]["title"], "Office Lottery")
        self.assertTrue(body["card"]["content"].startswith("Winners: "))
        self.assertIn('<break time="3s"/>', body["outputSpeech"]["ssml"])
        self.assertIn('<prosody volume="x-loud">', body["outputSpeech"]["ssml"])

        resp = self.client.get(f"/ledgers/{USER_ID}")
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()["data"]
        self.assertEqual(data["applicant_count"], 7)
        self.assertEqual(data["drawn_count"], 3)
        self.assertEqual(len(data["ledger"]["winnerHistory"]), 1)
        self.assertEqual(data["ledger"]["lastState"]["state"], "REPEAT")

        resp = self.client.post(f"/ledgers/{USER_ID}/reset")
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()["data"]
        self.assertEqual(data["applicant_count"], 10)
        self.assertEqual(data["ledger"]["winnerHistory"], [])
        self.assertEqual(data["ledger"]["validApplicants"], list(range(1, 11)))

    def test_unknown_ledger_is_404(self) -> None:
        resp = self.client.get("/ledgers/nobody")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()["error"]["code"], "not_found")

    def test_session_ended_has_empty_response(self) -> None:
        resp = self.post_skill({"type": "SessionEndedRequest", "reason": "USER_INITIATED"})
        self.assertEqual(resp.get_json(), {"version": "1.0", "response": {}})

    def test_stop_ends_session(self) -> None:
        resp = self.post_skill({"type": "IntentRequest", "intent": {"name": "AMAZON.StopIntent"}})
        body = resp.get_json()["response"]
        self.assertEqual(body["outputSpeech"]["ssml"], "<speak>Goodbye.</speak>")
        self.assertTrue(body["shouldEndSession"])

    def test_unknown_request_type_apologizes(self) -> None:
        resp = self.post_skill({"type": "CanFulfillIntentRequest"})
        body = resp.get_json()["response"]
        self.assertEqual(body["outputSpeech"]["ssml"], "<speak>Sorry, I didn't catch that.</speak>")
        self.assertFalse(body["shouldEndSession"])

    def test_corrupt_stored_ledger_still_gets_speech(self) -> None:
        self.store.save(
            USER_ID,
            {"validApplicants": [1, 2], "lastState": {"state": "NONE", "timestamp": 10**20}},
        )

        resp = self.post_skill({"type": "LaunchRequest"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.get_json()["response"]["outputSpeech"]["ssml"],
            "<speak>There are 10 applicants. Shall we start the draw?</speak>",
        )

    def test_unexpected_error_is_spoken_apology(self) -> None:
        def explode(session_key):  # type: ignore[no-untyped-def]
            raise RuntimeError("driver crashed")

        self.store.load = explode  # type: ignore[method-assign]

        resp = self.post_skill({"type": "LaunchRequest"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.get_json()["response"]["outputSpeech"]["ssml"],
            "<speak>Sorry, I didn't catch that.</speak>",
        )

    def test_session_user_is_enough(self) -> None:
        payload = {
            "version": "1.0",
            "session": {"user": {"userId": "session-only"}},
            "request": {"type": "LaunchRequest"},
        }
        resp = self.client.post("/skill", json=payload)
        self.assertEqual(resp.status_code, 200)

    def test_malformed_envelopes_are_rejected(self) -> None:
        cases = [
            envelope({"type": "LaunchRequest"}, user_id=None),
            {"version": "1.0", "session": {"user": {"userId": USER_ID}}},
            envelope({"type": "IntentRequest"}),
            envelope(draw_request("3", dialog_state="SOMEWHERE")),
            {},
        ]
        for payload in cases:
            with self.subTest(payload=payload):
                resp = self.client.post("/skill", json=payload)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.get_json()["error"]["code"], "validation_error")


if __name__ == "__main__":
    unittest.main()
