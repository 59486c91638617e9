import dataclasses
import unittest
from unittest.mock import patch

from tutorchat.prompts import ERROR_TEXT, IMAGE_ONLY_PLACEHOLDER, NO_RESPONSE_TEXT
from tutorchat.relay import RelayError
from tutorchat.transcript import TranscriptController

IMAGE = "data:image/png;base64,iVBORw0KGgo="


class FakeRelay:
    def __init__(self, answer="정답: 4", error=None):
        self.answer = answer
        self.error = error
        self.calls = []
        self.pending_during_call = None
        self.controller = None

    async def __call__(self, subject, question, image):
        self.calls.append((subject, question, image))
        if self.controller is not None:
            self.pending_during_call = self.controller.pending
        if self.error is not None:
            raise self.error
        return self.answer


class TestTranscriptController(unittest.IsolatedAsyncioTestCase):
    def make(self, **relay_kwargs):
        relay = FakeRelay(**relay_kwargs)
        controller = TranscriptController(relay=relay)
        relay.controller = controller
        return relay, controller

    def contents(self, controller):
        return [(t.role, t.content) for t in controller.transcript]

    async def test_empty_submit_is_a_no_op(self):
        relay, controller = self.make()
        self.assertIsNone(await controller.submit("", None))
        self.assertIsNone(await controller.submit("   \n", None))
        self.assertEqual(controller.transcript, ())
        self.assertFalse(controller.pending)
        self.assertEqual(relay.calls, [])

    async def test_empty_submit_is_logged(self):
        relay, controller = self.make()
        with patch("tutorchat.transcript.logfire") as logfire:
            await controller.submit("", None)
        logfire.info.assert_called_once_with("empty submission ignored")

    async def test_successful_call_appends_user_then_bot(self):
        relay, controller = self.make(answer="정답: 4")
        reply = await controller.submit("2+2=?", None)
        self.assertEqual(self.contents(controller), [("user", "2+2=?"), ("bot", "정답: 4")])
        self.assertIs(reply, controller.transcript[-1])
        self.assertEqual(relay.calls, [("math", "2+2=?", None)])
        self.assertTrue(relay.pending_during_call)
        self.assertFalse(controller.pending)

    async def test_transport_failure_appends_error_turn(self):
        relay, controller = self.make(error=RelayError("connection refused"))
        await controller.submit("2+2=?", None)
        self.assertEqual(self.contents(controller), [("user", "2+2=?"), ("bot", ERROR_TEXT)])
        self.assertFalse(controller.pending)

    async def test_unexpected_relay_exception_still_gets_error_turn(self):
        relay, controller = self.make(error=RuntimeError("misconfigured client"))
        reply = await controller.submit("2+2=?", None)
        self.assertEqual(self.contents(controller), [("user", "2+2=?"), ("bot", ERROR_TEXT)])
        self.assertIs(reply, controller.transcript[-1])
        self.assertFalse(controller.pending)

    async def test_every_user_turn_is_followed_by_a_bot_turn(self):
        relay, controller = self.make()
        for error in (None, RelayError("down"), KeyError("choices"), None, ValueError("bad json")):
            relay.error = error
            await controller.submit("q", None)
        roles = [t.role for t in controller.transcript]
        self.assertEqual(roles, ["user", "bot"] * 5)

    async def test_session_survives_failure(self):
        relay, controller = self.make(error=RelayError("boom"))
        await controller.submit("first", None)
        relay.error = None
        await controller.submit("second", None)
        self.assertEqual(
            self.contents(controller),
            [("user", "first"), ("bot", ERROR_TEXT), ("user", "second"), ("bot", "정답: 4")],
        )

    async def test_empty_answer_gets_fallback(self):
        for answer in ("", "  \n"):
            relay, controller = self.make(answer=answer)
            await controller.submit("q", None)
            self.assertEqual(controller.transcript[-1].content, NO_RESPONSE_TEXT)

    async def test_image_only_uses_placeholder(self):
        relay, controller = self.make()
        await controller.submit("", IMAGE)
        self.assertEqual(controller.transcript[0].content, IMAGE_ONLY_PLACEHOLDER)
        self.assertEqual(relay.calls, [("math", "", IMAGE)])

    async def test_drafts_are_sent_and_cleared(self):
        relay, controller = self.make()
        controller.question = "x^2=4"
        controller.image = IMAGE
        await controller.submit()
        self.assertEqual(relay.calls, [("math", "x^2=4", IMAGE)])
        self.assertEqual(controller.question, "")
        self.assertIsNone(controller.image)

    async def test_drafts_cleared_after_failure(self):
        relay, controller = self.make(error=RelayError("down"))
        controller.question = "q"
        controller.image = IMAGE
        await controller.submit()
        self.assertEqual(controller.question, "")
        self.assertIsNone(controller.image)

    async def test_switching_subject_keeps_transcript(self):
        relay, controller = self.make()
        await controller.submit("q1", None)
        controller.subject = "bio"
        await controller.submit("q2", None)
        self.assertEqual(len(controller.transcript), 4)
        self.assertEqual([c[0] for c in relay.calls], ["math", "bio"])

    async def test_unknown_subject_rejected(self):
        relay, controller = self.make()
        with self.assertRaises(ValueError):
            controller.subject = "physics"
        self.assertEqual(controller.subject, "math")

    async def test_turns_are_immutable(self):
        relay, controller = self.make()
        await controller.submit("q", None)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            controller.transcript[0].content = "changed"

    async def test_transcript_is_a_snapshot(self):
        relay, controller = self.make()
        await controller.submit("q", None)
        snapshot = controller.transcript
        await controller.submit("q2", None)
        self.assertEqual(len(snapshot), 2)
        self.assertEqual(len(controller.transcript), 4)

    async def test_reset(self):
        relay, controller = self.make()
        await controller.submit("q", None)
        controller.reset()
        self.assertEqual(controller.transcript, ())

    async def test_reset_refused_while_pending(self):
        relay, controller = self.make()
        controller.pending = True
        with self.assertRaises(RuntimeError):
            controller.reset()


if __name__ == "__main__":
    unittest.main()
