from __future__ import annotations

import json
import unittest
from unittest.mock import patch

import requests
from fastapi.testclient import TestClient

from tutor_api.errors import ContentBlocked, UpstreamError
from tutor_api.main import create_app
from tutor_api.services import GeminiClient, TutorService

from tests.fakes import TEST_API_KEY, FakeExtractor, FakeGenerator, make_settings


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = make_settings()
        self.extractor = FakeExtractor(text="Hypertension is defined as BP above 140/90.")
        self.generator = FakeGenerator(answer="<text>")
        self.client = self._client(self.settings, self.extractor, self.generator)

    def _client(self, settings, extractor, generator) -> TestClient:
        service = TutorService(settings, extractor, generator)
        return TestClient(create_app(settings, service))

    def _ask(self, question="What is hypertension?", content=b"%PDF-1.4 data", client=None):
        files = {"pdf": ("notes.pdf", content, "application/pdf")} if content is not None else None
        data = {"question": question} if question is not None else None
        return (client or self.client).post("/ask", files=files, data=data)


class HealthEndpointTest(ApiTestCase):
    def test_health_with_key(self) -> None:
        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {"status": "ok", "api_key_loaded": True, "api_key_length": len(TEST_API_KEY)},
        )
        self.assertNotIn(TEST_API_KEY, response.text)

    def test_health_without_key(self) -> None:
        client = self._client(make_settings(gemini_api_key=None), self.extractor, self.generator)

        response = client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["api_key_loaded"])
        self.assertEqual(response.json()["api_key_length"], 0)

    def test_health_with_malformed_key_still_reports_loaded(self) -> None:
        client = self._client(make_settings(gemini_api_key="bogus"), self.extractor, self.generator)

        self.assertTrue(client.get("/health").json()["api_key_loaded"])

    def test_root_banner(self) -> None:
        response = self.client.get("/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["version"], self.settings.app_version)


class ChatEndpointTest(ApiTestCase):
    def test_chat_returns_answer(self) -> None:
        response = self.client.post("/chat", json={"question": "What is hypertension?"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"answer": "<text>"})
        self.assertIn("What is hypertension?", self.generator.prompts[0])

    def test_chat_missing_or_empty_question_is_400(self) -> None:
        for body in ({}, {"question": ""}, {"question": "   "}, {"question": None}):
            with self.subTest(body=body):
                response = self.client.post("/chat", json=body)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"error": "Question is required"})
        self.assertEqual(self.generator.prompts, [])

    def test_chat_without_body_is_400(self) -> None:
        response = self.client.post("/chat")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.generator.prompts, [])

    def test_chat_malformed_json_is_400(self) -> None:
        response = self.client.post(
            "/chat", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("error", response.json())
        self.assertEqual(self.generator.prompts, [])

    def test_chat_upstream_failure_is_generic_500(self) -> None:
        self.generator.error = UpstreamError(detail=f"connection refused for {TEST_API_KEY}")

        response = self.client.post("/chat", json={"question": "What is hypertension?"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Failed to get response from Gemini"})
        self.assertNotIn(TEST_API_KEY, response.text)

    def test_chat_without_key_is_500(self) -> None:
        settings = make_settings(gemini_api_key=None)
        client = TestClient(create_app(settings, TutorService(settings, self.extractor)))

        with patch("tutor_api.services.gemini_client.requests.post") as post:
            response = client.post("/chat", json={"question": "What is hypertension?"})

        self.assertEqual(response.status_code, 500)
        post.assert_not_called()


class AskEndpointTest(ApiTestCase):
    def test_ask_returns_answer(self) -> None:
        response = self._ask()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"answer": "<text>"})
        self.assertEqual(self.extractor.calls, [b"%PDF-1.4 data"])
        self.assertIn("Hypertension is defined as BP above 140/90.", self.generator.prompts[0])

    def test_ask_missing_file_is_400(self) -> None:
        response = self._ask(content=None)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "No PDF file uploaded."})
        self.assertEqual(self.extractor.calls, [])
        self.assertEqual(self.generator.prompts, [])

    def test_ask_missing_question_is_400(self) -> None:
        for question in (None, ""):
            with self.subTest(question=question):
                response = self._ask(question=question)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"error": "Question is required"})
        self.assertEqual(self.extractor.calls, [])
        self.assertEqual(self.generator.prompts, [])

    def test_ask_empty_extraction_is_500_without_upstream_call(self) -> None:
        self.extractor.text = "  \n  "

        response = self._ask()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Failed to extract text from PDF."})
        self.assertEqual(self.generator.prompts, [])

    def test_ask_truncates_long_document_to_default_bound(self) -> None:
        self.extractor.text = "A" * 8000 + "B" * 12000

        response = self._ask()

        self.assertEqual(response.status_code, 200)
        prompt = self.generator.prompts[0]
        self.assertIn('"' + "A" * 8000 + '"', prompt)
        self.assertNotIn("AB", prompt)
        self.assertNotIn("B" * 10, prompt)

    def test_ask_content_blocked_has_distinct_message(self) -> None:
        self.generator.error = ContentBlocked(detail="Prompt blocked: SAFETY")

        response = self._ask()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"error": "Content violated safety guidelines or was blocked by Gemini."},
        )

    def test_ask_upstream_failure_is_generic_500(self) -> None:
        self.generator.error = UpstreamError(detail="Gemini returned 503")

        response = self._ask()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"error": "Failed to process the PDF or get an answer. Check server logs for details."},
        )


class GeminiWiringTest(ApiTestCase):
    """Drives the real GeminiClient with requests.post stubbed out."""

    def setUp(self) -> None:
        super().setUp()
        service = TutorService(self.settings, self.extractor, GeminiClient(self.settings))
        self.client = TestClient(create_app(self.settings, service))

    def _gemini(self, status_code: int, payload: dict) -> requests.Response:
        response = requests.Response()
        response.status_code = status_code
        response.encoding = "utf-8"
        response._content = json.dumps(payload).encode("utf-8")
        return response

    def test_chat_relays_first_candidate(self) -> None:
        payload = {"candidates": [{"content": {"parts": [{"text": "High blood pressure."}]}}]}

        with patch("tutor_api.services.gemini_client.requests.post", return_value=self._gemini(200, payload)):
            response = self.client.post("/chat", json={"question": "What is hypertension?"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"answer": "High blood pressure."})

    def test_blocked_prompt_surfaces_content_blocked(self) -> None:
        payload = {"promptFeedback": {"blockReason": "SAFETY", "safetyRatings": [{"probability": "HIGH"}]}}

        with patch("tutor_api.services.gemini_client.requests.post", return_value=self._gemini(200, payload)):
            response = self._ask()

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"error": "Content violated safety guidelines or was blocked by Gemini."},
        )

    def test_timeout_is_500_and_never_leaks_key(self) -> None:
        error = requests.Timeout(f"timed out calling ?key={TEST_API_KEY}")

        with patch("tutor_api.services.gemini_client.requests.post", side_effect=error):
            response = self.client.post("/chat", json={"question": "What is hypertension?"})

        self.assertEqual(response.status_code, 500)
        self.assertNotIn(TEST_API_KEY, response.text)


if __name__ == "__main__":
    unittest.main()
