"""
Unit tests for the generation clients and prompt builder.
"""
import asyncio
import base64
import json
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from storylens.core.error_handling import ClientConfigurationError, GenerationError, InputValidationError
from storylens.models.story_models import ImagePart
from storylens.services.backend_relay_client import BackendRelayClient
from storylens.services.clients.base_client import BaseGenerationClient
from storylens.services.gemini_client import GeminiStoryClient
from storylens.services.prompt_builder import build_story_prompt


IMAGES = [ImagePart(data=b"img-1", mime_type="image/jpeg"), ImagePart(data=b"img-2", mime_type="image/png")]


class TestPromptBuilder(unittest.TestCase):

    def test_prompt_contains_inputs(self):
        prompt = build_story_prompt(" 호치민 출장 ", business_name="노보텔 사이공센터", image_count=14)
        self.assertIn("14장 사진", prompt)
        self.assertIn("노보텔 사이공센터", prompt)
        self.assertIn("호치민 출장", prompt)
        self.assertIn("16개 문단", prompt)
        self.assertIn("2~15번", prompt)

    def test_empty_keyword_rejected(self):
        with self.assertRaises(InputValidationError):
            build_story_prompt("   ", business_name="B", image_count=14)


class TestGeminiStoryClient(unittest.IsolatedAsyncioTestCase):

    def test_missing_api_key(self):
        with self.assertRaises(ClientConfigurationError):
            GeminiStoryClient(api_key=None)

    @patch("storylens.services.gemini_client.genai.Client")
    async def test_generate_success(self, mock_client_cls):
        generate_content = AsyncMock(return_value=MagicMock(text="  제목: 후기\n1. 본문  "))
        mock_client_cls.return_value.aio.models.generate_content = generate_content

        client = GeminiStoryClient(api_key="test-key", model_name="gemini-test")
        text = await client.generate(IMAGES, "호치민")

        self.assertEqual(text, "제목: 후기\n1. 본문")
        mock_client_cls.assert_called_once_with(api_key="test-key")
        kwargs = generate_content.call_args.kwargs
        self.assertEqual(kwargs["model"], "gemini-test")
        self.assertEqual(len(kwargs["contents"]), 3)
        self.assertIn("호치민", kwargs["contents"][0])

    @patch("storylens.services.gemini_client.genai.Client")
    async def test_empty_response(self, mock_client_cls):
        mock_client_cls.return_value.aio.models.generate_content = AsyncMock(
            return_value=MagicMock(text=None)
        )
        client = GeminiStoryClient(api_key="test-key")
        with self.assertRaises(GenerationError) as ctx:
            await client.generate(IMAGES, "호치민")
        self.assertIn("텍스트를 생성하지 못했습니다", str(ctx.exception))

    @patch("storylens.services.gemini_client.genai.Client")
    async def test_api_error(self, mock_client_cls):
        mock_client_cls.return_value.aio.models.generate_content = AsyncMock(
            side_effect=RuntimeError("quota exceeded")
        )
        client = GeminiStoryClient(api_key="test-key")
        with self.assertRaises(GenerationError) as ctx:
            await client.generate(IMAGES, "호치민")
        self.assertIn("quota exceeded", str(ctx.exception))

    @patch("storylens.services.gemini_client.genai.Client")
    async def test_empty_keyword_never_calls_api(self, mock_client_cls):
        generate_content = AsyncMock()
        mock_client_cls.return_value.aio.models.generate_content = generate_content
        client = GeminiStoryClient(api_key="test-key")

        with self.assertRaises(InputValidationError):
            await client.generate(IMAGES, "")
        generate_content.assert_not_called()

    @patch("storylens.services.gemini_client.genai.Client")
    async def test_health_check(self, mock_client_cls):
        mock_client_cls.return_value.aio.models.get = AsyncMock(side_effect=RuntimeError("down"))
        client = GeminiStoryClient(api_key="test-key")
        self.assertFalse(await client.health_check())


class TestBackendRelayClient(unittest.IsolatedAsyncioTestCase):

    def _client(self, handler, **kwargs) -> BackendRelayClient:
        client = BackendRelayClient(endpoint="http://backend.test/", **kwargs)
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return client

    def test_missing_endpoint(self):
        with self.assertRaises(ClientConfigurationError):
            BackendRelayClient(endpoint="")

    async def test_payload_and_content_field(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"content": "제목: 후기\n1. 본문"})

        client = self._client(handler, max_tokens=1234, temperature=0.5)
        try:
            text = await client.generate(IMAGES, "호치민")
        finally:
            await client.close()

        self.assertEqual(text, "제목: 후기\n1. 본문")
        self.assertEqual(captured["url"], "http://backend.test/api/ai/generate")
        body = captured["body"]
        self.assertEqual(body["model"], "multimodal")
        self.assertEqual(body["maxTokens"], 1234)
        self.assertEqual(body["temperature"], 0.5)
        self.assertEqual(body["images"][0], {
            "type": "image",
            "source": {"bytes": base64.b64encode(b"img-1").decode("ascii")},
        })
        self.assertIn("호치민", body["prompt"])

    async def test_text_field_fallback(self):
        client = self._client(lambda r: httpx.Response(200, json={"text": "본문"}))
        try:
            self.assertEqual(await client.generate(IMAGES, "호치민"), "본문")
        finally:
            await client.close()

    async def test_error_status(self):
        client = self._client(lambda r: httpx.Response(500, text="boom"), max_attempts=1)
        try:
            with self.assertRaises(GenerationError) as ctx:
                await client.generate(IMAGES, "호치민")
        finally:
            await client.close()
        self.assertIn("500", str(ctx.exception))

    async def test_empty_content(self):
        client = self._client(lambda r: httpx.Response(200, json={"content": ""}))
        try:
            with self.assertRaises(GenerationError):
                await client.generate(IMAGES, "호치민")
        finally:
            await client.close()

    async def test_invalid_json(self):
        client = self._client(lambda r: httpx.Response(200, text="not json"))
        try:
            with self.assertRaises(GenerationError):
                await client.generate(IMAGES, "호치민")
        finally:
            await client.close()


class SlowClient(BaseGenerationClient):
    def _validate_credentials(self) -> None:
        pass

    async def _generate_text(self, prompt, images) -> str:
        await asyncio.sleep(1)
        return "too late"

    async def health_check(self) -> bool:
        return True


class TestGenerationTimeout(unittest.IsolatedAsyncioTestCase):

    async def test_timeout_becomes_generation_error(self):
        client = SlowClient(timeout=0.01)
        with self.assertRaises(GenerationError) as ctx:
            await client.generate(IMAGES, "호치민")
        self.assertIn("timed out", str(ctx.exception))


class TestClientLifecycle(unittest.IsolatedAsyncioTestCase):

    @patch("storylens.services.clients.base_client.get_async_client")
    async def test_context_uses_shared_http_client(self, mock_get_client):
        http_client = AsyncMock()
        mock_get_client.return_value = http_client

        async with SlowClient(timeout=3) as client:
            self.assertIs(client._client, http_client)

        mock_get_client.assert_called_once_with(timeout=3)
        http_client.aclose.assert_awaited_once()
        self.assertIsNone(client._client)


if __name__ == '__main__':
    unittest.main()
