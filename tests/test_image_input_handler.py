"""
Unit tests for image payload validation and decoding.
"""
import base64
import io
import unittest

from fastapi import UploadFile
from starlette.datastructures import Headers

from storylens.core.error_handling import InputValidationError
from storylens.models.api_models import ImagePayload
from storylens.services.image_input_handler import ImageInputHandler


PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
PNG_B64 = base64.b64encode(PNG_BYTES).decode("ascii")


def make_upload(content: bytes, content_type: str, name: str = "photo.png") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=name,
        headers=Headers({"content-type": content_type})
    )


class TestDecodePayloads(unittest.TestCase):

    def setUp(self):
        self.handler = ImageInputHandler(required_count=2, max_image_mb=1, max_total_mb=1)

    def test_plain_base64_with_mime(self):
        part = self.handler.decode_payload(ImagePayload(data=PNG_B64, mime_type="image/png"))
        self.assertEqual(part.data, PNG_BYTES)
        self.assertEqual(part.mime_type, "image/png")

    def test_data_url_supplies_mime(self):
        part = self.handler.decode_payload(ImagePayload(data=f"data:image/jpeg;base64,{PNG_B64}"))
        self.assertEqual(part.mime_type, "image/jpeg")
        self.assertEqual(part.data, PNG_BYTES)

    def test_wrong_count(self):
        payload = ImagePayload(data=PNG_B64, mime_type="image/png")
        with self.assertRaises(InputValidationError) as ctx:
            self.handler.decode_payloads([payload])
        self.assertIn("2장의 사진이 필요합니다.", str(ctx.exception))

    def test_order_preserved(self):
        other = base64.b64encode(b"second").decode("ascii")
        parts = self.handler.decode_payloads([
            ImagePayload(data=PNG_B64, mime_type="image/png"),
            ImagePayload(data=other, mime_type="image/webp"),
        ])
        self.assertEqual([p.data for p in parts], [PNG_BYTES, b"second"])

    def test_non_image_mime_rejected(self):
        with self.assertRaises(InputValidationError):
            self.handler.decode_payload(ImagePayload(data=PNG_B64, mime_type="application/pdf"))

    def test_missing_mime_rejected(self):
        with self.assertRaises(InputValidationError):
            self.handler.decode_payload(ImagePayload(data=PNG_B64))

    def test_invalid_base64(self):
        with self.assertRaises(InputValidationError):
            self.handler.decode_payload(ImagePayload(data="not base64!!", mime_type="image/png"))

    def test_empty_image(self):
        with self.assertRaises(InputValidationError):
            self.handler.decode_payload(ImagePayload(data="data:image/png;base64,"))

    def test_oversized_image(self):
        big = base64.b64encode(b"x" * (1024 * 1024 + 1)).decode("ascii")
        with self.assertRaises(InputValidationError):
            self.handler.decode_payload(ImagePayload(data=big, mime_type="image/png"))

    def test_total_size_limit(self):
        half = base64.b64encode(b"x" * (600 * 1024)).decode("ascii")
        payloads = [ImagePayload(data=half, mime_type="image/png")] * 2
        with self.assertRaises(InputValidationError):
            self.handler.decode_payloads(payloads)


class TestReadUploads(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.handler = ImageInputHandler(required_count=2, max_image_mb=1, max_total_mb=1)

    async def test_reads_in_order(self):
        parts = await self.handler.read_uploads([
            make_upload(b"first", "image/png"),
            make_upload(b"second", "image/jpeg"),
        ])
        self.assertEqual([p.data for p in parts], [b"first", b"second"])
        self.assertEqual([p.mime_type for p in parts], ["image/png", "image/jpeg"])

    async def test_wrong_count(self):
        with self.assertRaises(InputValidationError):
            await self.handler.read_uploads([make_upload(b"only", "image/png")])

    async def test_non_image_upload(self):
        with self.assertRaises(InputValidationError):
            await self.handler.read_uploads([
                make_upload(b"first", "image/png"),
                make_upload(b"text", "text/plain", "notes.txt"),
            ])


if __name__ == '__main__':
    unittest.main()
