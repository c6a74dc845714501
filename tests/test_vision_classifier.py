"""
Tests for the garment vision classifier and its Gemini client.
"""
import json
import base64
import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from stylist_service.core.errors import (
    MalformedOutput,
    UpstreamFailure,
    REASON_INVALID_CREDENTIALS,
    REASON_NOT_CONFIGURED,
    REASON_RATE_LIMITED,
    REASON_TIMEOUT,
)
from stylist_service.core.models import ImageInput
from stylist_service.llm.gemini_client import GeminiVisionClient
from stylist_service.vision.classifier import (
    CLASSIFICATION_PROMPT,
    VisionClassifier,
    build_wardrobe_profile,
    extract_color_palette,
    extract_json_block,
    parse_garment_response,
)

from tests.conftest import BLAZER_JSON, FakeVisionClient, HttpError


class PerImageVisionClient:
    """Reply keyed by the decoded image bytes."""

    def __init__(self, replies):
        self.replies = replies

    async def invoke(self, image_base64, mime_type, instruction_prompt):
        reply = self.replies[base64.b64decode(image_base64)]
        if isinstance(reply, BaseException):
            raise reply
        return reply


# ==================== JSON EXTRACTION ====================

class TestExtractJsonBlock:
    def test_block_inside_prose(self):
        assert extract_json_block('Sure! {"a": 1} hope this helps') == '{"a": 1}'

    def test_nested_objects(self):
        text = 'x {"a": {"b": {"c": 2}}, "d": 3} y {"e": 4}'
        assert json.loads(extract_json_block(text)) == {"a": {"b": {"c": 2}}, "d": 3}

    def test_braces_inside_strings_are_ignored(self):
        text = '{"details": "logo {big} and \\"quoted}\\" text", "n": 1}'
        assert json.loads(extract_json_block(text))["n"] == 1

    def test_unbalanced_then_balanced(self):
        assert extract_json_block('{ broken {"ok": true}') == '{"ok": true}'

    def test_no_block(self):
        assert extract_json_block("no json here") is None
        assert extract_json_block("") is None


class TestParseGarmentResponse:
    def test_parses_fenced_json(self, blazer_json_text):
        garment = parse_garment_response(blazer_json_text)
        assert garment.garment_type == "oversized blazer"
        assert garment.fit == "oversized"
        assert garment.occasion == ("business",)
        assert garment.versatility_score == 8

    def test_normalizes_fit_and_versatility(self):
        garment = parse_garment_response(
            '{"garment_type": "tee", "fit": "baggy", "versatility_score": 42, "primary_color": "unknown"}'
        )
        assert garment.fit is None
        assert garment.versatility_score == 10
        assert garment.primary_color is None

    @pytest.mark.parametrize("text", [
        "I cannot see a garment.",
        '{"garment_type": "tee",}',
        '{"material": "cotton"}',
    ])
    def test_malformed(self, text):
        with pytest.raises(MalformedOutput):
            parse_garment_response(text)


# ==================== CLASSIFIER ====================

class TestClassify:
    def test_prompt_lists_vocabulary_and_fits(self):
        assert "navy blue" in CLASSIFICATION_PROMPT
        assert "bodycon" in CLASSIFICATION_PROMPT

    def test_success_sends_base64(self, jpeg_bytes, blazer_json_text):
        client = FakeVisionClient(blazer_json_text)
        classifier = VisionClassifier(client, timeout=1)

        garment = asyncio.run(classifier.classify(jpeg_bytes, "image/png"))

        assert garment.primary_color == "#000000"
        image_b64, mime = client.calls[0]
        assert base64.b64decode(image_b64) == jpeg_bytes
        assert mime == "image/png"

    @pytest.mark.parametrize("status,reason", [
        (401, REASON_INVALID_CREDENTIALS),
        (403, REASON_INVALID_CREDENTIALS),
        (429, REASON_RATE_LIMITED),
    ])
    def test_http_errors_map_to_reasons(self, jpeg_bytes, status, reason):
        classifier = VisionClassifier(FakeVisionClient(HttpError(status)), timeout=1)
        with pytest.raises(UpstreamFailure) as exc_info:
            asyncio.run(classifier.classify(jpeg_bytes))
        assert exc_info.value.reason == reason

    def test_timeout(self, jpeg_bytes, blazer_json_text):
        classifier = VisionClassifier(FakeVisionClient(blazer_json_text, delay=1.0), timeout=0.01)
        with pytest.raises(UpstreamFailure) as exc_info:
            asyncio.run(classifier.classify(jpeg_bytes))
        assert exc_info.value.reason == REASON_TIMEOUT

    def test_malformed_reply(self, jpeg_bytes):
        classifier = VisionClassifier(FakeVisionClient("sorry, no idea"), timeout=1)
        with pytest.raises(MalformedOutput):
            asyncio.run(classifier.classify(jpeg_bytes))


class TestClassifyBatch:
    """Batch classification settles every image independently."""

    def test_results_keep_input_order(self, blazer_json_text):
        skirt = json.dumps({**BLAZER_JSON, "garment_type": "pleated skirt", "primary_color": "navy blue"})
        client = PerImageVisionClient({
            b"img-0": blazer_json_text,
            b"img-1": HttpError(429),
            b"img-2": "not json",
            b"img-3": skirt,
        })
        images = [ImageInput(data=f"img-{i}".encode()) for i in range(4)]

        results = asyncio.run(VisionClassifier(client, timeout=1).classify_batch(images))

        assert [r.index for r in results] == [0, 1, 2, 3]
        assert [r.success for r in results] == [True, False, False, True]
        assert results[1].error.reason == REASON_RATE_LIMITED
        assert isinstance(results[2].error, MalformedOutput)
        assert results[3].garment.garment_type == "pleated skirt"

    def test_unexpected_exception_is_contained(self):
        class ExplodingClient:
            async def invoke(self, *args):
                raise KeyError("boom")

        results = asyncio.run(VisionClassifier(ExplodingClient(), timeout=1).classify_batch([ImageInput(data=b"x")]))
        assert not results[0].success
        assert isinstance(results[0].error, UpstreamFailure)

    def test_empty_batch(self):
        assert asyncio.run(VisionClassifier(FakeVisionClient("{}"), timeout=1).classify_batch([])) == []


class TestWardrobeProfile:
    def test_profile_aggregates_successes(self, blazer_json_text):
        skirt = json.dumps({**BLAZER_JSON, "garment_type": "skirt", "primary_color": "#FFFFFF",
                            "aesthetic_style": "Preppy", "versatility_score": 5})
        client = PerImageVisionClient({b"a": blazer_json_text, b"b": skirt, b"c": HttpError(500)})
        images = [ImageInput(data=d) for d in (b"a", b"b", b"c")]
        results = asyncio.run(VisionClassifier(client, timeout=1).classify_batch(images))

        profile = build_wardrobe_profile(results)

        assert profile["total_items"] == 3
        assert profile["analyzed_items"] == 2
        assert profile["dominant_colors"] == ["Black", "White"]
        assert profile["style_preferences"] == ["Business Casual", "Preppy"]
        assert profile["average_versatility"] == 6.5
        assert len(profile["failures"]) == 1

    def test_color_palette(self, blazer):
        assert extract_color_palette(blazer) == ["Black", "White"]


# ==================== GEMINI CLIENT ====================

class TestGeminiVisionClient:
    def test_missing_key(self):
        client = GeminiVisionClient(api_key="", model="m1", fallback_model="m2")
        with pytest.raises(UpstreamFailure) as exc_info:
            asyncio.run(client.invoke("aGk=", "image/jpeg", "prompt"))
        assert exc_info.value.reason == REASON_NOT_CONFIGURED

    def test_falls_back_to_second_model(self):
        client = GeminiVisionClient(api_key="key", model="m1", fallback_model="m2")
        generate = AsyncMock(side_effect=[HttpError(503), '{"garment_type": "tee"}'])
        with patch.object(client, "_generate", generate):
            text = asyncio.run(client.invoke("aGk=", "image/jpeg", "prompt"))

        assert text == '{"garment_type": "tee"}'
        assert [c.args[0] for c in generate.call_args_list] == ["m1", "m2"]

    def test_invalid_credentials_skip_fallback(self):
        client = GeminiVisionClient(api_key="bad", model="m1", fallback_model="m2")
        generate = AsyncMock(side_effect=HttpError(401))
        with patch.object(client, "_generate", generate):
            with pytest.raises(UpstreamFailure) as exc_info:
                asyncio.run(client.invoke("aGk=", "image/jpeg", "prompt"))

        assert exc_info.value.reason == REASON_INVALID_CREDENTIALS
        assert generate.call_count == 1
