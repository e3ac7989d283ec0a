"""
Tests for question extraction from form images, with a fake model client
"""
import asyncio
import base64
from types import SimpleNamespace

import pytest

from mentorfeed.app.core.errors import ExtractionFailed
from mentorfeed.app.services.ocr import FormCandidateExtractor, decode_image, parse_candidates

PNG = b'\x89PNG\r\n\x1a\n' + b'\x00' * 32
JPEG = b'\xff\xd8\xff\xe0' + b'\x00' * 32


def _b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode()


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _extractor(content):
    completions = FakeCompletions(content)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return FormCandidateExtractor(client=client, model_name='test-model'), completions


class TestDecodeImage:
    def test_png_and_jpeg(self):
        assert decode_image(_b64(PNG)) == ('image/png', PNG)
        assert decode_image('data:image/jpeg;base64,' + _b64(JPEG))[0] == 'image/jpeg'

    @pytest.mark.parametrize('data', ['', 'not base64!!', _b64(b'GIF89a' + b'\x00' * 10)])
    def test_rejects_bad_input(self, data):
        with pytest.raises(ExtractionFailed):
            decode_image(data)

    def test_rejects_large_image(self):
        with pytest.raises(ExtractionFailed) as exc:
            decode_image(_b64(PNG + b'\x00' * 64), max_bytes=64)
        assert 'exceeds' in exc.value.message


class TestParseCandidates:
    def test_strips_code_fences(self):
        assert parse_candidates('```json\n[{"type": "text"}]\n```') == [{'type': 'text'}]

    @pytest.mark.parametrize('content', [None, '', 'Sorry, no form here', '{"type": "text"}'])
    def test_unusable_content(self, content):
        with pytest.raises(ExtractionFailed):
            parse_candidates(content)


def test_extract_returns_validated_questions_with_generated_ids():
    extractor, completions = _extractor(
        '[{"type": "rating", "label": " Rate the session ", "required": true, "minRating": 1, "maxRating": 5},'
        ' {"type": "radio", "label": "Would you return?", "options": ["Yes", "No"]}]'
    )
    questions = asyncio.run(extractor.extract(_b64(PNG)))

    assert [q.type for q in questions] == ['rating', 'radio']
    assert questions[0].label == 'Rate the session'
    assert questions[0].id.startswith('q') and questions[0].id.endswith('_0')
    assert questions[1].id.endswith('_1')
    assert len({q.id for q in questions}) == 2

    call = completions.calls[0]
    assert call['model'] == 'test-model'
    assert call['messages'][0]['content'][1]['image_url']['url'].startswith('data:image/png;base64,')


def test_invalid_candidate_is_an_extraction_error_not_dropped():
    extractor, _ = _extractor('[{"type": "text", "label": "Fine"}, {"type": "select", "label": "Pick one", "options": []}]')
    with pytest.raises(ExtractionFailed) as exc:
        asyncio.run(extractor.extract(_b64(PNG)))
    assert 'question 2 "Pick one" is invalid' in exc.value.message


def test_bad_image_never_reaches_the_model():
    extractor, completions = _extractor('[]')
    with pytest.raises(ExtractionFailed):
        asyncio.run(extractor.extract(_b64(b'not an image at all')))
    assert completions.calls == []


def test_default_client_requires_api_key():
    with pytest.raises(ExtractionFailed) as exc:
        asyncio.run(FormCandidateExtractor().extract(_b64(PNG)))
    assert 'OPENAI_API_KEY' in exc.value.message
