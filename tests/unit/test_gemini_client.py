"""Unit tests for ai_client.gemini_client and ai_client.prompt modules."""

from unittest.mock import MagicMock, patch

import pytest
from requests.exceptions import ConnectionError, Timeout

from legacy_cleaner.ai_client import (
    AIAccessError,
    AIRequestError,
    AISettings,
    GeminiCleaner,
    MissingAPIKeyError,
    build_system_prompt,
    clean_with_ai,
)
from legacy_cleaner.models import ConversionConfig, ErrorKind, ParagraphMode


def _response(status_code=200, json_data=None, headers=None):
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


def _candidate(text):
    return {'candidates': [{'content': {'parts': [{'text': text}]}}]}


@pytest.fixture
def authenticator():
    auth = MagicMock()
    auth.get_api_key.return_value = 'test-key'
    return auth


@pytest.fixture
def session():
    return MagicMock()


class TestBuildSystemPrompt:
    """Test cases for the system instruction."""

    def test_lists_allowed_tags(self):
        """The prompt names the legacy tag vocabulary."""
        prompt = build_system_prompt(ConversionConfig())
        for tag in ('<b>', '<i>', '<u>', '<sub>', '<sup>', '<p>', '<br>', '<ul>', '<ol>', '<li>'):
            assert tag in prompt

    def test_paragraph_rule_follows_mode(self):
        """The paragraph rule changes with the paragraph mode."""
        paragraphs = build_system_prompt(ConversionConfig())
        line_breaks = build_system_prompt(ConversionConfig(paragraph_mode=ParagraphMode.LINE_BREAKS))
        assert "Paragraphs -> <p>" in paragraphs
        assert "Do NOT use <p> tags" in line_breaks


class TestGeminiCleaner:
    """Test cases for GeminiCleaner."""

    def test_posts_to_generate_content(self, authenticator, session):
        """The request goes to the model endpoint with the key header."""
        session.post.return_value = _response(json_data=_candidate("<b>x</b>"))
        cleaner = GeminiCleaner(authenticator, AISettings(model='gemini-test', timeout=5), session)

        cleaner.clean("<strong>x</strong>", ConversionConfig())

        args, kwargs = session.post.call_args
        assert args[0].endswith("/models/gemini-test:generateContent")
        assert kwargs['headers'] == {'x-goog-api-key': 'test-key'}
        assert kwargs['timeout'] == 5
        payload = kwargs['json']
        assert payload['contents'][0]['parts'][0]['text'] == "<strong>x</strong>"
        assert payload['generationConfig']['temperature'] == 0.1
        assert "Legacy HTML Converter" in payload['system_instruction']['parts'][0]['text']

    def test_returns_trimmed_text(self, authenticator, session):
        """Model output is joined across parts and trimmed."""
        session.post.return_value = _response(json_data={
            'candidates': [{'content': {'parts': [{'text': '  <p>a'}, {'text': '</p>\n'}]}}],
        })
        cleaner = GeminiCleaner(authenticator, session=session)
        assert cleaner.clean("a", ConversionConfig()) == "<p>a</p>"

    def test_missing_key_raises_before_request(self, session):
        """No request is sent without an API key."""
        auth = MagicMock()
        auth.get_api_key.side_effect = MissingAPIKeyError(('GEMINI_API_KEY',))
        cleaner = GeminiCleaner(auth, session=session)

        with pytest.raises(MissingAPIKeyError):
            cleaner.clean("x", ConversionConfig())
        session.post.assert_not_called()

    def test_http_error_raises_request_error(self, authenticator, session):
        """HTTP errors raise AIRequestError with the status code."""
        session.post.return_value = _response(status_code=400, json_data={})
        cleaner = GeminiCleaner(authenticator, session=session)

        with pytest.raises(AIRequestError) as exc_info:
            cleaner.clean("x", ConversionConfig())
        assert exc_info.value.status_code == 400

    def test_timeout_raises_request_error(self, authenticator, session):
        """Timeouts raise AIRequestError."""
        session.post.side_effect = Timeout()
        cleaner = GeminiCleaner(authenticator, session=session)

        with pytest.raises(AIRequestError, match="timed out"):
            cleaner.clean("x", ConversionConfig())

    def test_connection_error_raises_request_error(self, authenticator, session):
        """Connection failures raise AIRequestError."""
        session.post.side_effect = ConnectionError()
        cleaner = GeminiCleaner(authenticator, session=session)

        with pytest.raises(AIRequestError, match="unreachable"):
            cleaner.clean("x", ConversionConfig())

    def test_invalid_json_raises_request_error(self, authenticator, session):
        """A non-JSON body raises AIRequestError."""
        session.post.return_value = _response(json_data=ValueError("no json"))
        cleaner = GeminiCleaner(authenticator, session=session)

        with pytest.raises(AIRequestError, match="invalid JSON"):
            cleaner.clean("x", ConversionConfig())

    def test_blocked_prompt_reports_reason(self, authenticator, session):
        """An empty candidate list reports the block reason."""
        session.post.return_value = _response(json_data={'promptFeedback': {'blockReason': 'SAFETY'}})
        cleaner = GeminiCleaner(authenticator, session=session)

        with pytest.raises(AIRequestError, match="SAFETY"):
            cleaner.clean("x", ConversionConfig())

    @patch('legacy_cleaner.ai_client.retry_logic.time.sleep')
    def test_rate_limit_is_retried(self, mock_sleep, authenticator, session):
        """HTTP 429 is retried before succeeding."""
        session.post.side_effect = [
            _response(status_code=429, json_data={}),
            _response(json_data=_candidate("<b>ok</b>")),
        ]
        cleaner = GeminiCleaner(authenticator, session=session)

        assert cleaner.clean("x", ConversionConfig()) == "<b>ok</b>"
        assert session.post.call_count == 2
        mock_sleep.assert_called_once_with(1)

    @patch('legacy_cleaner.ai_client.retry_logic.time.sleep')
    def test_persistent_rate_limit_raises_access_error(self, mock_sleep, authenticator, session):
        """Rate limiting after every retry raises AIAccessError."""
        session.post.return_value = _response(status_code=429, json_data={})
        cleaner = GeminiCleaner(authenticator, session=session)

        with pytest.raises(AIAccessError):
            cleaner.clean("x", ConversionConfig())
        assert session.post.call_count == 4

    @patch('legacy_cleaner.ai_client.retry_logic.time.sleep')
    def test_overloaded_model_is_retried(self, mock_sleep, authenticator, session):
        """HTTP 503 from an overloaded model is retried."""
        session.post.side_effect = [
            _response(status_code=503, json_data={}),
            _response(json_data=_candidate("ok")),
        ]
        cleaner = GeminiCleaner(authenticator, session=session)

        assert cleaner.clean("x", ConversionConfig()) == "ok"

    @patch('legacy_cleaner.ai_client.retry_logic.time.sleep')
    def test_waits_for_retry_info_delay(self, mock_sleep, authenticator, session):
        """The RetryInfo delay in a quota error replaces a shorter backoff."""
        quota_error = {'error': {
            'code': 429,
            'status': 'RESOURCE_EXHAUSTED',
            'details': [
                {'@type': 'type.googleapis.com/google.rpc.QuotaFailure'},
                {'@type': 'type.googleapis.com/google.rpc.RetryInfo', 'retryDelay': '19s'},
            ],
        }}
        session.post.side_effect = [
            _response(status_code=429, json_data=quota_error),
            _response(json_data=_candidate("ok")),
        ]
        cleaner = GeminiCleaner(authenticator, session=session)

        cleaner.clean("x", ConversionConfig())

        mock_sleep.assert_called_once_with(19.0)

    @patch('legacy_cleaner.ai_client.retry_logic.time.sleep')
    def test_waits_for_retry_after_header(self, mock_sleep, authenticator, session):
        """A Retry-After header sets the wait."""
        session.post.side_effect = [
            _response(status_code=503, json_data=ValueError("html"), headers={'Retry-After': '5'}),
            _response(json_data=_candidate("ok")),
        ]
        cleaner = GeminiCleaner(authenticator, session=session)

        cleaner.clean("x", ConversionConfig())

        mock_sleep.assert_called_once_with(5.0)

    def test_retry_delay_only_read_for_retryable_status(self, authenticator, session):
        """Other HTTP errors carry no retry delay."""
        session.post.return_value = _response(status_code=400, json_data={}, headers={'Retry-After': '5'})
        cleaner = GeminiCleaner(authenticator, session=session)

        with pytest.raises(AIRequestError) as exc_info:
            cleaner.clean("x", ConversionConfig())
        assert exc_info.value.retry_delay is None


class TestCleanWithAI:
    """Test cases for clean_with_ai."""

    def test_success_reports_lengths(self):
        """Success carries the output and length statistics only."""
        cleaner = MagicMock()
        cleaner.clean.return_value = "<b>x</b>"

        result = clean_with_ai("<strong>x</strong>", ConversionConfig(), cleaner)

        assert result.ok is True
        assert result.html == "<b>x</b>"
        assert result.stats.original_length == len("<strong>x</strong>")
        assert result.stats.final_length == len("<b>x</b>")
        assert result.stats.tags_removed == 0

    def test_decodes_bytes(self):
        """Bytes input is decoded before sending."""
        cleaner = MagicMock()
        cleaner.clean.return_value = "x"

        clean_with_ai("café".encode('utf-8'), ConversionConfig(), cleaner)

        assert cleaner.clean.call_args.args[0] == "café"

    def test_client_errors_become_failures(self):
        """Client errors are returned as failures, never raised."""
        cleaner = MagicMock()
        cleaner.clean.side_effect = AIRequestError("Generative service is unreachable")

        result = clean_with_ai("x", ConversionConfig(), cleaner)

        assert result.ok is False
        assert result.kind is ErrorKind.UNEXPECTED_FAILURE
        assert result.message == "Generative service is unreachable"
