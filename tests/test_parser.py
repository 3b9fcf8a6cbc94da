"""
Tests du parsing strict des sorties du fournisseur.
"""

import pytest

from wiki_translator.exceptions import ProviderError, ProviderResponseError
from wiki_translator.translation.parser import parse_provider_output, strip_wrapping


class TestStripWrapping:
    def test_code_fence(self):
        assert strip_wrapping('```json\n["a", "b"]\n```') == '["a", "b"]'

    def test_prose_around_array(self):
        assert strip_wrapping('Here you go:\n["a"]\nEnjoy!') == '["a"]'

    def test_no_array(self):
        assert strip_wrapping("  nothing here ") == "nothing here"

    def test_fence_inside_string_is_kept(self):
        assert strip_wrapping('["Run ```make``` first"]') == '["Run ```make``` first"]'

    def test_prose_around_fence(self):
        assert strip_wrapping('Voici :\n```json\n["a"]\n```') == '["a"]'


class TestParseProviderOutput:
    def test_plain_array(self):
        assert parse_provider_output('["Hola", "Mundo"]', 2) == ["Hola", "Mundo"]

    def test_fenced_array(self):
        output = '```json\n["Hola", "Mundo"]\n```'
        assert parse_provider_output(output, 2) == ["Hola", "Mundo"]

    def test_brackets_inside_strings(self):
        assert parse_provider_output('["[1] nota", "ok"]', 2) == ["[1] nota", "ok"]

    def test_code_inside_translation(self):
        output = "```json\n[\"Lancez ```make``` d'abord\"]\n```"
        assert parse_provider_output(output, 1) == ["Lancez ```make``` d'abord"]

    def test_invalid_json(self):
        with pytest.raises(ProviderResponseError) as exc_info:
            parse_provider_output("Lo siento, no puedo.", 1)

        error = exc_info.value
        assert error.expected_count == 1
        assert error.actual_count is None
        assert error.raw == "Lo siento, no puedo."

    def test_object_instead_of_array(self):
        with pytest.raises(ProviderResponseError):
            parse_provider_output('{"Hello": "Hola"}', 1)

    def test_non_string_items(self):
        with pytest.raises(ProviderResponseError) as exc_info:
            parse_provider_output('["Hola", 2]', 2)
        assert exc_info.value.actual_count == 2

    def test_too_few_items(self):
        with pytest.raises(ProviderResponseError) as exc_info:
            parse_provider_output('["Hola"]', 2)

        assert exc_info.value.expected_count == 2
        assert exc_info.value.actual_count == 1

    def test_too_many_items(self):
        with pytest.raises(ProviderResponseError) as exc_info:
            parse_provider_output('["a", "b", "c"]', 2)
        assert exc_info.value.actual_count == 3

    def test_response_error_is_retryable_provider_error(self):
        with pytest.raises(ProviderError) as exc_info:
            parse_provider_output("[]", 1)
        assert exc_info.value.retryable
