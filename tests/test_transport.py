"""
Tests des transports de batch et de la récupération progressive des sections.
"""

from unittest.mock import MagicMock

import pytest
import requests

from wiki_translator.delivery import HttpBatchTransport, LocalBatchTransport, iter_sections
from wiki_translator.exceptions import (
    ConfigurationError,
    ProviderError,
    ProviderResponseError,
    ProviderTransportError,
    RevisionNotFound,
)

BASE_URL = "http://wiki.test/wiki-translator/"


def make_response(status_code=200, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = "Reason"
    response.text = text
    if payload is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


class TestHttpBatchTransport:
    def test_posts_batch(self, session):
        session.post.return_value = make_response(
            payload={"translations": {"Hello": "Hola"}}
        )
        transport = HttpBatchTransport(BASE_URL, session=session, page_title="Apple")

        assert transport.translate(["Hello"], "es") == {"Hello": "Hola"}

        args, kwargs = session.post.call_args
        assert args[0] == "http://wiki.test/wiki-translator/translate_batch"
        assert kwargs["json"] == {
            "strings": ["Hello"],
            "targetLang": "es",
            "pageTitle": "Apple",
        }

    def test_server_error(self, session):
        session.post.return_value = make_response(
            502, payload={"error": "down", "kind": "provider", "translations": {}}
        )

        with pytest.raises(ProviderTransportError, match="502"):
            HttpBatchTransport(BASE_URL, session=session).translate(["Hello"], "es")

    def test_configuration_error(self, session):
        session.post.return_value = make_response(
            500, payload={"error": "no key", "kind": "configuration"}
        )

        with pytest.raises(ConfigurationError, match="no key"):
            HttpBatchTransport(BASE_URL, session=session).translate(["Hello"], "es")

    def test_network_error(self, session):
        session.post.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ProviderTransportError) as exc_info:
            HttpBatchTransport(BASE_URL, session=session).translate(["Hello"], "es")
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_timeout(self, session):
        session.post.side_effect = requests.Timeout()

        with pytest.raises(ProviderTransportError, match="Timeout"):
            HttpBatchTransport(BASE_URL, session=session, timeout=5).translate(["a"], "es")

    def test_malformed_body(self, session):
        session.post.return_value = make_response(200, payload={"unexpected": True})

        with pytest.raises(ProviderResponseError):
            HttpBatchTransport(BASE_URL, session=session).translate(["Hello"], "es")


class TestLocalBatchTransport:
    def test_returns_translations(self, translator):
        assert LocalBatchTransport(translator).translate(["Hello"], "es") == {
            "Hello": "[es] Hello"
        }

    def test_raises_provider_error(self, failing_translator):
        with pytest.raises(ProviderError):
            LocalBatchTransport(failing_translator).translate(["Hello"], "es")

    def test_blank_batch_never_fails(self, failing_translator):
        assert LocalBatchTransport(failing_translator).translate(["  "], "es") == {
            "  ": "  "
        }


class TestIterSections:
    def test_stops_at_empty_section(self, session):
        session.post.side_effect = [
            make_response(payload={"html": "<p>Intro</p>", "section": 0}),
            make_response(payload={"html": "<h2>A</h2>", "section": 1}),
            make_response(payload={"html": "", "section": 2}),
        ]

        sections = list(iter_sections(BASE_URL, 42, "es", session=session))

        assert sections == [(0, "<p>Intro</p>"), (1, "<h2>A</h2>")]
        assert session.post.call_count == 3
        args, kwargs = session.post.call_args
        assert args[0] == "http://wiki.test/wiki-translator/translate/42"
        assert kwargs["json"] == {"targetLang": "es", "section": 2}

    def test_unknown_revision(self, session):
        session.post.return_value = make_response(404, payload={"kind": "not_found"})

        with pytest.raises(RevisionNotFound):
            list(iter_sections(BASE_URL, 7, "es", session=session))

    def test_server_error(self, session):
        session.post.return_value = make_response(502, payload={"error": "down"})

        with pytest.raises(ProviderTransportError):
            list(iter_sections(BASE_URL, 42, "es", session=session))
