"""
Tests for request parameter validation, URL assembly, header merging and
query encoding.
"""

import pytest
from pydantic import ValidationError

from wacloud.core.config.settings import Settings
from wacloud.messaging.whatsapp.client import (
    RequestParams,
    WhatsAppUrlBuilder,
    build_request,
)
from wacloud.messaging.whatsapp.utils import RequestConstructionError


def make_params(**overrides) -> RequestParams:
    values = {
        "base_url": "https://graph.facebook.com",
        "api_version": "v21.0",
        "sender_id": "1098765432",
        "endpoint": "messages",
    }
    values.update(overrides)
    return RequestParams(**values)


class TestUrlAssembly:
    @pytest.mark.parametrize(
        "base_url, api_version, sender_id, endpoint",
        [
            ("https://graph.facebook.com", "v21.0", "1098765432", "messages"),
            ("https://graph.facebook.com/", "v21.0", "1098765432", "messages"),
            ("https://graph.facebook.com/", "/v21.0/", "/1098765432/", "/messages"),
            ("https://graph.facebook.com//", "v21.0//", "1098765432", "messages"),
        ],
    )
    def test_slash_variations_join_to_same_url(
        self, base_url, api_version, sender_id, endpoint
    ):
        request = build_request(
            make_params(
                base_url=base_url,
                api_version=api_version,
                sender_id=sender_id,
                endpoint=endpoint,
            )
        )
        assert request.url == "https://graph.facebook.com/v21.0/1098765432/messages"

    def test_base_url_path_is_kept(self):
        request = build_request(make_params(base_url="http://localhost:8080/graph/"))
        assert request.url == "http://localhost:8080/graph/v21.0/1098765432/messages"

    def test_trailing_slash_on_endpoint_is_preserved(self):
        request = build_request(make_params(endpoint="messages/"))
        assert request.url.endswith("/1098765432/messages/")

    def test_dot_segments_are_resolved(self):
        request = build_request(make_params(endpoint="./media/../messages"))
        assert request.url == "https://graph.facebook.com/v21.0/1098765432/messages"

    def test_segments_are_percent_encoded(self):
        request = build_request(make_params(endpoint="média"))
        assert request.url.endswith("/1098765432/m%C3%A9dia")

    @pytest.mark.parametrize("base_url", ["graph.facebook.com", "ftp://host", "http://[::1"])
    def test_malformed_base_url_fails(self, base_url):
        with pytest.raises(RequestConstructionError):
            build_request(make_params(base_url=base_url))

    @pytest.mark.parametrize("endpoint", ["messages?x=1", "mes sages", "messages#top"])
    def test_segment_with_unjoinable_characters_fails(self, endpoint):
        with pytest.raises(RequestConstructionError) as exc_info:
            build_request(make_params(endpoint=endpoint))
        assert exc_info.value.step == "build request"

    @pytest.mark.parametrize("endpoint", ["a%zz", "messages%", "media%2"])
    def test_stray_percent_sign_fails(self, endpoint):
        with pytest.raises(RequestConstructionError, match="percent-escape"):
            build_request(make_params(endpoint=endpoint))

    def test_existing_escapes_are_kept(self):
        request = build_request(make_params(endpoint="media%20files"))
        assert request.url.endswith("/1098765432/media%20files")

    def test_url_builder_messages_url(self):
        builder = WhatsAppUrlBuilder("https://graph.facebook.com/", "v21.0", "42")
        assert builder.get_messages_url() == "https://graph.facebook.com/v21.0/42/messages"


class TestBody:
    def test_absent_payload_sends_no_body(self):
        request = build_request(make_params(method="GET"))
        assert request.body is None
        assert request.method == "GET"

    def test_payload_is_sent_verbatim(self):
        payload = b'{"b": 1,   "a": 2}'
        request = build_request(make_params(), payload)
        assert request.body is payload

    def test_empty_payload_is_present(self):
        assert build_request(make_params(), b"").body == b""


class TestHeaders:
    def test_caller_headers_are_applied(self):
        request = build_request(
            make_params(headers={"Content-Type": "application/json", "X-Trace": "abc"})
        )
        assert request.headers == {"Content-Type": "application/json", "X-Trace": "abc"}

    def test_bearer_token_sets_authorization(self):
        request = build_request(make_params(bearer_token="secret"))
        assert request.headers["Authorization"] == "Bearer secret"

    @pytest.mark.parametrize("header_name", ["Authorization", "authorization", "AUTHORIZATION"])
    def test_bearer_token_overrides_caller_authorization(self, header_name):
        request = build_request(
            make_params(headers={header_name: "Basic dXNlcjpwYXNz"}, bearer_token="secret")
        )
        auth_values = [
            value for key, value in request.headers.items() if key.lower() == "authorization"
        ]
        assert auth_values == ["Bearer secret"]

    def test_caller_authorization_kept_without_token(self):
        request = build_request(make_params(headers={"Authorization": "Basic abc"}))
        assert request.headers["Authorization"] == "Basic abc"

    def test_duplicate_keys_overwrite(self):
        request = build_request(
            make_params(headers={"content-type": "text/plain", "Content-Type": "application/json"})
        )
        assert request.headers == {"Content-Type": "application/json"}


class TestQuery:
    def test_query_is_percent_encoded(self):
        request = build_request(
            make_params(method="GET", query={"fields": "id,name", "q": "a b&c"})
        )
        assert request.url == (
            "https://graph.facebook.com/v21.0/1098765432/messages"
            "?fields=id%2Cname&q=a+b%26c"
        )

    def test_empty_query_adds_nothing(self):
        assert "?" not in build_request(make_params()).url

    def test_query_merges_with_base_url_query(self):
        request = build_request(
            make_params(base_url="https://graph.facebook.com/?debug=all", query={"debug": "none"})
        )
        assert request.url.endswith("/messages?debug=none")


class TestRequestParams:
    @pytest.mark.parametrize("field", ["base_url", "api_version", "sender_id", "endpoint"])
    def test_required_segments_must_be_non_empty(self, field):
        with pytest.raises(ValidationError):
            make_params(**{field: ""})

    def test_method_is_normalized(self):
        assert make_params(method="post").method == "POST"

    def test_invalid_method_rejected(self):
        with pytest.raises(ValidationError):
            make_params(method="FETCH")

    def test_params_are_immutable(self):
        params = make_params()
        with pytest.raises(ValidationError):
            params.endpoint = "media"

    def test_from_settings(self):
        params = RequestParams.from_settings(config=Settings())
        assert params.sender_id == "test_phone_id"
        assert params.bearer_token == "test_token"
        assert params.endpoint == "messages"
        assert params.headers == {"Content-Type": "application/json"}

    def test_from_settings_requires_credentials(self, monkeypatch):
        monkeypatch.delenv("WP_ACCESS_TOKEN")
        with pytest.raises(ValueError, match="WP_ACCESS_TOKEN"):
            RequestParams.from_settings(config=Settings())
