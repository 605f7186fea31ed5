"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Unit tests for request building (BaseClient.new_request).
"""

import pytest
from hypothesis import given, settings, strategies as st

from hsdp_api.exceptions import ConfigurationError, OptionError
from hsdp_api.iam.token import StaticTokenProvider
from hsdp_api.transport.client import BaseClient, parse_base_url
from hsdp_api.transport.options import with_header, with_query

BASE_URL = "https://example.org/store/fhir/"
TOKEN = "YM7eZakYwqoui5znoH4g"


class TestBaseUrl:
    def test_trailing_slash_is_added(self, token_provider):
        client = BaseClient(token_provider, base_url="https://example.org/store/fhir")
        assert client.base_url == "https://example.org/store/fhir/"

    def test_trailing_slash_kept(self, token_provider):
        client = BaseClient(token_provider, base_url=BASE_URL)
        assert client.base_url == BASE_URL

    def test_bare_host_gets_root_path(self):
        parsed = parse_base_url("https://example.org")
        assert parsed.path == "/"

    @pytest.mark.parametrize("url", ["", "not a url", "ftp://example.org/", "/store/fhir/", "http://[::1/"])
    def test_invalid_base_url_fails_construction(self, token_provider, url):
        with pytest.raises(ConfigurationError):
            BaseClient(token_provider, base_url=url)

    def test_failed_reconfiguration_leaves_client_unusable(self, client):
        with pytest.raises(ConfigurationError):
            client.set_base_url("")
        assert client.base_url == ""
        with pytest.raises(ConfigurationError):
            client.new_request("GET", "Patient/123")


class TestUrlResolution:
    def test_root_org_and_path_are_appended(self, client):
        req = client.new_request("GET", "Patient/123")
        assert req.url == "https://example.org/store/fhir/org1/Patient/123"
        assert req.prepare().url == "https://example.org/store/fhir/org1/Patient/123"

    def test_path_is_not_reencoded(self, client):
        req = client.new_request("GET", "Binary/a%2Fb%7E~c")
        assert req.prepare().url == "https://example.org/store/fhir/org1/Binary/a%2Fb%7E~c"

    def test_dot_segments_are_not_resolved(self, client):
        req = client.new_request("GET", "Patient/../Observation")
        assert req.prepare().url.endswith("/org1/Patient/../Observation")

    def test_without_root_org(self, token_provider):
        client = BaseClient(token_provider, base_url="https://stl.example.org/api")
        req = client.new_request("POST", "graphql", b"{}")
        assert req.url == "https://stl.example.org/api/graphql"

    def test_query_from_option_on_get(self, client):
        req = client.new_request("GET", "Patient", options=[with_query({"name": "smith", "_count": 10})])
        assert req.prepare().url == "https://example.org/store/fhir/org1/Patient?name=smith&_count=10"


class TestBody:
    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "post"])
    def test_mutating_method_carries_body(self, client, method):
        body = b'{"resourceType": "Patient"}'
        req = client.new_request(method, "Patient", body)
        assert req.body == body
        assert req.headers["Content-Length"] == str(len(body))
        assert req.prepare().body == body

    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH"])
    def test_mutating_method_clears_query(self, client, method):
        req = client.new_request(method, "Patient", b"{}", options=[with_query({"a": "b"})])
        assert req.params == {}
        assert "?" not in req.prepare().url

    def test_mutating_method_keeps_query_in_path(self, client):
        req = client.new_request("POST", "Patient/$validate?profile=x", b"{}", options=[with_query({"a": "b"})])
        assert req.prepare().url == "https://example.org/store/fhir/org1/Patient/$validate?profile=x"

    def test_mutating_method_without_body_has_zero_length(self, client):
        req = client.new_request("POST", "Patient/$validate")
        assert req.body == b""
        assert req.headers["Content-Length"] == "0"

    def test_string_body_is_utf8_encoded(self, client):
        req = client.new_request("PUT", "Patient/1", '{"name": "Zoë"}')
        assert req.body == '{"name": "Zoë"}'.encode("utf-8")
        assert req.content_length == len(req.body)

    @pytest.mark.parametrize("method", ["GET", "DELETE", "HEAD"])
    def test_non_mutating_method_ignores_body(self, client, method):
        req = client.new_request(method, "Patient/1", b"ignored")
        assert req.body is None
        assert "Content-Length" not in req.headers
        assert req.prepare().body is None

    def test_non_mutating_method_drops_option_content_length(self, client):
        req = client.new_request("GET", "Patient/1", options=[with_header("Content-Length", "12")])
        assert "Content-Length" not in req.headers

    @settings(max_examples=50)
    @given(
        method=st.sampled_from(["POST", "PUT", "PATCH"]),
        body=st.binary(min_size=1, max_size=512),
        params=st.dictionaries(st.text("abcxyz", min_size=1, max_size=5), st.text(max_size=5), max_size=3),
    )
    def test_content_length_matches_body(self, method, body, params):
        provider = StaticTokenProvider(token=TOKEN, max_retries=0)
        client = BaseClient(provider, base_url=BASE_URL, root_org_id="org1")
        req = client.new_request(method, "Observation", body, options=[with_query(params)])
        assert req.content_length == len(body)
        assert req.headers["Content-Length"] == str(len(body))
        assert req.query == ""

    @settings(max_examples=50)
    @given(method=st.sampled_from(["GET", "DELETE"]), body=st.binary(max_size=256))
    def test_non_mutating_never_has_body(self, method, body):
        provider = StaticTokenProvider(token=TOKEN, max_retries=0)
        client = BaseClient(provider, base_url=BASE_URL, root_org_id="org1")
        req = client.new_request(method, "Observation", body)
        assert req.body is None


class TestStandardHeaders:
    def test_standard_headers_are_set(self, client):
        req = client.new_request("GET", "Patient/123")
        assert req.headers["Accept"] == "*/*"
        assert req.headers["Authorization"] == f"Bearer {TOKEN}"
        assert req.headers["API-Version"] == "1"
        assert req.headers["User-Agent"].startswith("hsdp-api-python/")

    def test_options_cannot_override_standard_headers(self, client):
        req = client.new_request("GET", "Patient/123", options=[
            with_header("Accept", "application/xml"),
            with_header("Authorization", "Basic Zm9vOmJhcg=="),
            with_header("API-Version", "2"),
        ])
        assert req.headers["Accept"] == "*/*"
        assert req.headers["Authorization"] == f"Bearer {TOKEN}"
        assert req.headers["API-Version"] == "1"

    def test_custom_headers_survive(self, client):
        req = client.new_request("GET", "Patient/123", options=[with_header("X-Trace", "abc")])
        assert req.headers["X-Trace"] == "abc"

    def test_empty_user_agent_is_omitted(self, token_provider):
        client = BaseClient(token_provider, base_url=BASE_URL, user_agent="")
        req = client.new_request("GET", "Patient")
        assert "User-Agent" not in req.headers

    def test_api_version_omitted_when_unset(self, token_provider):
        client = BaseClient(token_provider, base_url=BASE_URL)
        req = client.new_request("GET", "Patient")
        assert "API-Version" not in req.headers

    def test_token_rotation_is_picked_up(self, client, token_provider):
        first = client.new_request("GET", "Patient/1")
        token_provider.set_token("rotated-token")
        second = client.new_request("GET", "Patient/1")
        assert first.headers["Authorization"] == f"Bearer {TOKEN}"
        assert second.headers["Authorization"] == "Bearer rotated-token"

    def test_unauthenticated_provider_sends_empty_bearer(self, token_provider):
        token_provider.set_token("")
        client = BaseClient(token_provider, base_url=BASE_URL)
        req = client.new_request("GET", "Patient")
        assert req.headers["Authorization"] == "Bearer "


class TestOptionChain:
    def test_options_run_in_order(self, client):
        order = []

        def first(req):
            order.append("first")
            req.headers["X-Step"] = "1"

        def second(req):
            order.append("second")
            req.headers["X-Step"] = req.headers["X-Step"] + "2"

        req = client.new_request("GET", "Patient", options=[first, second])
        assert order == ["first", "second"]
        assert req.headers["X-Step"] == "12"

    def test_none_options_are_skipped(self, client):
        req = client.new_request("GET", "Patient", options=[None, with_header("X-A", "1"), None])
        assert req.headers["X-A"] == "1"

    def test_first_failure_aborts_and_propagates_verbatim(self, client):
        error = OptionError("rejected")
        ran = []

        def failing(req):
            raise error

        def later(req):
            ran.append(True)

        with pytest.raises(OptionError) as exc_info:
            client.new_request("GET", "Patient", options=[failing, later])
        assert exc_info.value is error
        assert ran == []

    def test_arbitrary_exception_propagates_unchanged(self, client):
        def failing(req):
            raise KeyError("missing")

        with pytest.raises(KeyError):
            client.new_request("GET", "Patient", options=[failing])

    def test_failing_option_sends_nothing(self, client, mock_adapter):
        def failing(req):
            raise OptionError("nope")

        with pytest.raises(OptionError):
            req = client.new_request("GET", "Patient", options=[failing])
            client.do(req)
        assert mock_adapter.sent_requests == []
