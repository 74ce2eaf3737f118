"""Tests for the serverless results handler."""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
import pytest
from api.results import fetch_url, handler
from rankedpoll.results import ResultsError

POLL = {
    "id": 7,
    "title": "Lunch",
    "isClosed": True,
    "options": [{"id": 1, "text": "Pizza"}, {"id": 2, "text": "Sushi"}],
}
BALLOTS = [
    {"rankings": [{"optionId": 1, "rank": 1}]},
    {"rankings": [{"optionId": 1, "rank": 1}, {"optionId": 2, "rank": 2}]},
    {"rankings": [{"optionId": 2, "rank": 1}]},
]


def make_request(method="POST", content_type="application/json", body=b"", files=None, form=None):
    return SimpleNamespace(
        method=method,
        headers={"content-type": content_type},
        body=body,
        files=files or {},
        form=form or {},
    )


def json_request(data):
    return make_request(body=json.dumps(data).encode())


def response_json(response):
    return json.loads(response["body"])


class TestHandler:
    def test_options_preflight(self):
        response = handler(make_request(method="OPTIONS"))
        assert response["statusCode"] == 204
        assert response["headers"]["Access-Control-Allow-Methods"] == "POST, OPTIONS"
        assert response["headers"]["Access-Control-Allow-Origin"] == "*"

    def test_get_not_allowed(self):
        response = handler(make_request(method="GET"))
        assert response["statusCode"] == 405

    def test_inline_poll(self):
        response = handler(json_request({"poll": POLL, "ballots": BALLOTS}))
        assert response["statusCode"] == 200
        data = response_json(response)
        assert data["poll"]["title"] == "Lunch"
        assert data["results"]["winner"] == {"id": 1, "text": "Pizza"}
        assert data["results"]["totalVotes"] == 3
        assert data["results"]["rounds"][0]["voteCounts"] == {"1": 2, "2": 1}

    def test_inline_open_poll_rejected(self):
        response = handler(json_request({"poll": dict(POLL, isClosed=False), "ballots": BALLOTS}))
        assert response["statusCode"] == 400
        assert "closed" in response_json(response)["error"]

    def test_inline_poll_malformed(self):
        response = handler(json_request({"poll": {"title": "Lunch"}, "ballots": []}))
        assert response["statusCode"] == 400
        assert "No options" in response_json(response)["error"]

    def test_url(self):
        content = json.dumps(dict(POLL, ballots=BALLOTS)).encode()
        with patch("api.results.fetch_url", return_value=("https://x.test/p.json", content)) as fetch:
            response = handler(json_request({"url": "https://x.test/p.json"}))
        fetch.assert_called_once_with("https://x.test/p.json")
        assert response["statusCode"] == 200
        assert response_json(response)["results"]["winner"]["text"] == "Pizza"

    def test_missing_url_and_poll(self):
        response = handler(json_request({"something": "else"}))
        assert response["statusCode"] == 400
        assert "Missing" in response_json(response)["error"]

    def test_body_must_be_object(self):
        response = handler(json_request([1, 2]))
        assert response["statusCode"] == 400

    def test_invalid_json(self):
        response = handler(make_request(body=b"{nope"))
        assert response["statusCode"] == 400
        assert "Invalid JSON" in response_json(response)["error"]

    def test_unsupported_content_type(self):
        response = handler(make_request(content_type="text/plain"))
        assert response["statusCode"] == 400
        assert "Unsupported content type" in response_json(response)["error"]

    def test_file_upload(self):
        upload = MagicMock(filename="ballots.csv")
        upload.read.return_value = b"A,B\n1,2\n1,\n2,1\n"
        request = make_request(content_type="multipart/form-data; boundary=x", files={"file": upload})
        response = handler(request)
        assert response["statusCode"] == 200
        assert response_json(response)["results"]["winner"]["text"] == "A"

    def test_file_upload_missing_file(self):
        response = handler(make_request(content_type="multipart/form-data; boundary=x"))
        assert response["statusCode"] == 400
        assert "Missing 'file'" in response_json(response)["error"]

    def test_internal_error(self):
        with patch("api.results.analyze_export", side_effect=RuntimeError("boom")):
            with patch("api.results.fetch_url", return_value=("u", b"")):
                response = handler(json_request({"url": "https://x.test/p.json"}))
        assert response["statusCode"] == 500
        assert "boom" in response_json(response)["error"]


class TestFetchUrl:
    def test_rejects_non_http_scheme(self):
        with pytest.raises(ResultsError, match="Invalid URL scheme"):
            fetch_url("file:///etc/passwd")

    def _mock_client(self, mock_client_class):
        client = MagicMock()
        mock_client_class.return_value.__enter__.return_value = client
        return client

    def test_returns_content(self):
        with patch("api.results.httpx.Client") as mock_client_class:
            client = self._mock_client(mock_client_class)
            client.get.return_value = MagicMock(content=b"{}")
            assert fetch_url("https://x.test/p.json") == ("https://x.test/p.json", b"{}")

    def test_http_error(self):
        with patch("api.results.httpx.Client") as mock_client_class:
            client = self._mock_client(mock_client_class)
            response = MagicMock(status_code=404)
            response.raise_for_status.side_effect = httpx.HTTPStatusError(
                "not found", request=MagicMock(), response=response,
            )
            client.get.return_value = response
            with pytest.raises(ResultsError, match="404"):
                fetch_url("https://x.test/p.json")

    def test_request_error(self):
        with patch("api.results.httpx.Client") as mock_client_class:
            client = self._mock_client(mock_client_class)
            client.get.side_effect = httpx.ConnectError("connection refused")
            with pytest.raises(ResultsError, match="connection refused"):
                fetch_url("https://x.test/p.json")
