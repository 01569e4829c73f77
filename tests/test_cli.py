# tests/test_cli.py
import requests
from cli import _error_detail

def _http_error(status, body):
    r = requests.Response()
    r.status_code = status
    r._content = body
    return requests.HTTPError(f"{status} Client Error", response=r)

def test_error_detail_prefers_api_detail():
    e = _http_error(403, b'{"detail": "not_owner"}')
    assert _error_detail(e) == "HTTP 403: not_owner"

def test_error_detail_falls_back_to_message():
    e = _http_error(502, b"<html>bad gateway</html>")
    assert _error_detail(e) == "502 Client Error"
    assert _error_detail(ValueError("boom")) == "boom"
