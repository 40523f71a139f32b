"""
Tests for core.fetcher - remote image download with timeout and size ceiling
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from core.exceptions import FetchError, PayloadTooLarge
from core.fetcher import fetch_image_from_url, is_oversized


def _response(status=200, headers=None, chunks=(b'abc',)):
    response = MagicMock()
    response.ok = 200 <= status < 400
    response.status_code = status
    response.headers = headers or {}
    response.iter_content.return_value = iter(chunks)
    return response


@pytest.mark.parametrize('value, expected', [
    (None, False),
    ('', False),
    ('abc', False),
    ('100', False),
    ('101', True),
])
def test_is_oversized(value, expected):
    assert is_oversized(value, 100) is expected


def test_fetch_returns_body_and_passes_timeout():
    response = _response(chunks=(b'one', b'', b'two'))
    with patch('core.fetcher.requests.get', return_value=response) as mock_get:
        assert fetch_image_from_url('https://example.com/a.jpg', timeout=3) == b'onetwo'
    _, kwargs = mock_get.call_args
    assert kwargs['timeout'] == 3
    assert kwargs['stream'] is True
    response.close.assert_called_once()


def test_non_success_status_is_fetch_error():
    with patch('core.fetcher.requests.get', return_value=_response(status=404)):
        with pytest.raises(FetchError, match='404'):
            fetch_image_from_url('https://example.com/missing.jpg')


def test_timeout_is_fetch_error():
    with patch('core.fetcher.requests.get', side_effect=requests.exceptions.Timeout('slow')):
        with pytest.raises(FetchError, match='Timed out'):
            fetch_image_from_url('https://example.com/slow.jpg', timeout=1)


def test_connection_error_is_fetch_error():
    with patch('core.fetcher.requests.get', side_effect=requests.exceptions.ConnectionError('refused')):
        with pytest.raises(FetchError):
            fetch_image_from_url('https://unreachable.invalid/a.jpg')


def test_declared_length_over_ceiling_rejected_before_reading():
    response = _response(headers={'Content-Length': str(11 * 1024 * 1024)})
    with patch('core.fetcher.requests.get', return_value=response):
        with pytest.raises(PayloadTooLarge):
            fetch_image_from_url('https://example.com/huge.jpg')
    response.iter_content.assert_not_called()


def test_undersized_declaration_cannot_smuggle_large_body():
    response = _response(headers={'Content-Length': '10'}, chunks=(b'x' * 60, b'x' * 60))
    with patch('core.fetcher.requests.get', return_value=response):
        with pytest.raises(PayloadTooLarge):
            fetch_image_from_url('https://example.com/liar.jpg', max_bytes=100)
    response.close.assert_called_once()


def test_read_error_midstream_is_fetch_error():
    response = _response()
    response.iter_content.side_effect = requests.exceptions.ChunkedEncodingError('broken')
    with patch('core.fetcher.requests.get', return_value=response):
        with pytest.raises(FetchError):
            fetch_image_from_url('https://example.com/broken.jpg')
