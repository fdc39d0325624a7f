"""可达性探测：HEAD 请求结果分类。"""

import pytest
import requests

from app.packages.onboarding.services.reachability import ProbeOutcome, ReachabilityProber, classify_status


class _Response:
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        self.closed = False

    def close(self) -> None:
        self.closed = True


class _Session:
    def __init__(self, status_code: int = 200, error: Exception | None = None) -> None:
        self.status_code = status_code
        self.error = error
        self.calls: list[tuple[str, dict]] = []
        self.responses: list[_Response] = []

    def head(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        response = _Response(self.status_code)
        self.responses.append(response)
        return response


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [
        (200, ProbeOutcome.REACHABLE),
        (204, ProbeOutcome.REACHABLE),
        (404, ProbeOutcome.NOT_FOUND),
        (401, ProbeOutcome.OTHER_ERROR),
        (500, ProbeOutcome.OTHER_ERROR),
    ],
)
def test_classify_status(status_code, expected):
    assert classify_status(status_code) is expected


def test_probe_uses_head_and_follows_redirects():
    session = _Session(200)
    prober = ReachabilityProber(session, timeout=5)

    result = prober.probe("https://res.cloudinary.com/demo/raw/upload/a")

    assert result.reachable
    assert result.status_code == 200
    assert session.calls == [
        ("https://res.cloudinary.com/demo/raw/upload/a", {"allow_redirects": True, "timeout": 5})
    ]
    assert session.responses[0].closed


def test_probe_not_found():
    result = ReachabilityProber(_Session(404)).probe("https://example.com/missing")
    assert result.outcome is ProbeOutcome.NOT_FOUND
    assert not result.reachable


def test_network_failure_is_classified_not_raised():
    session = _Session(error=requests.ConnectionError("dns failure"))
    result = ReachabilityProber(session).probe("https://unreachable.invalid/x")

    assert result.outcome is ProbeOutcome.OTHER_ERROR
    assert result.status_code is None
    assert "ConnectionError" in result.error


def test_empty_url_is_not_probed():
    session = _Session(200)
    result = ReachabilityProber(session).probe("")
    assert result.outcome is ProbeOutcome.OTHER_ERROR
    assert session.calls == []
