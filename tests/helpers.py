"""Fakes for the execution engine HTTP traffic."""
import base64
import json

import requests


def b64(text) -> str:
    raw = text if isinstance(text, bytes) else text.encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def make_response(status_code: int = 200, payload=None, text: str = "") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = json.dumps(payload).encode("utf-8") if payload is not None else text.encode("utf-8")
    resp.encoding = "utf-8"
    return resp


def engine_result(status_id: int, stdout=None, stderr=None, compile_output=None, time="0.012", memory=3200, **extra):
    descriptions = {
        1: "In Queue",
        2: "Processing",
        3: "Accepted",
        4: "Wrong Answer",
        5: "Time Limit Exceeded",
        6: "Compilation Error",
        11: "Runtime Error (NZEC)",
    }
    return {
        "status": {"id": status_id, "description": descriptions.get(status_id, "Other")},
        "stdout": stdout,
        "stderr": stderr,
        "compile_output": compile_output,
        "time": time,
        "memory": memory,
        "exit_code": 0,
        **extra,
    }


class FakeSession:
    """Stands in for requests.Session, replaying queued responses or exceptions."""

    def __init__(self, outcomes=None, on_request=None):
        self.outcomes = list(outcomes or [])
        self.on_request = on_request
        self.calls = []
        self.headers = {}

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.on_request is not None:
            self.on_request(self)
        if not self.outcomes:
            raise AssertionError(f"Unexpected request {method} {url}")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


