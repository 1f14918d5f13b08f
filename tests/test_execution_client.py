import threading

import pytest
import requests

from submissions.utils.execution_client import (
    ExecutionClient,
    ExecutionTimeout,
    ExecutionUnavailable,
)
from tests.helpers import FakeSession, b64, engine_result, make_response


def _client(config, session, **overrides):
    if overrides:
        config = config.model_copy(update=overrides)
    return ExecutionClient(config=config, session=session)


class TestSubmitAndWait:
    def test_sends_encoded_program_and_returns_result(self, engine_config):
        session = FakeSession([make_response(201, engine_result(3, stdout=b64("PASS\n")))])
        client = _client(engine_config, session)

        result = client.execute("print('hi')", "")

        assert result.status.id == 3
        assert result.stdout == b64("PASS\n")
        assert result.time == "0.012"
        assert result.memory == 3200

        (call,) = session.calls
        assert call["method"] == "POST"
        assert call["url"] == "http://judge0.test/submissions"
        assert call["params"] == {"base64_encoded": "true", "wait": "true"}
        assert call["json"]["source_code"] == b64("print('hi')")
        assert call["json"]["stdin"] == b64("")
        assert call["json"]["language_id"] == 71
        assert call["json"]["expected_output"] is None
        assert 0 < call["timeout"] <= 5

    def test_plain_text_when_encoding_disabled(self, engine_config):
        session = FakeSession([make_response(201, engine_result(3, stdout="PASS\n"))])
        client = _client(engine_config, session, base64_encoded=False)

        client.execute("print('hi')", "input")

        (call,) = session.calls
        assert call["params"]["base64_encoded"] == "false"
        assert call["json"]["source_code"] == "print('hi')"
        assert call["json"]["stdin"] == "input"
        assert not client.encodes_transport

    def test_retries_transport_errors_then_succeeds(self, engine_config):
        session = FakeSession([
            requests.ConnectionError("connection refused"),
            requests.Timeout("read timed out"),
            make_response(201, engine_result(3)),
        ])

        result = _client(engine_config, session).execute("code")

        assert result.status.id == 3
        assert len(session.calls) == 3

    def test_gives_up_after_three_transport_errors(self, engine_config):
        session = FakeSession([requests.ConnectionError("down")] * 3)

        with pytest.raises(ExecutionUnavailable, match="after 3 attempts"):
            _client(engine_config, session).execute("code")
        assert len(session.calls) == 3

    def test_chunked_encoding_error_is_retried(self, engine_config):
        session = FakeSession([
            requests.exceptions.ChunkedEncodingError("connection broken"),
            make_response(201, engine_result(3)),
        ])

        assert _client(engine_config, session).execute("code").status.id == 3
        assert len(session.calls) == 2

    @pytest.mark.parametrize(
        "error",
        [
            requests.exceptions.MissingSchema("No scheme supplied"),
            requests.exceptions.InvalidURL("Invalid URL"),
            requests.exceptions.InvalidHeader("Invalid header value"),
        ],
    )
    def test_configuration_errors_are_not_retried(self, engine_config, error):
        session = FakeSession([error, make_response(201, engine_result(3))])
        client = _client(engine_config, session, retry_delay_seconds=30.0)

        with pytest.raises(ExecutionUnavailable, match="request failed"):
            client.execute("code")
        assert len(session.calls) == 1

    def test_http_error_without_result_is_not_retried(self, engine_config):
        session = FakeSession([make_response(503, {"error": "queue is full"})])

        with pytest.raises(ExecutionUnavailable, match="queue is full"):
            _client(engine_config, session).execute("code")
        assert len(session.calls) == 1

    def test_http_error_carrying_engine_status_is_returned_as_is(self, engine_config):
        session = FakeSession([make_response(422, engine_result(6, compile_output=b64("SyntaxError")))])

        result = _client(engine_config, session).execute("code")

        assert result.status.id == 6
        assert len(session.calls) == 1

    def test_non_json_response_is_unavailable(self, engine_config):
        session = FakeSession([make_response(502, text="<html>Bad Gateway</html>")])

        with pytest.raises(ExecutionUnavailable, match="non-JSON"):
            _client(engine_config, session).execute("code")

    def test_response_without_status_is_unavailable(self, engine_config):
        session = FakeSession([make_response(201, {"stdout": None})])

        with pytest.raises(ExecutionUnavailable, match="Missing status"):
            _client(engine_config, session).execute("code")

    def test_unfinished_wait_falls_back_to_polling(self, engine_config):
        session = FakeSession([
            make_response(201, engine_result(2, token="tok-1")),
            make_response(200, engine_result(3, stdout=b64("PASS"))),
        ])

        result = _client(engine_config, session).execute("code")

        assert result.status.id == 3
        assert session.calls[1]["method"] == "GET"
        assert session.calls[1]["url"] == "http://judge0.test/submissions/tok-1"

    def test_auth_token_header(self, engine_config):
        session = FakeSession()
        _client(engine_config, session, auth_token="secret")
        assert session.headers["X-Auth-Token"] == "secret"


class TestSubmitThenPoll:
    def test_polls_until_terminal_status(self, engine_config):
        session = FakeSession([
            make_response(201, {"token": "abc"}),
            make_response(200, engine_result(1)),
            make_response(200, engine_result(2)),
            make_response(200, engine_result(3, stdout=b64("PASS\nPASS\n"))),
        ])

        result = _client(engine_config, session, mode="poll").execute("code")

        assert result.status.id == 3
        assert [c["method"] for c in session.calls] == ["POST", "GET", "GET", "GET"]
        assert session.calls[0]["params"] == {"base64_encoded": "true", "wait": "false"}
        assert session.calls[1]["url"] == "http://judge0.test/submissions/abc"
        assert session.calls[1]["params"] == {"base64_encoded": "true"}

    def test_times_out_after_max_poll_attempts(self, engine_config):
        session = FakeSession(
            [make_response(201, {"token": "abc"})] + [make_response(200, engine_result(2)) for _ in range(3)]
        )

        with pytest.raises(ExecutionTimeout, match="after 3 polls"):
            _client(engine_config, session, mode="poll", max_poll_attempts=3).execute("code")
        assert len(session.calls) == 4

    def test_missing_token_is_unavailable(self, engine_config):
        session = FakeSession([make_response(201, {"message": "accepted"})])

        with pytest.raises(ExecutionUnavailable, match="missing token"):
            _client(engine_config, session, mode="poll").execute("code")

    def test_poll_retries_transport_errors(self, engine_config):
        session = FakeSession([
            make_response(201, {"token": "abc"}),
            requests.ConnectionError("blip"),
            make_response(200, engine_result(3)),
        ])

        result = _client(engine_config, session, mode="poll").execute("code")

        assert result.status.id == 3
        assert len(session.calls) == 3

    def test_deadline_interrupts_poll_interval(self, engine_config):
        session = FakeSession(
            [make_response(201, {"token": "abc"})] + [make_response(200, engine_result(1)) for _ in range(5)]
        )
        client = _client(engine_config, session, mode="poll", timeout_ms=50, poll_interval_ms=10000)

        with pytest.raises(ExecutionTimeout, match="deadline"):
            client.execute("code")
        assert len(session.calls) == 2

    def test_cancel_event_aborts_the_wait(self, engine_config):
        cancel = threading.Event()

        def cancel_on_first_poll(session):
            if len(session.calls) == 2:
                cancel.set()

        session = FakeSession(
            [make_response(201, {"token": "abc"})] + [make_response(200, engine_result(1)) for _ in range(5)],
            on_request=cancel_on_first_poll,
        )
        client = _client(engine_config, session, mode="poll", poll_interval_ms=10000)

        with pytest.raises(ExecutionTimeout, match="cancelled"):
            client.execute("code", cancel_event=cancel)
        assert len(session.calls) == 2

    def test_already_cancelled_sends_nothing(self, engine_config):
        cancel = threading.Event()
        cancel.set()
        session = FakeSession()

        with pytest.raises(ExecutionTimeout):
            _client(engine_config, session, mode="poll").execute("code", cancel_event=cancel)
        assert session.calls == []
