import logging
import threading
import time
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from submissions.utils.engine_schemas import ExecutionRequest, ExecutionResult
from submissions.utils.output_decoder import encode_text
from user_customizable_configs.execution_engine.loader import EngineConfig, get_engine_config


logger = logging.getLogger(__name__)

# Transport failures that are retried. Any other RequestException fails at once.
RETRYABLE_ERRORS = (requests.ConnectionError, requests.Timeout, requests.exceptions.ChunkedEncodingError)


class ExecutionError(RuntimeError):
    """Base class for failures talking to the execution engine."""


class ExecutionUnavailable(ExecutionError):
    """Raised when the engine cannot be reached or returns no usable payload."""


class ExecutionTimeout(ExecutionError):
    """Raised when no terminal result arrives before the deadline, or the wait is cancelled."""


class ExecutionClient:
    """
    Client for a Judge0-compatible execution engine.

    `execute()` is the only public operation. Depending on `config.mode` it
    either submits with `wait=true` and blocks on the response, or submits
    with `wait=false` and polls the returned token until the status leaves
    the queued/processing set. Both share the same retry policy: transport
    errors are retried up to `max_attempts` times with a fixed delay, while
    HTTP error responses are never retried.
    """

    def __init__(self, config: Optional[EngineConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or get_engine_config()
        self.session = session or requests.Session()
        if self.config.auth_token:
            self.session.headers["X-Auth-Token"] = self.config.auth_token

    @property
    def encodes_transport(self) -> bool:
        return self.config.base64_encoded

    def execute(
        self,
        source_code: str,
        stdin: str = "",
        cancel_event: Optional[threading.Event] = None,
    ) -> ExecutionResult:
        """
        Run `source_code` on the engine and return its terminal result.

        Setting `cancel_event` from another thread aborts any pending retry
        delay or poll interval with ExecutionTimeout.
        """
        cancel_event = cancel_event or threading.Event()
        deadline = time.monotonic() + self.config.timeout_ms / 1000

        request = self._build_request(source_code, stdin)
        if self.config.mode == "poll":
            logger.info(f"Submitting code to execution engine (poll, language_id={request.language_id})")
            token = self._submit(request, deadline, cancel_event)
            result = self._poll(token, deadline, cancel_event)
        else:
            logger.info(f"Submitting code to execution engine (wait, language_id={request.language_id})")
            result = self._submit_and_wait(request, deadline, cancel_event)

        logger.info(f"Execution completed with status: {result.status.id} ({result.status.description})")
        return result

    def _build_request(self, source_code: str, stdin: str) -> ExecutionRequest:
        if self.config.base64_encoded:
            source_code = encode_text(source_code)
            stdin = encode_text(stdin)
        return ExecutionRequest(
            source_code=source_code,
            language_id=self.config.language_id,
            stdin=stdin or "",
        )

    def _params(self, **extra: str) -> Dict[str, str]:
        return {"base64_encoded": "true" if self.config.base64_encoded else "false", **extra}

    def _submit_and_wait(
        self, request: ExecutionRequest, deadline: float, cancel_event: threading.Event
    ) -> ExecutionResult:
        resp = self._send(
            "POST",
            f"{self.config.base_url}/submissions",
            deadline,
            cancel_event,
            params=self._params(wait="true"),
            json=request.model_dump(),
        )
        result = self._parse_result(self._read_payload(resp))
        # The engine may give up waiting before the run finishes and hand back a token
        if result.in_progress and result.token:
            logger.info(f"Engine returned before completion, polling token={result.token}")
            return self._poll(result.token, deadline, cancel_event)
        return result

    def _submit(self, request: ExecutionRequest, deadline: float, cancel_event: threading.Event) -> str:
        resp = self._send(
            "POST",
            f"{self.config.base_url}/submissions",
            deadline,
            cancel_event,
            params=self._params(wait="false"),
            json=request.model_dump(),
        )
        data = self._read_payload(resp)
        token = data.get("token")
        if not token:
            logger.error(f"Execution engine response missing token: {data}")
            raise ExecutionUnavailable(f"Execution engine response missing token: {data}")
        logger.info(f"Submission accepted by execution engine, token={token}")
        return token

    def _poll(self, token: str, deadline: float, cancel_event: threading.Event) -> ExecutionResult:
        interval = self.config.poll_interval_ms / 1000
        for attempt in range(1, self.config.max_poll_attempts + 1):
            resp = self._send(
                "GET",
                f"{self.config.base_url}/submissions/{token}",
                deadline,
                cancel_event,
                params=self._params(),
            )
            result = self._parse_result(self._read_payload(resp))
            if not result.in_progress:
                return result
            logger.debug(f"token={token} still {result.status.description} (poll {attempt}/{self.config.max_poll_attempts})")
            if attempt < self.config.max_poll_attempts:
                self._sleep(interval, deadline, cancel_event)

        raise ExecutionTimeout(
            f"No terminal result for token={token} after {self.config.max_poll_attempts} polls"
        )

    def _send(
        self,
        method: str,
        url: str,
        deadline: float,
        cancel_event: threading.Event,
        **kwargs: Any,
    ) -> requests.Response:
        last_error: Optional[Exception] = None
        for attempt in range(1, self.config.max_attempts + 1):
            if cancel_event.is_set():
                raise ExecutionTimeout("Execution wait was cancelled")
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise ExecutionTimeout(f"Execution deadline of {self.config.timeout_ms}ms exceeded")
            try:
                return self.session.request(method, url, timeout=remaining, **kwargs)
            except RETRYABLE_ERRORS as e:
                last_error = e
                logger.warning(
                    f"Transport error calling {method} {url} (attempt {attempt}/{self.config.max_attempts}): {e}"
                )
                if attempt < self.config.max_attempts:
                    self._sleep(self.config.retry_delay_seconds, deadline, cancel_event)
            except requests.RequestException as e:
                logger.error(f"Request to execution engine failed: {method} {url}: {e}")
                raise ExecutionUnavailable(f"Execution engine request failed: {e}") from e

        if time.monotonic() >= deadline:
            raise ExecutionTimeout(
                f"Execution deadline of {self.config.timeout_ms}ms exceeded: {last_error}"
            ) from last_error
        logger.error(f"Execution engine unreachable after {self.config.max_attempts} attempts: {last_error}")
        raise ExecutionUnavailable(
            f"Execution engine unreachable after {self.config.max_attempts} attempts: {last_error}"
        ) from last_error

    def _sleep(self, seconds: float, deadline: float, cancel_event: threading.Event) -> None:
        remaining = deadline - time.monotonic()
        if cancel_event.wait(max(0.0, min(seconds, remaining))):
            raise ExecutionTimeout("Execution wait was cancelled")
        if seconds >= remaining:
            raise ExecutionTimeout(f"Execution deadline of {self.config.timeout_ms}ms exceeded")

    def _read_payload(self, resp: requests.Response) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError as e:
            logger.error(f"Execution engine returned non-JSON: status={resp.status_code}")
            raise ExecutionUnavailable(
                f"Execution engine returned non-JSON ({resp.status_code}): {resp.text[:500]}"
            ) from e

        if not isinstance(data, dict):
            raise ExecutionUnavailable(f"Unexpected execution engine payload: {str(data)[:500]}")

        if not resp.ok:
            # An engine status in the body is a terminal verdict, returned as-is
            if isinstance(data.get("status"), dict):
                return data
            detail = data.get("error") or data.get("message") or data
            logger.error(f"Execution engine error: status={resp.status_code}, detail={detail}")
            raise ExecutionUnavailable(f"Execution engine returned {resp.status_code}: {detail}")

        return data

    def _parse_result(self, data: Dict[str, Any]) -> ExecutionResult:
        if not isinstance(data.get("status"), dict):
            raise ExecutionUnavailable(f"Missing status in execution engine response: {str(data)[:500]}")
        try:
            return ExecutionResult.model_validate(data)
        except ValidationError as e:
            raise ExecutionUnavailable(f"Invalid execution engine response: {e}") from e
