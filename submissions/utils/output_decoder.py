import base64
import binascii
import logging
import re
from typing import Optional

from submissions.utils.engine_schemas import ExecutionResult


logger = logging.getLogger(__name__)

DECODED_FIELDS = ("stdout", "stderr", "compile_output")

_WHITESPACE = re.compile(r"\s+")


def encode_text(text: Optional[str]) -> str:
    return base64.b64encode((text or "").encode("utf-8")).decode("ascii")


def decode_text(encoded: str) -> str:
    """Decode base64 text, ignoring the line breaks engines insert every 60 chars.

    Bytes that are not valid UTF-8 become U+FFFD. Raises binascii.Error when
    the input is not base64.
    """
    cleaned = _WHITESPACE.sub("", encoded)
    return base64.b64decode(cleaned, validate=True).decode("utf-8", errors="replace")


def decode_result(result: ExecutionResult) -> ExecutionResult:
    """
    Return a copy of `result` with stdout, stderr and compile_output decoded.

    Each field is handled on its own: empty fields are left untouched and a
    field that is not valid base64 keeps its raw value.
    """
    updates = {}
    for field in DECODED_FIELDS:
        value = getattr(result, field)
        if not value:
            continue
        try:
            updates[field] = decode_text(value)
        except binascii.Error as e:
            logger.warning(f"Failed to decode {field}, keeping original value: {e}")
    return result.model_copy(update=updates)
