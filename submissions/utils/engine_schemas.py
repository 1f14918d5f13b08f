from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


# Judge0 status ids
STATUS_IN_QUEUE = 1
STATUS_PROCESSING = 2
STATUS_ACCEPTED = 3
STATUS_WRONG_ANSWER = 4
STATUS_TIME_LIMIT_EXCEEDED = 5
STATUS_COMPILATION_ERROR = 6

IN_PROGRESS_STATUS_IDS = frozenset({STATUS_IN_QUEUE, STATUS_PROCESSING})


class ExecutionRequest(BaseModel):
    """Body of a submit call. `source_code` and `stdin` may already be base64."""
    source_code: str
    language_id: int
    stdin: str = ""
    expected_output: Optional[str] = None


class EngineStatus(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    description: str = ""


class ExecutionResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: EngineStatus
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    compile_output: Optional[str] = None
    time: Optional[str] = None
    memory: Optional[int] = None
    exit_code: Optional[int] = None
    token: Optional[str] = None

    @field_validator("time", mode="before")
    @classmethod
    def time_as_string(cls, v):
        # Some engine versions send a JSON number instead of a string
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("memory", mode="before")
    @classmethod
    def memory_as_int(cls, v):
        if isinstance(v, float):
            return int(v)
        return v

    @property
    def in_progress(self) -> bool:
        return self.status.id in IN_PROGRESS_STATUS_IDS
