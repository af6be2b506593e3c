from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, TypedDict, Union


Role = Literal["system", "user", "assistant"]
JsonKind = Literal["array", "object", "string", "number", "boolean", "any"]

JSON_ONLY_INSTRUCTION = (
    "Responda APENAS com um JSON válido, sem texto adicional, markdown ou explicações."
)

STRUCTURE_MISMATCH = "structure mismatch"


class Message(TypedDict):
    role: Role
    content: str


@dataclass(frozen=True)
class CompletionRequest:
    """One chat-completion attempt. Build a new instance for every call."""

    prompt: str
    system_instruction: str
    model: str
    temperature: float = 0.1
    max_output_tokens: int = 4000
    deadline: float = 10.0
    json_mode: bool = True
    provider_order: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.prompt or not self.prompt.strip():
            raise ValueError("prompt must be non-empty")
        if not self.model:
            raise ValueError("model must be set")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be within [0, 1], got {self.temperature}")
        if self.max_output_tokens <= 0:
            raise ValueError(f"max_output_tokens must be positive, got {self.max_output_tokens}")
        if self.deadline <= 0:
            raise ValueError(f"deadline must be positive, got {self.deadline}")

    def messages(self) -> list[Message]:
        system = self.system_instruction.strip()
        system = f"{system}\n\n{JSON_ONLY_INSTRUCTION}" if system else JSON_ONLY_INSTRUCTION
        return [
            {"role": "system", "content": system},
            {"role": "user", "content": self.prompt},
        ]


class FailureKind(str, Enum):
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"
    UPSTREAM_ERROR = "upstream_error"
    UNAUTHORIZED = "unauthorized"
    MALFORMED_OUTPUT = "malformed_output"
    EMPTY_OUTPUT = "empty_output"


@dataclass(frozen=True)
class Success:
    structured: dict[str, Any]
    raw_text: str

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "structured": self.structured, "raw_text": self.raw_text}


@dataclass(frozen=True)
class Failure:
    """
    A completion that produced no usable result.

    `reason` is a short diagnostic (parser message, "structure mismatch", ...),
    `status_code`/`body` are only set for upstream HTTP errors, except for
    structure mismatches where `body` names the offending key.
    """

    kind: FailureKind
    reason: str = ""
    status_code: int | None = None
    body: str = ""

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"ok": False, "kind": self.kind.value, "reason": self.reason}
        if self.status_code is not None:
            payload["status_code"] = self.status_code
        if self.body:
            payload["body"] = self.body
        return payload


CompletionResult = Union[Success, Failure]


_KIND_TYPES: dict[str, tuple[type, ...]] = {
    "array": (list,),
    "object": (dict,),
    "string": (str,),
    "number": (int, float),
    "boolean": (bool,),
}


@dataclass(frozen=True)
class ExpectedShape:
    """
    Top-level structural contract for a parsed completion.

    Only key presence and the JSON kind of each value are checked; nested
    fields are left to the caller.
    """

    fields: dict[str, JsonKind] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name, kind in self.fields.items():
            if kind != "any" and kind not in _KIND_TYPES:
                raise ValueError(f"Unknown JSON kind for {name!r}: {kind!r}")

    @classmethod
    def of(cls, **fields: JsonKind) -> "ExpectedShape":
        return cls(fields=dict(fields))

    def mismatch(self, value: Any) -> str | None:
        """Return a description of the first violation, or None if `value` matches."""
        if not isinstance(value, dict):
            return f"top-level value is {type(value).__name__}, expected object"

        for name, kind in self.fields.items():
            if name not in value:
                return f"missing key {name!r}"
            if kind == "any":
                continue
            item = value[name]
            # bool is an int subclass; never accept it as a number
            if kind == "number" and isinstance(item, bool):
                return f"key {name!r} is boolean, expected number"
            if not isinstance(item, _KIND_TYPES[kind]):
                return f"key {name!r} is {type(item).__name__}, expected {kind}"
        return None

    def to_dict(self) -> dict[str, str]:
        return dict(self.fields)
