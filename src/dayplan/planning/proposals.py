"""Extract untrusted ``{title, startTime}`` proposals from planner text."""

from __future__ import annotations

import ast
import json
import re
from dataclasses import dataclass
from typing import Any, Iterator, Union

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as SchemaError
from pydantic.type_adapter import TypeAdapter

from ..errors import ParseError

__all__ = [
    "Malformed",
    "Proposal",
    "ProposalEntry",
    "ProposalEnvelope",
    "extract_payload",
    "parse_proposals",
]

START_TIME_KEYS = ("startTime", "start_time")


class ProposalEnvelope(BaseModel):
    """Top-level object the planner is asked to return."""

    model_config = ConfigDict(extra="allow")

    assignments: list[Any]


_ENVELOPE_ADAPTER = TypeAdapter(ProposalEnvelope)


@dataclass(frozen=True, slots=True)
class Proposal:
    """A structurally usable entry; ``start_time`` is still unchecked."""

    index: int
    title: str
    start_time: Any


@dataclass(frozen=True, slots=True)
class Malformed:
    """An entry that could not be read as a proposal at all."""

    index: int
    reason: str


ProposalEntry = Union[Proposal, Malformed]


def parse_proposals(raw_text: str) -> list[ProposalEntry]:
    """Return the ordered proposal entries found in ``raw_text``.

    Raises :class:`ParseError` when no payload can be extracted.
    """
    return [_read_entry(index, item) for index, item in enumerate(extract_payload(raw_text))]


def extract_payload(raw_text: str) -> list[Any]:
    """Locate the first well-formed proposal list inside free-form text."""
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise ParseError("Planner returned an empty response.", raw_text=raw_text)

    text = _normalise_json_string(raw_text.strip())
    for candidate in _candidate_values(text):
        entries = _envelope_entries(candidate)
        if entries is not None:
            return entries

    snippet = text[:200]
    raise ParseError(f"No proposal payload found in planner response: {snippet}", raw_text=raw_text)


def _read_entry(index: int, item: Any) -> ProposalEntry:
    if not isinstance(item, dict):
        return Malformed(index, f"Proposal #{index + 1} is not an object.")

    title = item.get("title")
    if not isinstance(title, str) or not title.strip():
        return Malformed(index, f"Proposal #{index + 1} is missing a valid activity title.")

    start_time = None
    for key in START_TIME_KEYS:
        if key in item:
            start_time = item[key]
            break
    return Proposal(index=index, title=title, start_time=start_time)


def _envelope_entries(value: Any) -> list[Any] | None:
    """Return proposal entries when ``value`` has a recognised shape."""
    if isinstance(value, dict):
        try:
            envelope = _ENVELOPE_ADAPTER.validate_python(value)
        except SchemaError:
            return None
        return list(envelope.assignments)
    if isinstance(value, list) and value and all(isinstance(item, dict) for item in value):
        return list(value)
    return None


def _candidate_values(text: str) -> Iterator[Any]:
    """Yield top-level JSON values in the order they appear in ``text``.

    Values nested inside an already decoded or rejected block are never
    yielded on their own.
    """
    decoder = json.JSONDecoder()
    block_ends: dict[int, int] = {}
    scanned_to = -1
    index = 0
    while index < len(text):
        if text[index] not in "{[":
            index += 1
            continue
        try:
            value, end = decoder.raw_decode(text, index)
        except json.JSONDecodeError:
            if index not in block_ends and index >= scanned_to:
                ends, scanned_to = _block_extents(text, index)
                block_ends.update(ends)
            end = block_ends.get(index, -1)
            if end < 0:
                index += 1
                continue
            value = _decode_block(text[index:end])
            if value is None:
                index = end
                continue
        yield value
        index = end


def _decode_block(block: str) -> Any | None:
    for candidate in (block, _strip_trailing_commas(block)):
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            literal = _coerce_python_literal(candidate)
            if literal is not None:
                return literal
    return None


def _normalise_json_string(payload: str) -> str:
    """Normalise common non-JSON characters emitted by models."""
    translation = {
        0x201C: '"',
        0x201D: '"',
        0x2018: "'",
        0x2019: "'",
        0xFF07: "'",
        0x00A0: " ",
        0xFEFF: "",
    }
    return payload.translate(str.maketrans(translation))


def _strip_trailing_commas(payload: str) -> str:
    """Remove trailing commas before closing braces/brackets."""
    return re.sub(r",(\s*[}\]])", r"\1", payload)


def _block_extents(text: str, start: int) -> tuple[dict[int, int], int]:
    """Map every bracket opened from ``start`` to the index just past its close.

    Returns the map and the index where scanning stopped: the end of the block
    opened at ``start`` or the end of ``text`` when that block never closes.
    """
    ends: dict[int, int] = {}
    openers: list[tuple[int, str]] = []
    in_string: str | None = None
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == in_string:
                in_string = None
            continue
        if char in "\"'":
            in_string = char
        elif char in "{[":
            openers.append((index, "}" if char == "{" else "]"))
        elif openers and char == openers[-1][1]:
            opened, _ = openers.pop()
            ends[opened] = index + 1
            if not openers:
                return ends, index + 1
    return ends, len(text)


def _coerce_python_literal(candidate: str) -> Any | None:
    """Fall back to Python literal parsing when JSON decoding fails."""
    try:
        literal = ast.literal_eval(candidate)
    except (SyntaxError, ValueError, TypeError, MemoryError, RecursionError):
        return None
    return _normalise_literal(literal)


def _normalise_literal(value: Any) -> Any:
    """Convert Python literals into JSON-compatible structures recursively."""
    if isinstance(value, dict):
        return {str(key): _normalise_literal(sub) for key, sub in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalise_literal(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)
