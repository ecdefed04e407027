"""Session wire protocol.

A request is one opcode plus at most one scalar payload; the reply is one
scalar value. Requests are decoded once into a closed set of variants and
everything downstream matches on those.
"""
import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List, Union

from .ranking import RankingEntry

SEPARATOR = '-'
# username, separator, score, then a separator or the end of the reply
_TOP3_ENTRY = re.compile(r'(.*?)' + re.escape(SEPARATOR) + r'([0-9]+)(?:' + re.escape(SEPARATOR) + r'|\Z)', re.DOTALL)


class Opcode(IntEnum):
    SET_USERNAME = 1
    GET_USER_HIGH_SCORE = 2
    GET_WORD = 3
    GET_TIP = 4
    IS_ROULETTE_AVAILABLE = 5
    IS_ROUND_FINISHED = 6
    GET_ROULETTE_VALUE = 7
    TRY_CHARACTER = 8
    ACCUMULATED_SCORE = 9
    GET_CURRENT_SCORE = 10
    GET_ROUND_NUMBER = 11
    NEXT_ROUND = 12
    HAS_NEXT_ROUND = 13
    RANKING_TOP3 = 14
    TERMINATE = 15


class MalformedRequest(ValueError):
    """The opcode or payload of a request could not be decoded."""


@dataclass(frozen=True)
class SetUsername:
    username: str
    opcode = Opcode.SET_USERNAME


@dataclass(frozen=True)
class TryCharacter:
    character: str
    opcode = Opcode.TRY_CHARACTER


@dataclass(frozen=True)
class Query:
    """Any request that carries no payload."""
    opcode: Opcode


Request = Union[SetUsername, TryCharacter, Query]

_PAYLOAD_OPCODES = {Opcode.SET_USERNAME, Opcode.TRY_CHARACTER}


def parse_opcode(raw: Any) -> Opcode:
    # bool is an int subclass; True must not decode as SET_USERNAME.
    if isinstance(raw, bool):
        raise MalformedRequest(f"invalid opcode {raw!r}")
    if isinstance(raw, int):
        try:
            return Opcode(raw)
        except ValueError:
            raise MalformedRequest(f"unknown opcode {raw}")
    if isinstance(raw, str):
        name = raw.strip().upper()
        if name.isdecimal():
            return parse_opcode(int(name))
        try:
            return Opcode[name]
        except KeyError:
            raise MalformedRequest(f"unknown opcode {raw!r}")
    raise MalformedRequest(f"invalid opcode {raw!r}")


def decode_request(raw_opcode: Any, payload: Any = None) -> Request:
    opcode = parse_opcode(raw_opcode)
    if opcode not in _PAYLOAD_OPCODES:
        if payload is not None:
            raise MalformedRequest(f"{opcode.name} takes no payload")
        return Query(opcode)

    if not isinstance(payload, str):
        raise MalformedRequest(f"{opcode.name} needs a text payload, got {payload!r}")
    if opcode is Opcode.SET_USERNAME:
        return SetUsername(payload)
    if len(payload) != 1:
        raise MalformedRequest(f"TRY_CHARACTER needs exactly one character, got {payload!r}")
    return TryCharacter(payload.upper())


def decode_message(message: Any) -> Request:
    """Decode a ``{"opcode": ..., "payload": ...}`` Socket.IO message."""
    if not isinstance(message, dict) or 'opcode' not in message:
        raise MalformedRequest(f"request must be an object with an opcode, got {message!r}")
    extra = set(message) - {'opcode', 'payload'}
    if extra:
        raise MalformedRequest(f"unexpected request fields: {sorted(extra)}")
    return decode_request(message['opcode'], message.get('payload'))


def encode_message(opcode: Opcode, payload: Any = None) -> dict:
    message = {'opcode': int(opcode)}
    if payload is not None:
        message['payload'] = payload
    return message


def format_top3(entries: List[RankingEntry]) -> str:
    parts = []
    for entry in entries:
        parts.append(entry.username)
        parts.append(str(entry.score))
    return SEPARATOR.join(parts)


def parse_top3(text: str) -> List[RankingEntry]:
    """Inverse of ``format_top3``.

    A username runs up to the first separator that is followed by an
    all-digit score, so names may contain the separator unless a part of the
    name after it is a bare number.
    """
    text = text or ''
    entries = []
    pos = 0
    while pos < len(text):
        match = _TOP3_ENTRY.match(text, pos)
        if match is None:
            raise MalformedRequest(f"unparseable ranking reply {text!r}")
        entries.append(RankingEntry(match.group(1), int(match.group(2))))
        pos = match.end()
    return entries
