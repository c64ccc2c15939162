"""Renderer commands produced by the GPU, and helpers for decoding GP0 words."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

# Remaining-word count that marks a poly-line: words are taken until the
# terminator word arrives.
POLYLINE_TERMINATOR = 0x5555_5555

_PARAMETER_WORDS: dict[int, int] = {}
for _count, _opcodes in (
    (1, (0x68, 0x6A, 0x70, 0x72, 0x78, 0x7A)),
    (
        2,
        (
            0x02, 0x60, 0x62, 0x6C, 0x6D, 0x6E, 0x6F, 0x74, 0x75,
            0x76, 0x77, 0x7C, 0x7D, 0x7E, 0x7F, 0xA0, 0xC0,
        ),
    ),
    (3, (0x20, 0x22, 0x64, 0x65, 0x66, 0x67, 0x80)),
    (4, (0x28, 0x2A)),
    (5, (0x30, 0x32)),
    (6, (0x24, 0x25, 0x26, 0x27)),
    (7, (0x38, 0x3A)),
    (8, (0x2C, 0x2D, 0x2E, 0x2F, 0x34, 0x36)),
    (11, (0x3C, 0x3E)),
    (
        POLYLINE_TERMINATOR,
        (0x40, 0x42, 0x48, 0x4A, 0x50, 0x52, 0x58, 0x5A),
    ),
):
    for _opcode in _opcodes:
        _PARAMETER_WORDS[_opcode] = _count


def parameter_words(opcode: int) -> int:
    """Number of words that follow a GP0 command word with this opcode.

    Poly-line opcodes return ``POLYLINE_TERMINATOR``; unknown opcodes take none.
    """
    return _PARAMETER_WORDS.get(opcode, 0)


def _signed16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def sign_extend_11(value: int) -> int:
    """Interpret the low 11 bits of ``value`` as a two's complement number."""
    value &= 0x7FF
    return value - 0x800 if value & 0x400 else value


def halfwords_from_words(words: Iterable[int]) -> list[int]:
    """Split 32-bit words into 16-bit halfwords, low half first."""
    return [half for word in words for half in (word & 0xFFFF, word >> 16 & 0xFFFF)]


@dataclass(frozen=True)
class Color:
    """24-bit colour; the command word stores red in the lowest byte."""

    r: int
    g: int
    b: int

    @classmethod
    def from_word(cls, word: int) -> Color:
        return cls(r=word & 0xFF, g=word >> 8 & 0xFF, b=word >> 16 & 0xFF)


@dataclass(frozen=True)
class Vertex:
    """Coloured vertex of a Gouraud-shaded primitive."""

    x: int
    y: int
    color: Color

    @classmethod
    def from_position_and_color(cls, position: int, color: int) -> Vertex:
        return cls(
            x=_signed16(position),
            y=_signed16(position >> 16),
            color=Color.from_word(color),
        )


@dataclass(frozen=True)
class PrimitiveVertex:
    """Position of a textured primitive's vertex."""

    x: int
    y: int

    @classmethod
    def from_word(cls, word: int) -> PrimitiveVertex:
        return cls(x=_signed16(word), y=_signed16(word >> 16))


@dataclass(frozen=True)
class Uv:
    """Texture coordinate held in the low halfword of a parameter word."""

    u: int
    v: int

    @classmethod
    def from_word(cls, word: int) -> Uv:
        return cls(u=word & 0xFF, v=word >> 8 & 0xFF)


@dataclass(frozen=True)
class DrawGouraudTriangle:
    vertices: tuple[Vertex, Vertex, Vertex]


@dataclass(frozen=True)
class DrawTexturedQuad:
    vertices: tuple[PrimitiveVertex, PrimitiveVertex, PrimitiveVertex, PrimitiveVertex]
    uvs: tuple[Uv, Uv, Uv, Uv]
    clut_attr: int
    texpage_attr: int
    modulation_color: Color


@dataclass(frozen=True)
class WriteToVram:
    x: int
    y: int
    w: int
    h: int
    pixel_data: list[int]


@dataclass(frozen=True)
class SetDrawingArea:
    x1: int
    y1: int
    x2: int
    y2: int


@dataclass(frozen=True)
class SetDisplayArea:
    x: int
    y: int
    w: int
    h: int