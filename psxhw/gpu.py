"""Graphics processor: GP0/GP1 command decoding and the GPUSTAT register."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

from psxhw.gpu_commands import (
    POLYLINE_TERMINATOR,
    Color,
    DrawGouraudTriangle,
    DrawTexturedQuad,
    PrimitiveVertex,
    SetDisplayArea,
    SetDrawingArea,
    Uv,
    Vertex,
    WriteToVram,
    halfwords_from_words,
    parameter_words,
    sign_extend_11,
)

log = logging.getLogger(__name__)

GpuCommand = Union[
    DrawGouraudTriangle, DrawTexturedQuad, WriteToVram, SetDrawingArea, SetDisplayArea
]

GPUSTAT_RESET = 0x1480_2000
_READY_TO_SEND = 1 << 27


class GpuError(RuntimeError):
    """Raised on an access or command the GPU does not accept."""


class _Field:
    """Bit field of ``GpuStat.value``; a single bit reads as a bool."""

    def __init__(self, lo: int, hi: int | None = None, writable: bool = False) -> None:
        self.lo = lo
        self.flag = hi is None
        self.width = (lo if hi is None else hi) - lo + 1
        self.writable = writable
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @property
    def _mask(self) -> int:
        return ((1 << self.width) - 1) << self.lo

    def __get__(self, obj: GpuStat | None, objtype: type | None = None):
        if obj is None:
            return self
        raw = (obj.value & self._mask) >> self.lo
        return bool(raw) if self.flag else raw

    def __set__(self, obj: GpuStat, value: int | bool) -> None:
        if not self.writable:
            raise AttributeError(f"GPUSTAT field {self.name} is read-only")
        obj.value = (obj.value & ~self._mask) | ((int(value) << self.lo) & self._mask)


@dataclass
class GpuStat:
    """The GPU status register."""

    value: int = GPUSTAT_RESET

    texture_page_x_base = _Field(0, 3)
    texture_page_y_base = _Field(4)
    semi_transparency = _Field(5, 6)
    texture_page_colors = _Field(7, 8)
    dither_24_to_15 = _Field(9)
    drawing_to_display_allowed = _Field(10)
    mask_bit_while_drawing = _Field(11)
    draw_pixels = _Field(12)
    interlaced_field = _Field(13)
    reverse_flag = _Field(14)
    texture_disable = _Field(15)
    horizontal_res2 = _Field(16)
    horizontal_res1 = _Field(17, 18)
    vertical_res = _Field(19)
    video_mode = _Field(20)
    color_depth = _Field(21)
    vertical_interlace = _Field(22)
    display_enable = _Field(23, writable=True)
    irq = _Field(24, writable=True)
    dma = _Field(25)
    ready_for_command = _Field(26)
    ready_to_send = _Field(27)
    ready_to_receive = _Field(28)
    dma_direction = _Field(29, 30)
    even_odd = _Field(31, writable=True)


# GP0 commands that are accepted but not drawn.
_UNIMPLEMENTED_GP0 = {
    0x22: "mono_triangle_alpha",
    0x24: "triangle_texture_blended",
    0x25: "triangle_texture_raw",
    0x26: "triangle_alpha_texture_blended",
    0x27: "triangle_alpha_texture_raw",
    0x2A: "mono_square_alpha",
    0x2D: "square_texture_raw",
    0x2E: "square_alpha_texture_blended",
    0x2F: "square_alpha_texture_raw",
    0x32: "shaded_triangle_alpha",
    0x34: "shaded_textured_triangle_blend",
    0x36: "shaded_textured_triangle_alpha_blend",
    0x3A: "shaded_square_alpha",
    0x3C: "shaded_textured_square_blend",
    0x3E: "shaded_textured_square_alpha_blend",
    0x40: "mono_line",
    0x42: "mono_line_alpha",
    0x48: "mono_polyline",
    0x4A: "mono_polyline_alpha",
    0x50: "shaded_line",
    0x52: "shaded_line_alpha",
    0x58: "shaded_polyline",
    0x5A: "shaded_polyline_alpha",
    0x60: "mono_rectangle",
    0x62: "mono_rectangle_alpha",
    0x6A: "mono_rectangle_dot_alpha",
    0x70: "mono_rectangle_8",
    0x72: "mono_rectangle_8_alpha",
    0x78: "mono_rectangle_16",
    0x7A: "mono_rectangle_16_alpha",
    0x64: "textured_rectangle_blend",
    0x65: "textured_rectangle_raw",
    0x66: "textured_rectangle_alpha_blend",
    0x67: "textured_rectangle_alpha_raw",
    0x6C: "textured_rectangle_dot_blend",
    0x6D: "textured_rectangle_dot_raw",
    0x6E: "textured_rectangle_dot_alpha_blend",
    0x6F: "textured_rectangle_dot_alpha_raw",
    0x74: "textured_rectangle_8_blend",
    0x75: "textured_rectangle_8_raw",
    0x76: "textured_rectangle_8_alpha_blend",
    0x77: "textured_rectangle_8_alpha_raw",
    0x7C: "textured_rectangle_16_blend",
    0x7D: "textured_rectangle_16_raw",
    0x7E: "textured_rectangle_16_alpha_blend",
    0x7F: "textured_rectangle_16_alpha_raw",
}

_HORIZONTAL_RESOLUTIONS = {0: 256, 1: 320, 2: 512, 3: 640}


class Gpu:
    """Decodes GP0/GP1 writes and hands drawing commands to ``sink``."""

    def __init__(self, sink: Callable[[GpuCommand], None]) -> None:
        self.sink = sink
        self.gpustat = GpuStat()
        self.buffer: list[int] = []
        self.remaining_words = 0

        self.drawing_area_left = 0
        self.drawing_area_top = 0
        self.drawing_area_right = 1023
        self.drawing_area_bottom = 511
        self.drawing_offset = (0, 0)

        self.horizontal_res = 0
        self.vertical_res = 0
        self.display_top = 0
        self.display_left = 0

        self.texpage_e1 = 0

        self._gp0_handlers: dict[int, Callable[[], None]] = {
            0x02: self._fill_rectangle,
            0x20: self._mono_triangle,
            0x28: self._mono_square,
            0x2C: self._square_texture_blended,
            0x30: self._shaded_triangle,
            0x38: self._shaded_square,
            0x68: self._mono_rectangle_dot,
            0xE1: self._draw_mode,
            0xE3: self._drawing_area_top_left,
            0xE4: self._drawing_area_bottom_right,
            0xE5: self._set_drawing_offset,
        }

    # Bus interface

    def read(self, addr: int, size: int = 4) -> int:
        if size != 4:
            return 0
        if addr == 0:
            return 0
        if addr == 4:
            return self.gpustat.value | _READY_TO_SEND
        raise GpuError(f"invalid GPU read at {addr:#x}")

    def write(self, addr: int, value: int, size: int = 4) -> None:
        if addr == 0:
            self.process_gp0(value)
        elif addr == 4:
            self.process_gp1(value)
        else:
            raise GpuError(f"invalid GPU write at {addr:#x}")

    def vblank(self) -> None:
        """Signal vertical blank: raise the IRQ and flip the field in 480-line mode."""
        if self.gpustat.vertical_res:
            self.gpustat.even_odd = not self.gpustat.even_odd
        self.gpustat.irq = True

    # GP0

    def process_gp0(self, command: int) -> None:
        """Queue one GP0 word and run the command once all its words are in."""
        command &= 0xFFFF_FFFF
        self.buffer.append(command)

        if self.remaining_words == 0:
            self.remaining_words = parameter_words(command >> 24)
        elif self.remaining_words == POLYLINE_TERMINATOR:
            if command == POLYLINE_TERMINATOR:
                self.remaining_words = 0
        else:
            self.remaining_words -= 1

        if self.remaining_words != 0:
            return

        opcode = self.buffer[0] >> 24
        self._execute_gp0(opcode)
        if not 0xA0 <= opcode <= 0xBF:
            self.buffer.clear()

    def _execute_gp0(self, opcode: int) -> None:
        handler = self._gp0_handlers.get(opcode)
        if handler is not None:
            handler()
        elif 0x80 <= opcode <= 0x9F:
            log.info("GP0(80): copy_vram_vram")
        elif 0xA0 <= opcode <= 0xBF:
            self._copy_cpu_vram()
        elif 0xC0 <= opcode <= 0xDF:
            log.info("GP0(c0): copy_vram_cpu")
        elif opcode in _UNIMPLEMENTED_GP0:
            log.info("GP0(%02x): %s", opcode, _UNIMPLEMENTED_GP0[opcode])
        # Everything else is a no-op or garbage.

    def _fill_rectangle(self) -> None:
        color, position, size = self.buffer[0:3]
        log.info(
            "GP0(02): fill rectangle from (%d, %d) with size %dx%d with BGR %06x",
            position & 0xFFFF,
            position >> 16,
            size & 0xFFFF,
            size >> 16,
            color & 0xFF_FFFF,
        )

    def _triangle(self, *pairs: tuple[int, int]) -> DrawGouraudTriangle:
        a, b, c = (Vertex.from_position_and_color(p, col) for p, col in pairs)
        return DrawGouraudTriangle(vertices=(a, b, c))

    def _mono_triangle(self) -> None:
        color, *positions = self.buffer[0:4]
        self.sink(self._triangle(*((p, color) for p in positions)))

    def _mono_square(self) -> None:
        color, *positions = self.buffer[0:5]
        self.sink(self._triangle(*((p, color) for p in positions[0:3])))
        self.sink(self._triangle(*((p, color) for p in positions[1:4])))

    def _shaded_pairs(self, count: int) -> list[tuple[int, int]]:
        words = self.buffer[0 : 2 * count]
        return list(zip(words[1::2], words[0::2]))

    def _shaded_triangle(self) -> None:
        self.sink(self._triangle(*self._shaded_pairs(3)))

    def _shaded_square(self) -> None:
        pairs = self._shaded_pairs(4)
        self.sink(self._triangle(*pairs[0:3]))
        self.sink(self._triangle(*pairs[1:4]))

    def _square_texture_blended(self) -> None:
        words = self.buffer[0:9]
        positions = words[1::2]
        texcoords = words[2::2]
        v0, v1, v2, v3 = (PrimitiveVertex.from_word(w) for w in positions)
        uv0, uv1, uv2, uv3 = (Uv.from_word(w) for w in texcoords)
        self.sink(
            DrawTexturedQuad(
                vertices=(v0, v1, v2, v3),
                uvs=(uv0, uv1, uv2, uv3),
                clut_attr=words[2] >> 16,
                texpage_attr=words[4] >> 16,
                modulation_color=Color.from_word(words[0]),
            )
        )

    def _mono_rectangle_dot(self) -> None:
        vertex = Vertex.from_position_and_color(self.buffer[1], self.buffer[0] & 0xFF_FFFF)
        right = dataclasses.replace(vertex, x=vertex.x + 1)
        below = dataclasses.replace(vertex, y=vertex.y + 1)
        self.sink(DrawGouraudTriangle(vertices=(vertex, right, below)))

    def _copy_cpu_vram(self) -> None:
        if len(self.buffer) == 3:
            size = self.buffer[2]
            halfwords = (size & 0xFFFF) * (size >> 16)
            self.remaining_words = (halfwords + 1) // 2

        if self.remaining_words != 0:
            return

        position, size = self.buffer[1], self.buffer[2]
        self.sink(
            WriteToVram(
                x=position & 0x3FF,
                y=position >> 16 & 0x1FF,
                w=size & 0xFFFF,
                h=size >> 16 & 0xFFFF,
                pixel_data=halfwords_from_words(self.buffer[3:]),
            )
        )
        self.buffer.clear()

    def _draw_mode(self) -> None:
        self.texpage_e1 = self.buffer[0] & 0x3FFF

    def _drawing_area_top_left(self) -> None:
        value = self.buffer[0]
        self.drawing_area_top = value >> 10 & 0x3FF
        self.drawing_area_left = value & 0x3FF
        self._update_drawing_area()

    def _drawing_area_bottom_right(self) -> None:
        value = self.buffer[0]
        self.drawing_area_bottom = value >> 10 & 0x3FF
        self.drawing_area_right = value & 0x3FF
        self._update_drawing_area()

    def _update_drawing_area(self) -> None:
        self.sink(
            SetDrawingArea(
                x1=self.drawing_area_left,
                y1=self.drawing_area_top,
                x2=self.drawing_area_right,
                y2=self.drawing_area_bottom,
            )
        )

    def _set_drawing_offset(self) -> None:
        value = self.buffer[0]
        self.drawing_offset = (sign_extend_11(value), sign_extend_11(value >> 11))

    # GP1

    def process_gp1(self, command: int) -> None:
        """Execute one GP1 display-control command."""
        opcode = command >> 24 & 0xFF
        arguments = command & 0xFF_FFFF

        if opcode == 0x00:
            self.gpustat.value = GPUSTAT_RESET
        elif opcode == 0x01:
            self.buffer.clear()
            self.remaining_words = 0
        elif opcode in (0x02, 0x04, 0x06, 0x07):
            pass
        elif opcode == 0x03:
            self.gpustat.display_enable = bool(arguments & 1)
        elif opcode == 0x05:
            self.display_left = arguments & 0x3FF
            self.display_top = arguments >> 10 & 0x1FF
            self._update_display_area()
        elif opcode == 0x08:
            self._display_mode(arguments)
        elif 0x10 <= opcode <= 0x1F:
            pass
        else:
            raise GpuError(f"unknown GP1 opcode {opcode:02x}")

    def _display_mode(self, arguments: int) -> None:
        value = self.gpustat.value & ~0x7F_4000
        value |= (arguments & 0x80) << 7
        value |= (arguments & 0x40) << 10
        value |= (arguments & 0x3F) << 17
        self.gpustat.value = value

        index = (arguments & 0x3) | ((arguments & 0x40) >> 4)
        self.horizontal_res = _HORIZONTAL_RESOLUTIONS.get(index, 368)
        # The display is always treated as 480 lines tall.
        self.vertical_res = 480
        self._update_display_area()

    def _update_display_area(self) -> None:
        self.sink(
            SetDisplayArea(
                x=self.display_left,
                y=self.display_top,
                w=self.horizontal_res,
                h=self.vertical_res,
            )
        )