import pytest

from psxhw.gpu import GPUSTAT_RESET, Gpu, GpuError, GpuStat
from psxhw.gpu_commands import (
    Color,
    DrawGouraudTriangle,
    DrawTexturedQuad,
    PrimitiveVertex,
    SetDisplayArea,
    SetDrawingArea,
    Uv,
    Vertex,
    WriteToVram,
)


@pytest.fixture
def sent():
    return []


@pytest.fixture
def gpu(sent):
    return Gpu(sent.append)


def feed(gpu, *words):
    for word in words:
        gpu.process_gp0(word)


def test_status_read_sets_ready_to_send(gpu):
    assert gpu.read(4) == GPUSTAT_RESET | (1 << 27)
    assert gpu.read(0) == 0


def test_narrow_reads_return_zero(gpu):
    assert gpu.read(4, size=2) == 0


def test_invalid_addresses_raise(gpu):
    with pytest.raises(GpuError):
        gpu.read(8)
    with pytest.raises(GpuError):
        gpu.write(8, 0)


def test_mono_triangle(gpu, sent):
    color = 0x2000_00FF
    positions = (0x0010_0020, 0x0030_0040, 0x0050_0060)
    feed(gpu, color, *positions)
    assert sent == [
        DrawGouraudTriangle(
            vertices=tuple(Vertex.from_position_and_color(p, color) for p in positions)
        )
    ]
    assert gpu.buffer == []
    assert gpu.remaining_words == 0


def test_command_waits_for_all_words(gpu, sent):
    feed(gpu, 0x2000_00FF, 0x0001_0001, 0x0002_0002)
    assert sent == []
    assert gpu.remaining_words == 1


def test_mono_square_is_two_triangles(gpu, sent):
    color = 0x2800_FF00
    positions = (0x0000_0000, 0x0000_0010, 0x0010_0000, 0x0010_0010)
    feed(gpu, color, *positions)
    verts = [Vertex.from_position_and_color(p, color) for p in positions]
    assert sent == [
        DrawGouraudTriangle(vertices=tuple(verts[0:3])),
        DrawGouraudTriangle(vertices=tuple(verts[1:4])),
    ]


def test_write_through_bus_address_zero(gpu, sent):
    for word in (0x2000_00FF, 0x0001_0001, 0x0002_0002, 0x0003_0003):
        gpu.write(0, word)
    assert len(sent) == 1
    assert sent[0].vertices[2] == Vertex.from_position_and_color(0x0003_0003, 0x2000_00FF)


def test_shaded_triangle_takes_colour_per_vertex(gpu, sent):
    words = (0x3000_00FF, 0x0000_0001, 0x0000_FF00, 0x0000_0002, 0x00FF_0000, 0x0000_0003)
    feed(gpu, *words)
    assert sent == [
        DrawGouraudTriangle(
            vertices=(
                Vertex.from_position_and_color(words[1], words[0]),
                Vertex.from_position_and_color(words[3], words[2]),
                Vertex.from_position_and_color(words[5], words[4]),
            )
        )
    ]


def test_shaded_square(gpu, sent):
    words = [0x3800_0001, 1, 0x0000_0002, 2, 0x0000_0003, 3, 0x0000_0004, 4]
    feed(gpu, *words)
    verts = [Vertex.from_position_and_color(words[i + 1], words[i]) for i in (0, 2, 4, 6)]
    assert sent == [
        DrawGouraudTriangle(vertices=tuple(verts[0:3])),
        DrawGouraudTriangle(vertices=tuple(verts[1:4])),
    ]


def test_textured_quad(gpu, sent):
    words = [
        0x2C10_2030,
        0x0005_0004,
        0x7FC0_0201,
        0x0005_0014,
        0x0011_0403,
        0x0015_0004,
        0x0000_0605,
        0x0015_0014,
        0x0000_0807,
    ]
    feed(gpu, *words)
    assert sent == [
        DrawTexturedQuad(
            vertices=tuple(PrimitiveVertex.from_word(w) for w in words[1::2]),
            uvs=tuple(Uv.from_word(w) for w in words[2::2]),
            clut_attr=words[2] >> 16,
            texpage_attr=words[4] >> 16,
            modulation_color=Color.from_word(words[0]),
        )
    ]


def test_mono_rectangle_dot(gpu, sent):
    feed(gpu, 0x6812_3456, 0x0007_0005)
    (command,) = sent
    first, right, below = command.vertices
    assert (right.x, right.y) == (first.x + 1, first.y)
    assert (below.x, below.y) == (first.x, first.y + 1)
    assert first.color == Color.from_word(0x12_3456)


def test_copy_cpu_to_vram(gpu, sent):
    feed(gpu, 0xA000_0000, 0x0002_0003, 0x0002_0002)
    assert sent == []
    assert gpu.remaining_words == 2
    feed(gpu, 0x2222_1111, 0x4444_3333)
    assert sent == [
        WriteToVram(x=3, y=2, w=2, h=2, pixel_data=[0x1111, 0x2222, 0x3333, 0x4444])
    ]
    assert gpu.buffer == []


def test_copy_cpu_to_vram_odd_halfwords_rounds_up(gpu, sent):
    feed(gpu, 0xA000_0000, 0, 0x0001_0003)
    assert gpu.remaining_words == 2
    feed(gpu, 0x0002_0001, 0x0000_0003)
    assert len(sent) == 1
    assert sent[0].pixel_data[:3] == [1, 2, 3]


def test_polyline_runs_until_terminator(gpu, sent):
    feed(gpu, 0x4800_00FF, 0x0001_0001, 0x0002_0002, 0x0003_0003)
    assert gpu.buffer != []
    feed(gpu, 0x5555_5555)
    assert gpu.buffer == []
    assert gpu.remaining_words == 0
    assert sent == []


def test_drawing_area(gpu, sent):
    feed(gpu, 0xE300_0000 | (5 << 10) | 7)
    feed(gpu, 0xE400_0000 | (200 << 10) | 300)
    assert sent == [
        SetDrawingArea(x1=7, y1=5, x2=1023, y2=511),
        SetDrawingArea(x1=7, y1=5, x2=300, y2=200),
    ]


def test_drawing_offset_sign_extends(gpu):
    feed(gpu, 0xE500_0000 | (0x400 << 11) | 0x7FF)
    assert gpu.drawing_offset == (-1, -1024)
    feed(gpu, 0xE500_0000 | (20 << 11) | 10)
    assert gpu.drawing_offset == (10, 20)


def test_draw_mode_keeps_low_bits(gpu):
    feed(gpu, 0xE100_FFFF)
    assert gpu.texpage_e1 == 0xFFFF & 0x3FFF


def test_gp1_display_enable_and_reset(gpu):
    gpu.process_gp1(0x0300_0001)
    assert gpu.gpustat.display_enable is True
    gpu.process_gp1(0x0000_0000)
    assert gpu.gpustat.value == GPUSTAT_RESET


def test_gp1_clear_fifo_drops_partial_command(gpu, sent):
    feed(gpu, 0x2000_00FF, 0x0001_0001)
    gpu.process_gp1(0x0100_0000)
    assert gpu.buffer == []
    assert gpu.remaining_words == 0
    feed(gpu, 0xE100_0001)
    assert gpu.texpage_e1 == 1
    assert sent == []


def test_gp1_display_mode(gpu, sent):
    gpu.process_gp1(0x0800_0001)
    assert gpu.horizontal_res == 320
    assert gpu.vertical_res == 480
    assert gpu.gpustat.horizontal_res1 == 1
    assert sent == [SetDisplayArea(x=0, y=0, w=320, h=480)]


def test_gp1_display_mode_368_wide(gpu):
    gpu.process_gp1(0x0800_0040)
    assert gpu.horizontal_res == 368
    assert gpu.gpustat.horizontal_res2 is True


def test_gp1_display_start(gpu, sent):
    gpu.process_gp1(0x0500_0000 | (100 << 10) | 200)
    assert (gpu.display_left, gpu.display_top) == (200, 100)
    assert sent == [SetDisplayArea(x=200, y=100, w=0, h=0)]


def test_gp1_unknown_opcode_raises(gpu):
    with pytest.raises(GpuError):
        gpu.process_gp1(0x0900_0000)


def test_gp1_info_requests_are_ignored(gpu):
    gpu.process_gp1(0x1000_0007)
    assert gpu.gpustat.value == GPUSTAT_RESET


def test_vblank_240_lines_only_raises_irq(gpu):
    before = gpu.gpustat.even_odd
    gpu.vblank()
    assert gpu.gpustat.irq is True
    assert gpu.gpustat.even_odd == before


def test_vblank_480_lines_toggles_field(gpu):
    gpu.process_gp1(0x0800_0004)
    assert gpu.gpustat.vertical_res is True
    before = gpu.gpustat.even_odd
    gpu.vblank()
    assert gpu.gpustat.even_odd != before
    gpu.vblank()
    assert gpu.gpustat.even_odd == before


def test_gpustat_read_only_field_rejects_assignment():
    stat = GpuStat()
    with pytest.raises(AttributeError):
        stat.vertical_res = True
    assert stat.value == GPUSTAT_RESET