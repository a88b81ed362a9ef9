import gifbuild
from gifdecoder.cli import file_loops, main
from gifdecoder.compositor import Frame
from gifdecoder.parser import parse_gif
from gifdecoder.terminal import Raster, frame_raster


def test_info(gif_file, capsys):
    assert main(["info", str(gif_file)]) == 0
    out = capsys.readouterr().out
    assert "Version: 89a" in out
    assert "Canvas: 2x2 pixels" in out
    assert "Size: 4 colors" in out
    assert "Graphic 0: Image 2x2 at (0,0)" in out
    assert "Frames: 1" in out


def test_info_lists_extensions(tmp_path, capsys):
    path = tmp_path / "anim.gif"
    path.write_bytes(gifbuild.gif(2, 2, [
        gifbuild.netscape_loop(0),
        gifbuild.comment(b"hello"),
        gifbuild.gce(delay=25, disposal=2, transparent=1),
        gifbuild.image([0, 1, 1, 0], 2, 2),
    ], gct=[(0, 0, 0), (255, 255, 255)]))
    assert main(["info", str(path)]) == 0
    out = capsys.readouterr().out
    assert "Animation Looping: infinite" in out
    assert "#1: hello" in out
    assert "NETSCAPE2.0: 3 bytes" in out
    assert "Delay: 0.25s, Transparent idx: 1, Disposal: Restore to BG" in out


def test_show_ascii(gif_file, capsys):
    assert main(["show", str(gif_file), "--ascii"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert all(len(line) == 2 for line in lines)


def test_export_ppm(gif_file, tmp_path, capsys):
    out = tmp_path / "frame_%03d.ppm"
    assert main(["export-ppm", str(gif_file), "--out", str(out)]) == 0
    data = (tmp_path / "frame_000.ppm").read_bytes()
    assert data == b"P6\n2 2\n255\n" + bytes([0, 0, 0, 255, 0, 0, 0, 255, 0, 0, 0, 255])
    assert "1 frame(s)" in capsys.readouterr().out


def test_bad_file(tmp_path, capsys):
    path = tmp_path / "bad.gif"
    path.write_bytes(b"GIX89a" + bytes(20))
    assert main(["info", str(path)]) == 2
    assert "Error:" in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    assert main(["info", str(tmp_path / "nope.gif")]) == 2
    assert "Error:" in capsys.readouterr().out


def test_file_loops():
    assert file_loops(parse_gif(gifbuild.gif(1, 1))) == 1
    assert file_loops(parse_gif(gifbuild.gif(1, 1, [gifbuild.netscape_loop(0)]))) == 0
    assert file_loops(parse_gif(gifbuild.gif(1, 1, [gifbuild.netscape_loop(4)]))) == 4


def test_checkerboard_under_transparency():
    frame = Frame(2, 1, bytes([10, 20, 30, 255, 0, 0, 0, 0]), 0)
    assert Raster.from_frame(frame).rgb == [(10, 20, 30), (128, 128, 128)]


def test_fitted_keeps_aspect_and_never_upscales():
    raster = Raster(4, 1, [(x, 0, 0) for x in range(4)])
    assert raster.fitted(20, 20) is raster
    small = raster.fitted(2, 1)
    assert (small.width, small.height) == (2, 1)
    assert small.rgb == [(0, 0, 0), (2, 0, 0)]
    assert Raster(100, 50, [(0, 0, 0)] * 5000).fitted(10, 10).height == 5


def test_render_ascii():
    raster = Raster(2, 1, [(0, 0, 0), (255, 255, 255)])
    assert raster.render(ascii_only=True) == " @"


def test_render_ansi_packs_two_rows(monkeypatch):
    monkeypatch.setenv("COLORTERM", "truecolor")
    raster = Raster(1, 2, [(1, 2, 3), (4, 5, 6)])
    assert raster.render() == "\x1b[48;2;1;2;3m\x1b[38;2;4;5;6m\u2584\x1b[0m"


def test_ppm():
    frame = Frame(1, 1, bytes([1, 2, 3, 255]), 0)
    assert frame_raster(frame, 10, 10).ppm() == b"P6\n1 1\n255\n\x01\x02\x03"
