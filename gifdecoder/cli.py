"""
Command line viewer for GIF files.

Usage examples:
    gifdecoder info file.gif
    gifdecoder show file.gif --max-width 120 --max-height 60
    gifdecoder animate file.gif --loop 0 --speed 2
    gifdecoder export-ppm file.gif --out frame_%03d.ppm

Terminal preview uses ANSI truecolor when COLORTERM says the terminal has
it, ASCII otherwise (or with --ascii).
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

from . import terminal
from .compositor import Animation, Frame, composite
from .errors import GIFError
from .model import DISPOSAL_NAMES, Document
from .parser import parse_gif
from .player import Player

logger = logging.getLogger(__name__)

# seconds between player updates while animating
TICK = 0.01

# -----------------------------
# High-level actions
# -----------------------------
def action_info(gif: Document, animation: Animation) -> None:
    print("Header:")
    print(f"  Version: {gif.version.value}")
    print("Logical Screen Descriptor:")
    print(f"  Canvas: {gif.width}x{gif.height} pixels (logical screen)")
    gct = gif.global_color_table
    print(f"  Global Color Table: {'present' if gct else 'absent'}")
    if gct:
        print(f"    Size: {gct.size} colors; Sorted: {gct.sorted}")
        print(f"    Background Color Index: {gif.bg_color_index}")
    print(f"  Color Resolution: {gif.color_resolution + 1} bits per primary")
    if gif.pixel_aspect is not None:
        print(f"  Pixel Aspect Ratio: {gif.pixel_aspect:.3f} (width/height)")
    else:
        print("  Pixel Aspect Ratio: not specified (assume square)")

    loops = gif.loop_count
    if loops is not None:
        print(f"Animation Looping: {'infinite' if loops == 0 else loops} (Netscape ext)")
    if gif.comments:
        print(f"Comments: {len(gif.comments)}")
        for i, c in enumerate(gif.comments, 1):
            snip = (c[:60] + "...") if len(c) > 60 else c
            print(f"  #{i}: {snip}")
    if gif.app_extensions:
        print(f"Application Extensions: {len(gif.app_extensions)}")
        for ext in gif.app_extensions:
            ident = (ext.identifier + ext.auth_code).decode("ascii", "backslashreplace")
            print(f"  {ident}: {len(ext.data)} bytes")

    print(f"Graphics: {len(gif.graphics)}")
    for i, graphic in enumerate(gif.graphics):
        left, top, w, h = graphic.rect
        content = graphic.content
        if graphic.is_image:
            kind = "Image" + (" interlaced" if content.interlace else "")
        else:
            kind = "Plain Text"
        print(f"\nGraphic {i}: {kind} {w}x{h} at ({left},{top})")
        if graphic.is_image and content.local_color_table is not None:
            print(f"  Local Color Table: present, size {content.local_color_table.size}")
        if not graphic.is_image:
            print(f"  Text: {content.text.decode('ascii', 'backslashreplace')}")
        gce = graphic.control
        if gce:
            print(f"  Delay: {gce.delay_cs/100:.2f}s, Transparent idx: {gce.transparent}, "
                  f"Disposal: {DISPOSAL_NAMES[gce.disposal]}"
                  + (", waits for user input" if gce.user_input else ""))

    print(f"\nFrames: {len(animation)}, total duration {animation.total_duration/100:.2f}s")


def show_frame(frame: Frame, max_w: int, max_h: int, ascii_only: bool) -> str:
    return terminal.frame_raster(frame, max_w, max_h).render(ascii_only)


def action_show(animation: Animation, max_w: int, max_h: int,
                ascii_only: bool = False) -> None:
    if not len(animation):
        raise GIFError("No frames to render")
    print(show_frame(animation[0], max_w, max_h, ascii_only))


def action_export_ppm(animation: Animation, out_pattern: str,
                      frame_index: Optional[int], max_w: int, max_h: int) -> int:
    written = 0
    for i, frame in enumerate(animation):
        if frame_index is not None and i != frame_index:
            continue
        path = out_pattern % i if "%" in out_pattern else out_pattern
        terminal.write_ppm(path, frame, max_w, max_h)
        logger.info("wrote %s", path)
        written += 1
    return written


def action_animate(animation: Animation, max_w: int, max_h: int,
                   loop: int, speed: float, ascii_only: bool = False) -> None:
    # loop: number of passes, 0 = infinite
    player = Player(animation, speed=speed, looping=loop != 1)
    shown = None
    last = time.monotonic()
    try:
        while not player.finished and not (loop > 0 and player.loops_completed >= loop):
            if player.current is not shown:
                shown = player.current
                sys.stdout.write(terminal.CLEAR_SCREEN)
                sys.stdout.write(show_frame(shown, max_w, max_h, ascii_only) + "\n")
                sys.stdout.flush()
            time.sleep(TICK)
            now = time.monotonic()
            player.advance((now - last) * 100)
            last = now
    except KeyboardInterrupt:
        pass
    finally:
        print(terminal.RESET)

# -----------------------------
# CLI
# -----------------------------
def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="gifdecoder", description="GIF decoder & terminal viewer")
    p.add_argument("-v", "--verbose", action="count", default=0,
                   help="Log more (-v info, -vv debug)")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_info = sub.add_parser("info", help="Print header, block and frame info")
    p_info.add_argument("gif", help="Path to .gif")

    p_show = sub.add_parser("show", help="Render first frame in terminal (ANSI or ASCII)")
    p_show.add_argument("gif")
    p_show.add_argument("--max-width", type=int, default=120)
    p_show.add_argument("--max-height", type=int, default=60)
    p_show.add_argument("--ascii", action="store_true", help="ASCII-only preview (no colors)")

    p_anim = sub.add_parser("animate", help="Play animation in terminal")
    p_anim.add_argument("gif")
    p_anim.add_argument("--max-width", type=int, default=120)
    p_anim.add_argument("--max-height", type=int, default=60)
    p_anim.add_argument("--loop", type=int, default=0,
                        help="Number of loops (0=from file, <0=infinite)")
    p_anim.add_argument("--speed", type=float, default=1.0, help="Playback speed multiplier")
    p_anim.add_argument("--ascii", action="store_true")

    p_ppm = sub.add_parser("export-ppm", help="Export one/all frames to PPM on a 50%% gray checkerboard")
    p_ppm.add_argument("gif")
    p_ppm.add_argument("--out", required=True, help="Output path; use %%d for frame index")
    p_ppm.add_argument("--frame", type=int, default=None, help="Single frame index (default: all)")
    p_ppm.add_argument("--max-width", type=int, default=4096)
    p_ppm.add_argument("--max-height", type=int, default=4096)

    return p


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def file_loops(gif: Document) -> int:
    # Netscape: 0 repeats forever; without the extension play once
    loops = gif.loop_count
    if loops is None:
        return 1
    return loops


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_arg_parser()
    args = ap.parse_args(argv)
    configure_logging(args.verbose)
    try:
        gif = parse_gif(args.gif)
        animation = composite(gif)
    except GIFError as e:
        print(f"Error: {e}")
        return 2
    except OSError as e:
        print(f"Error: {e.strerror or e}")
        return 2

    try:
        if args.cmd == "info":
            action_info(gif, animation)
        elif args.cmd == "show":
            # guard huge images by auto-fit
            action_show(animation, max(1, args.max_width), max(1, args.max_height),
                        ascii_only=args.ascii)
        elif args.cmd == "animate":
            if not len(animation):
                raise GIFError("No frames to render")
            if args.speed <= 0:
                ap.error("--speed must be positive")
            loops = args.loop
            if loops == 0:
                loops = file_loops(gif)
            elif loops < 0:
                loops = 0
            action_animate(animation, max(1, args.max_width), max(1, args.max_height),
                           loops, args.speed, ascii_only=args.ascii)
        elif args.cmd == "export-ppm":
            n = action_export_ppm(animation, args.out, args.frame,
                                  max(1, args.max_width), max(1, args.max_height))
            print(f"Export done: {n} frame(s).")
    except GIFError as e:
        print(f"Error: {e}")
        return 2
    except OSError as e:
        print(f"Error: {e.strerror or e}")
        return 2
    return 0
