from __future__ import annotations

from .compositor import Animation, Frame

# a frame is shown for at least one timer tick, even with a zero delay
MIN_DELAY_CS = 1


class Player:
    """Playback cursor over an `Animation`.

    Time is fed in with `advance()` (centiseconds); each frame is shown for
    its delay divided by `speed`. With `looping` off, playback stops on the
    last frame.
    """

    def __init__(self, animation: Animation, speed: float = 1.0, looping: bool = True):
        if not len(animation):
            raise ValueError("animation has no frames")
        if speed <= 0:
            raise ValueError("speed must be positive")
        self.animation = animation
        self.speed = speed
        self.looping = looping
        self.index = 0
        self.timer = 0.0
        self.paused = False
        self.finished = False
        self.loops_completed = 0

    @property
    def current(self) -> Frame:
        return self.animation[self.index]

    def frame_duration(self, frame: Frame) -> float:
        return max(frame.delay_cs, MIN_DELAY_CS) / self.speed

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def toggle_pause(self) -> None:
        self.paused = not self.paused

    def step(self, count: int = 1) -> Frame:
        """Move `count` frames forward (or backward), wrapping around."""
        self.index = (self.index + count) % len(self.animation)
        self.timer = 0.0
        self.finished = False
        return self.current

    def advance(self, elapsed_cs: float) -> bool:
        """Let time pass; returns True if the current frame changed."""
        if self.paused or self.finished:
            return False
        self.timer += elapsed_cs
        changed = False
        while self.timer >= self.frame_duration(self.current):
            last = self.index == len(self.animation) - 1
            if last and not self.looping:
                self.finished = True
                self.timer = 0.0
                break
            self.timer -= self.frame_duration(self.current)
            self.index = self.animation.next_index(self.index)
            if last:
                self.loops_completed += 1
            changed = True
        return changed
