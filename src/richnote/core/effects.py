"""Commands returned by the editor session for the host to run later."""

from __future__ import annotations
from dataclasses import dataclass

from .ports import HostWidget


@dataclass(frozen=True)
class SetSelection:
    """Push a synthesized selection back to the host widget."""

    start: int
    stop: int

    def apply(self, host: HostWidget) -> None:
        host.set_selection(self.start, self.stop)


class FrameQueue:
    """
    Holds effects until the host's next rendering frame.

    Effects scheduled while a frame is being applied wait for the frame after,
    so a selection event raised by `set_selection` can never recurse into the
    transition that produced it.
    """

    def __init__(self) -> None:
        self._pending: list[SetSelection] = []

    def __len__(self) -> int:
        return len(self._pending)

    def schedule(self, effects: tuple[SetSelection, ...]) -> None:
        self._pending.extend(effects)

    def next_frame(self, host: HostWidget) -> int:
        """Apply every effect scheduled before this call. Returns how many ran."""
        due, self._pending = self._pending, []
        for effect in due:
            effect.apply(host)
        return len(due)
