"""
GIF timing reader: total playback duration without decoding pixel data.

The reader walks the container's block structure once:

    header (6) | logical screen descriptor (7) | [global color table]
    { extension (0x21) | image (0x2C) } ... | trailer (0x3B)

Only graphic-control extensions (0x21 0xF9) of declared size 4 contribute a
frame delay. Delays are stored in centiseconds and reported in milliseconds.

The walk stops at the trailer, at the first unknown block tag, or at the first
read past the end of the buffer. Whatever was accumulated up to that point is
kept. ``compute_duration`` never raises; any input with no derivable timing
yields ``FALLBACK_DURATION_MS``.

Usage:
    from loopreel.media.gif_timing import compute_duration
    with open("assets/gifs/lain-headbop.gif", "rb") as f:
        duration_ms = compute_duration(f.read())
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from loopreel.infra.exceptions import GifFormatError
from loopreel.infra.logging import get_logger

_log = get_logger(__name__)

FALLBACK_DURATION_MS = 3000

GIF_SIGNATURES: tuple[bytes, ...] = (b"GIF89a", b"GIF87a")

# Block tags
EXTENSION_INTRODUCER = 0x21
IMAGE_SEPARATOR = 0x2C
TRAILER = 0x3B

# Extension labels
GRAPHIC_CONTROL_LABEL = 0xF9
_GRAPHIC_CONTROL_SIZE = 4

_SIGNATURE_SIZE = 6
_SCREEN_DESCRIPTOR_SIZE = 7
_MIN_SIZE = _SIGNATURE_SIZE + _SCREEN_DESCRIPTOR_SIZE

_COLOR_TABLE_FLAG = 0x80
_COLOR_TABLE_BITS = 0x07

# left, top, width, height (u16 each) precede the image packed byte
_IMAGE_POSITION_SIZE = 8

_CS_TO_MS = 10


@dataclass(frozen=True)
class GifTiming:
    """Frame delays found by one block walk.

    ``complete`` is True only when the walk reached the trailer. A walk that
    ran off the end of the buffer or hit an unknown block tag is incomplete
    but keeps every delay read before it stopped.
    """

    delays_cs: tuple[int, ...]
    complete: bool

    @property
    def frame_count(self) -> int:
        return len(self.delays_cs)

    @property
    def total_ms(self) -> int:
        return sum(self.delays_cs) * _CS_TO_MS


def _color_table_size(packed: int) -> int:
    """Bytes in a color table: 3 per entry, 2 ** (bits + 1) entries."""
    return 3 * (1 << ((packed & _COLOR_TABLE_BITS) + 1))


def _skip_sub_blocks(data: bytes, pos: int) -> int:
    """Return the offset just past a sub-block chain and its zero terminator."""
    end = len(data)
    while pos < end and data[pos] != 0:
        pos += data[pos] + 1
    return pos + 1


def _walk_blocks(data: bytes, delays: list[int]) -> bool:
    """Append graphic-control delays to ``delays`` in stream order.

    Returns True when the trailer is reached, False on an unknown block tag or
    a clean end of buffer. Raises IndexError or struct.error on a read past
    the end; ``delays`` then holds everything read so far.
    """
    packed = data[_SIGNATURE_SIZE + 4]
    pos = _SIGNATURE_SIZE + _SCREEN_DESCRIPTOR_SIZE
    if packed & _COLOR_TABLE_FLAG:
        pos += _color_table_size(packed)

    end = len(data)
    while pos < end:
        tag = data[pos]
        pos += 1

        if tag == EXTENSION_INTRODUCER:
            label = data[pos]
            pos += 1
            if label == GRAPHIC_CONTROL_LABEL:
                size = data[pos]
                pos += 1
                if size == _GRAPHIC_CONTROL_SIZE:
                    # packed fields byte, then u16 delay; a missing high byte reads as 0
                    if pos + 2 < end:
                        (delay,) = struct.unpack_from("<H", data, pos + 1)
                    else:
                        delay = data[pos + 1]
                    delays.append(delay)
                pos += size
            pos = _skip_sub_blocks(data, pos)

        elif tag == IMAGE_SEPARATOR:
            pos += _IMAGE_POSITION_SIZE
            packed = data[pos]
            pos += 1
            if packed & _COLOR_TABLE_FLAG:
                pos += _color_table_size(packed)
            pos += 1  # LZW minimum code size
            pos = _skip_sub_blocks(data, pos)

        elif tag == TRAILER:
            return True

        else:
            # Not a block tag; nothing after this can be trusted.
            return False

    return False


def scan_gif_timing(data: bytes) -> GifTiming:
    """Walk the block structure of ``data`` and collect frame delays.

    Raises:
        GifFormatError: If ``data`` is shorter than the header plus logical
            screen descriptor, or does not start with a GIF87a/GIF89a
            signature.
    """
    if len(data) < _MIN_SIZE:
        raise GifFormatError(f"need at least {_MIN_SIZE} bytes, got {len(data)}")

    signature = bytes(data[:_SIGNATURE_SIZE])
    if signature not in GIF_SIGNATURES:
        raise GifFormatError(f"unrecognised signature {signature!r}")

    delays: list[int] = []
    try:
        complete = _walk_blocks(data, delays)
    except (IndexError, struct.error):
        _log.debug("gif_walk_truncated", frames=len(delays), size=len(data))
        complete = False

    return GifTiming(delays_cs=tuple(delays), complete=complete)


def compute_duration(data: bytes, fallback_ms: int = FALLBACK_DURATION_MS) -> int:
    """Return the total playback duration of a GIF in milliseconds.

    Falls back to ``fallback_ms`` for short or unsigned input and for streams
    whose delays sum to zero, whether no timing blocks were present or the
    walk stopped on corruption before reaching one.
    """
    try:
        timing = scan_gif_timing(data)
    except GifFormatError as exc:
        _log.debug("gif_signature_rejected", reason=str(exc))
        return fallback_ms

    total_ms = timing.total_ms
    return total_ms if total_ms > 0 else fallback_ms
