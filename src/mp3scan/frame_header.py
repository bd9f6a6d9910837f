from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from .byteio import OutOfRangeError, read_byte

# MPEG-1 Layer III only
BITRATES = MappingProxyType({
    0b0001: 32, 0b0010: 40, 0b0011: 48, 0b0100: 56,
    0b0101: 64, 0b0110: 80, 0b0111: 96, 0b1000: 112,
    0b1001: 128, 0b1010: 160, 0b1011: 192, 0b1100: 224,
    0b1101: 256, 0b1110: 320
})
SAMPLERATES = MappingProxyType({0b00: 44100, 0b01: 48000, 0b10: 32000})

VERSION_MPEG1 = 0b11
LAYER_III = 0b01
CHANNEL_MODE_MONO = 0b11

HEADER_SIZE = 4
FRAME_SIZE_MIN = 4
FRAME_SIZE_MAX = 1440
SAMPLES_PER_FRAME = 1152

@dataclass(frozen=True)
class FrameHeader:
    version: int
    layer: int
    bitrate_index: int
    sample_rate_index: int
    padding: bool
    channel_mode: int
    frame_size: int

    @property
    def bitrate_kbps(self) -> int:
        return BITRATES[self.bitrate_index]

    @property
    def sample_rate(self) -> int:
        return SAMPLERATES[self.sample_rate_index]

    @property
    def channels(self) -> int:
        return 1 if self.channel_mode == CHANNEL_MODE_MONO else 2

    @property
    def is_plausible(self) -> bool:
        """Whether the frame size is one a real Layer III frame can have."""
        return FRAME_SIZE_MIN <= self.frame_size <= FRAME_SIZE_MAX


def frame_size(bitrate_kbps: int, sample_rate: int, padding: bool) -> int:
    return (144 * bitrate_kbps * 1000) // sample_rate + (1 if padding else 0)


def parse_header(data: bytes, position: int) -> Optional[FrameHeader]:
    """Decode the MPEG-1 Layer III frame header starting at ``position``.

    Returns None when no valid header starts there. The frame size is not
    range-checked here; see ``FrameHeader.is_plausible``.
    """
    if position < 0 or position + HEADER_SIZE > len(data):
        return None
    try:
        h = [read_byte(data, position + k) for k in range(HEADER_SIZE)]
    except OutOfRangeError:
        return None

    if h[0] != 0xFF or (h[1] & 0xE0) != 0xE0:
        return None
    version = (h[1] >> 3) & 0b11
    layer = (h[1] >> 1) & 0b11
    if version != VERSION_MPEG1 or layer != LAYER_III:
        return None

    br = (h[2] >> 4) & 0b1111
    sr = (h[2] >> 2) & 0b11
    if br == 0 or br == 0b1111 or sr == 0b11:
        return None
    padding = bool((h[2] >> 1) & 0b1)
    ch_mode = (h[3] >> 6) & 0b11

    return FrameHeader(
        version=version,
        layer=layer,
        bitrate_index=br,
        sample_rate_index=sr,
        padding=padding,
        channel_mode=ch_mode,
        frame_size=frame_size(BITRATES[br], SAMPLERATES[sr], padding),
    )
