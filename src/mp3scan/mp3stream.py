from dataclasses import dataclass
from typing import Iterator, List, Optional

import numpy as np

from .frame_header import FrameHeader, HEADER_SIZE, SAMPLES_PER_FRAME, parse_header
from .id3 import audio_start_offset

SYNC_BYTE = 0xFF

@dataclass
class Frame:
    offset: int
    header: FrameHeader

    @property
    def size(self) -> int:
        return self.header.frame_size


def _next_sync_candidate(data: bytes, position: int) -> int:
    # A header can only start on 0xFF, so skipping straight to the next one
    # lands where a byte-at-a-time search would first succeed.
    i = data.find(SYNC_BYTE, position)
    return len(data) if i < 0 else i


def scan_frames(data: bytes) -> Iterator[Frame]:
    """Walk the buffer once, yielding every frame that counts.

    After a counted frame the cursor jumps by its declared size. If the
    header found there checks out it is kept for the next step instead of
    being decoded again; if not, the byte-level search takes over from that
    position. A plausible header whose frame runs past the end of the
    buffer is yielded as a trailing partial frame and ends the scan.
    """
    if not isinstance(data, (bytes, bytearray)):
        data = bytes(data)
    n = len(data)
    i = audio_start_offset(data)
    verified: Optional[FrameHeader] = None

    while i < n - HEADER_SIZE:
        header = verified if verified is not None else parse_header(data, i)
        verified = None
        if header is None:
            i = _next_sync_candidate(data, i + 1); continue
        if not header.is_plausible:
            i += 1; continue

        if i + header.frame_size > n:
            if i + HEADER_SIZE <= n:
                yield Frame(offset=i, header=header)
            return

        yield Frame(offset=i, header=header)
        next_pos = i + header.frame_size
        if next_pos >= n - HEADER_SIZE:
            return
        ahead = parse_header(data, next_pos)
        if ahead is not None and ahead.is_plausible:
            verified = ahead
        i = next_pos


def count_frames(data: bytes) -> int:
    """Estimated number of MPEG-1 Layer III frames in ``data``."""
    return sum(1 for _ in scan_frames(data))


class MP3Stream:
    def __init__(self, data: bytes):
        self.data = data
        self.audio_offset = audio_start_offset(data)
        self.frames: List[Frame] = list(scan_frames(data))

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    def stats(self):
        total = len(self.frames)
        if total == 0:
            return {"frame_count": 0, "audio_offset": self.audio_offset, "valid": False,
                    "sample_rate": None, "stereo": False, "avg_bitrate_kbps": 0.0,
                    "vbr": False, "duration_sec": 0.0}
        bitrates = np.array([fr.header.bitrate_kbps for fr in self.frames], dtype=np.int64)
        rates = np.array([fr.header.sample_rate for fr in self.frames], dtype=np.float64)
        return {
            "frame_count": total,
            "audio_offset": self.audio_offset,
            "valid": True,
            "sample_rate": int(rates[0]),
            "stereo": any(fr.header.channels == 2 for fr in self.frames),
            "avg_bitrate_kbps": float(bitrates.mean()),
            "vbr": bool(np.unique(bitrates).size > 1),
            "duration_sec": float(np.sum(SAMPLES_PER_FRAME / rates)),
        }
