import random
import sys
import unittest
from pathlib import Path

# Add src directory to path for imports
BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from mp3scan.byteio import OutOfRangeError, read_byte
from mp3scan.frame_header import BITRATES, SAMPLERATES, frame_size, parse_header
from mp3scan.id3 import audio_start_offset, has_id3v2_tag, synchsafe_to_int
from mp3scan.mp3stream import MP3Stream, count_frames, scan_frames


def _header(br: int = 9, sr: int = 0, pad: int = 0, ch_mode: int = 0, b1: int = 0xFB) -> bytes:
    return bytes([0xFF, b1, (br << 4) | (sr << 2) | (pad << 1), ch_mode << 6])


def _frame(br: int = 9, sr: int = 0, pad: int = 0, ch_mode: int = 0) -> bytes:
    """A header padded with zeros to its declared frame size."""
    size = frame_size(BITRATES[br], SAMPLERATES[sr], bool(pad))
    return _header(br, sr, pad, ch_mode) + bytes(size - 4)


def _id3(size: int = 0) -> bytes:
    sizes = bytes([(size >> 21) & 0x7F, (size >> 14) & 0x7F, (size >> 7) & 0x7F, size & 0x7F])
    return b"ID3" + b"\x03\x00\x00" + sizes + bytes(size)


class TestByteReader(unittest.TestCase):
    def test_reads_in_range(self):
        self.assertEqual(read_byte(b"\x01\x02\x03", 2), 3)

    def test_out_of_range(self):
        for pos in (3, 10, -1):
            with self.subTest(pos=pos):
                with self.assertRaises(OutOfRangeError):
                    read_byte(b"\x01\x02\x03", pos)

    def test_is_an_index_error(self):
        with self.assertRaises(IndexError):
            read_byte(b"", 0)


class TestTagSkipper(unittest.TestCase):
    def test_no_tag(self):
        self.assertEqual(audio_start_offset(_frame()), 0)
        self.assertFalse(has_id3v2_tag(_frame()))

    def test_short_buffer_is_not_a_tag(self):
        """Fewer than 10 bytes never counts as a tag, even with the magic."""
        self.assertEqual(audio_start_offset(b"ID3\x03\x00\x00\x00\x00\x00"), 0)

    def test_empty_tag(self):
        self.assertEqual(audio_start_offset(_id3(0)), 10)

    def test_synchsafe_size(self):
        self.assertEqual(synchsafe_to_int(0x00, 0x00, 0x02, 0x01), 257)
        self.assertEqual(synchsafe_to_int(0x7F, 0x7F, 0x7F, 0x7F), (1 << 28) - 1)
        self.assertEqual(audio_start_offset(_id3(257)), 267)

    def test_offset_past_end_not_checked(self):
        data = b"ID3\x04\x00\x00\x00\x00\x7F\x7F"
        self.assertEqual(audio_start_offset(data), 10 + 0x3FFF)


class TestHeaderParser(unittest.TestCase):
    def test_reference_header(self):
        h = parse_header(bytes([0xFF, 0xFB, 0x90, 0x00]), 0)
        self.assertIsNotNone(h)
        self.assertEqual(h.version, 0b11)
        self.assertEqual(h.layer, 0b01)
        self.assertEqual(h.bitrate_index, 9)
        self.assertEqual(h.bitrate_kbps, 128)
        self.assertEqual(h.sample_rate, 44100)
        self.assertFalse(h.padding)
        self.assertEqual(h.frame_size, 417)
        self.assertTrue(h.is_plausible)

    def test_padding_adds_one_byte(self):
        self.assertEqual(parse_header(_header(pad=1), 0).frame_size, 418)

    def test_frame_sizes(self):
        cases = [(1, 1, 96), (14, 0, 1044), (14, 1, 960), (5, 2, 288)]
        for br, sr, expected in cases:
            with self.subTest(br=br, sr=sr):
                self.assertEqual(parse_header(_header(br, sr), 0).frame_size, expected)

    def test_oversized_frame_still_parsed(self):
        """320 kbps at 32 kHz with padding decodes, but is not plausible."""
        h = parse_header(_header(br=14, sr=2, pad=1), 0)
        self.assertEqual(h.frame_size, 1441)
        self.assertFalse(h.is_plausible)

    def test_rejected_fields(self):
        cases = {
            "bitrate 0": _header(br=0),
            "bitrate 15": _header(br=15),
            "sample rate 3": _header(sr=3),
            "mpeg2": _header(b1=0xF3),
            "mpeg2.5": _header(b1=0xE3),
            "reserved version": _header(b1=0xEB),
            "layer I": _header(b1=0xFF),
            "layer II": _header(b1=0xFD),
            "reserved layer": _header(b1=0xF9),
            "bad sync byte 0": b"\xFE\xFB\x90\x00",
            "bad sync byte 1": b"\xFF\x1B\x90\x00",
        }
        for name, data in cases.items():
            with self.subTest(name):
                self.assertIsNone(parse_header(data, 0))

    def test_needs_four_bytes(self):
        self.assertIsNone(parse_header(b"\xFF\xFB\x90", 0))
        self.assertIsNone(parse_header(_header(), 1))
        self.assertIsNone(parse_header(_header(), -1))
        self.assertIsNone(parse_header(b"", 0))

    def test_offset_position(self):
        data = b"\x00\x00" + _header(br=10)
        self.assertIsNone(parse_header(data, 0))
        self.assertEqual(parse_header(data, 2).bitrate_kbps, 160)

    def test_channel_mode(self):
        self.assertEqual(parse_header(_header(ch_mode=3), 0).channels, 1)
        self.assertEqual(parse_header(_header(ch_mode=1), 0).channels, 2)

    def test_tables_read_only(self):
        with self.assertRaises(TypeError):
            BITRATES[15] = 384
        with self.assertRaises(TypeError):
            SAMPLERATES[3] = 22050


class TestCountFrames(unittest.TestCase):
    def test_empty_and_short(self):
        for n in range(0, 5):
            with self.subTest(n=n):
                self.assertEqual(count_frames(_header()[:n]), 0)

    def test_single_frame(self):
        data = _frame()
        self.assertEqual(len(data), 417)
        self.assertEqual(count_frames(data), 1)

    def test_back_to_back_frames(self):
        for n in (2, 3, 10, 57):
            with self.subTest(n=n):
                self.assertEqual(count_frames(_frame() * n), n)

    def test_id3_tag_is_skipped(self):
        data = _id3(0) + _frame()
        self.assertEqual(len(data), 427)
        self.assertEqual(count_frames(data), 1)

    def test_id3_tag_body_is_not_scanned(self):
        """Frames hidden inside the tag body are never seen."""
        body = _frame() * 2
        tag = _id3(len(body))[:10] + body
        self.assertEqual(count_frames(tag + _frame() * 3), 3)

    def test_id3_size_past_end(self):
        data = _id3(0)[:6] + b"\x7F\x7F\x7F\x7F" + _frame() * 4
        self.assertEqual(count_frames(data), 0)

    def test_invalid_headers_never_counted(self):
        for hdr in (_header(br=0), _header(br=15), _header(sr=3), _header(b1=0xF3), _header(b1=0xFD)):
            with self.subTest(hdr=hdr.hex()):
                self.assertEqual(count_frames(hdr + bytes(500)), 0)
                self.assertEqual(count_frames((hdr + bytes(413)) * 5), 0)

    def test_implausible_frame_not_counted(self):
        self.assertEqual(count_frames(_header(br=14, sr=2, pad=1) + bytes(1437)), 0)

    def test_noise_without_sync_bytes(self):
        rng = random.Random(1234)
        noise = bytes(rng.randrange(0, 0xFF) for _ in range(20000))
        self.assertEqual(count_frames(noise), 0)

    def test_noise_with_broken_sync_pairs(self):
        """0xFF bytes everywhere, but each one is followed by an MPEG-2 byte."""
        rng = random.Random(4321)
        noise = bytearray(rng.randrange(256) for _ in range(20000))
        for i in range(len(noise) - 1):
            if noise[i] == 0xFF:
                noise[i + 1] = 0xF3
        self.assertGreater(noise.count(0xFF), 0)
        self.assertEqual(count_frames(bytes(noise)), 0)

    def test_resync_after_garbage(self):
        garbage = b"\x00\x13\xFF\x00\xFF\xFB\xF0\x00" + bytes(29)
        self.assertEqual(count_frames(garbage + _frame() * 3), 3)

    def test_recovers_from_drift(self):
        """Junk between frames breaks the lock; the byte search finds the next one."""
        data = _frame() + b"\x00\x00\x00" + _frame() + b"\x07" + _frame()
        frames = list(scan_frames(data))
        self.assertEqual([f.offset for f in frames], [0, 420, 838])

    def test_vbr_stream(self):
        sizes = [9, 14, 1, 5, 11, 9, 3]
        data = b"".join(_frame(br=b) for b in sizes)
        frames = list(scan_frames(data))
        self.assertEqual([f.header.bitrate_index for f in frames], sizes)

    def test_padding_mix(self):
        data = b"".join(_frame(pad=p) for p in (0, 1, 1, 0, 1))
        self.assertEqual(count_frames(data), 5)

    def test_trailing_partial_frame_counted(self):
        data = _frame() * 2 + _header() + bytes(100)
        self.assertEqual(count_frames(data), 3)

    def test_lone_truncated_frame_counted(self):
        """A plausible header with a few bytes behind it counts as one frame."""
        self.assertEqual(count_frames(_header() + bytes(10)), 1)

    def test_tail_too_short_for_header(self):
        self.assertEqual(count_frames(_frame() * 2 + _header()[:3]), 2)

    def test_buffer_types(self):
        data = _frame() * 4
        self.assertEqual(count_frames(bytearray(data)), 4)
        self.assertEqual(count_frames(memoryview(data)), 4)

    def test_idempotent(self):
        rng = random.Random(99)
        data = bytes(rng.randrange(256) for _ in range(5000)) + _frame() * 3
        self.assertEqual(count_frames(data), count_frames(data))

    def test_random_bytes_never_raise(self):
        rng = random.Random(7)
        for n in (1, 5, 64, 999):
            blob = bytes(rng.choice((0xFF, 0xFB, 0x90, 0xE3, 0x00, rng.randrange(256))) for _ in range(n))
            with self.subTest(n=n):
                self.assertGreaterEqual(count_frames(blob), 0)

    def test_does_not_mutate_input(self):
        data = bytearray(_frame() * 2)
        before = bytes(data)
        count_frames(data)
        self.assertEqual(bytes(data), before)


class TestMP3Stream(unittest.TestCase):
    def test_frames_and_offset(self):
        st = MP3Stream(_id3(5) + _frame() * 2)
        self.assertEqual(st.audio_offset, 15)
        self.assertEqual(st.frame_count, 2)
        self.assertEqual([f.offset for f in st.frames], [15, 432])
        self.assertEqual(st.frames[0].size, 417)


if __name__ == '__main__':
    unittest.main(verbosity=2)
