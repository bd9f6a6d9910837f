from .byteio import read_byte

ID3_MAGIC = b"ID3"
ID3_HEADER_LEN = 10

def synchsafe_to_int(b0: int, b1: int, b2: int, b3: int) -> int:
    return (b0 << 21) | (b1 << 14) | (b2 << 7) | b3

def has_id3v2_tag(data: bytes) -> bool:
    return len(data) >= ID3_HEADER_LEN and bytes(data[:3]) == ID3_MAGIC

def audio_start_offset(data: bytes) -> int:
    """Offset of the first byte after a leading ID3v2 tag, or 0 without one.

    The declared tag size is trusted as-is; an offset past the end of the
    buffer is left for the scanner to run into.
    """
    if not has_id3v2_tag(data):
        return 0
    size = synchsafe_to_int(*(read_byte(data, i) for i in range(6, 10)))
    return ID3_HEADER_LEN + size
