class OutOfRangeError(IndexError):
    """Raised when a read falls outside the buffer."""


def read_byte(data: bytes, position: int) -> int:
    if position < 0 or position >= len(data):
        raise OutOfRangeError(f"position {position} outside buffer of {len(data)} bytes")
    return data[position]
