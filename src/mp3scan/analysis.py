from pathlib import Path

from .decode import decoded_duration
from .mp3stream import MP3Stream

def analyze_bytes(data: bytes):
    st = MP3Stream(data)
    out = st.stats()
    out["size_bytes"] = len(data)
    return out

def analyze_file(path: str, verify: bool = False):
    """Frame statistics for an MP3 file on disk.

    With ``verify`` the file is also decoded and the decoder's duration is
    added as ``decoded_duration_sec`` (None if decoding is unavailable).
    """
    b = Path(path).read_bytes()
    out = analyze_bytes(b)
    out["path"] = str(path)
    if verify:
        out["decoded_duration_sec"] = decoded_duration(path)
    return out
