import logging
from typing import Optional

from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

logger = logging.getLogger(__name__)


def decoded_duration(path: str) -> Optional[float]:
    """Duration reported by a full decode through ffmpeg, or None if it fails.

    Only used to cross-check the frame-based estimate.
    """
    try:
        seg = AudioSegment.from_file(str(path))
    except (CouldntDecodeError, OSError) as e:
        logger.warning("Cannot decode %s: %s", path, e)
        return None
    return float(seg.duration_seconds)
