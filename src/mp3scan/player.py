from typing import Optional

import pygame
from pydub import AudioSegment


class Preview:
    """Plays an audio file through the pygame mixer for a quick listen."""

    def __init__(self):
        self.path: Optional[str] = None
        self._sound = None
        self._channel = None
        self._duration = 0.0

    def load(self, path: str):
        seg = AudioSegment.from_file(path).set_sample_width(2)
        if pygame.mixer.get_init():
            pygame.mixer.quit()
        # the mixer has to match the decoded format before a raw buffer is handed over
        pygame.mixer.init(frequency=seg.frame_rate, size=-16, channels=seg.channels, buffer=1024)
        self._sound = pygame.mixer.Sound(buffer=seg.raw_data)
        self._duration = float(seg.duration_seconds)
        self.path = path

    def play(self, path: Optional[str] = None):
        if path and (path != self.path or self._sound is None):
            self.load(path)
        if self._sound is None:
            raise RuntimeError("No audio loaded")
        self.stop()
        self._channel = self._sound.play()

    def stop(self):
        if self._channel is not None and self._channel.get_busy():
            self._channel.stop()
        self._channel = None

    def is_playing(self) -> bool:
        return bool(self._channel and self._channel.get_busy())

    @property
    def duration_seconds(self) -> float:
        return self._duration
