"""Preview playback of rendered clips.

StreamPlayer writes a SampleBuffer to an sd.OutputStream in chunks.
"""

import logging

import numpy as np
import sounddevice as sd

log = logging.getLogger(__name__)


class StreamPlayer:
    """Chunked blocking playback via sd.OutputStream."""

    def __init__(self, chunk_size=4096):
        self.chunk_size = chunk_size

    def play(self, buffer):
        """Open a stream at the buffer's rate, write every frame, then drain and close.

        Returns True if the whole buffer was written, False on a PortAudio error.
        """
        if buffer.is_empty:
            return True
        frames = np.clip(buffer.frames(), -1.0, 1.0).astype(np.float32)
        try:
            with sd.OutputStream(
                samplerate=buffer.sample_rate, channels=buffer.channel_count, dtype='float32',
            ) as stream:
                for start in range(0, frames.shape[0], self.chunk_size):
                    stream.write(frames[start:start + self.chunk_size])
        except sd.PortAudioError as exc:
            log.error("playback failed: %s", exc)
            return False
        return True
