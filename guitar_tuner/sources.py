"""
Audio sources that deliver fixed-length, normalized frames.

A source's ``read`` blocks until a full frame is available. A frame that
could not be filled raises ``AudioSourceError``; the end of finite input
raises ``EndOfStream``.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import numpy as np
from scipy.io import wavfile

from .constants import FRAME_LENGTH, FULL_SCALE_24BIT, SAMPLE_RATE
from .errors import AudioSourceError, ConfigError, EndOfStream
from .preprocessor import normalize_samples

logger = logging.getLogger(__name__)


class AudioSource(ABC):
    """Blocking provider of audio frames."""

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """Sample rate in Hz."""

    @property
    @abstractmethod
    def frame_length(self) -> int:
        """Samples per frame."""

    @abstractmethod
    def read(self) -> np.ndarray:
        """Block until the next frame is available and return it."""

    def close(self):
        """Release the underlying device or file."""

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class ArraySource(AudioSource):
    """
    Frames an in-memory signal.

    Args:
        samples: Signal, raw integer or normalized float
        sample_rate: Sample rate of ``samples`` in Hz
        frame_length: Samples per frame; a short final frame is dropped
        loop: Restart from the beginning instead of ending
        fail_at: Frame numbers (0-based reads) that raise AudioSourceError
            instead of returning data, for exercising failure handling
        full_scale: Divisor for integer samples
    """

    def __init__(
        self,
        samples: np.ndarray,
        sample_rate: int = SAMPLE_RATE,
        frame_length: int = FRAME_LENGTH,
        loop: bool = False,
        fail_at: set[int] | None = None,
        full_scale: float = FULL_SCALE_24BIT,
    ):
        self._samples = normalize_samples(samples, full_scale)
        self._sample_rate = sample_rate
        self._frame_length = frame_length
        self._loop = loop
        self._fail_at = set(fail_at or ())
        self._position = 0
        self._reads = 0

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frame_length(self) -> int:
        return self._frame_length

    def read(self) -> np.ndarray:
        read_number = self._reads
        self._reads += 1

        end = self._position + self._frame_length
        if end > len(self._samples):
            if not self._loop or len(self._samples) < self._frame_length:
                raise EndOfStream("No more audio")
            self._position = 0
            end = self._frame_length

        frame = self._samples[self._position:end].copy()
        self._position = end

        if read_number in self._fail_at:
            raise AudioSourceError(f"Simulated acquisition failure at frame {read_number}")
        return frame


class WavFileSource(ArraySource):
    """
    Frames a WAV file read with ``scipy.io.wavfile``.

    Integer formats are normalized by their own full scale. scipy returns
    24-bit PCM left-justified in int32, so 24- and 32-bit files share the
    int32 scale; ``full_scale`` only applies to other integer types.
    """

    _FULL_SCALE = {
        np.dtype(np.int32): 2**31 - 1,
        np.dtype(np.int16): 2**15 - 1,
        np.dtype(np.uint8): 2**7 - 1,
    }

    def __init__(
        self,
        path: str | Path,
        frame_length: int = FRAME_LENGTH,
        expected_rate: int | None = None,
        loop: bool = False,
        full_scale: float = FULL_SCALE_24BIT,
    ):
        self.path = Path(path)
        try:
            rate, data = wavfile.read(self.path)
        except (OSError, ValueError) as e:
            raise AudioSourceError(f"Cannot read {self.path}: {e}") from e

        if expected_rate is not None and rate != expected_rate:
            raise ConfigError(
                f"{self.path.name} is sampled at {rate} Hz, configuration expects {expected_rate} Hz"
            )

        if data.dtype == np.uint8:
            data = data.astype(np.int16) - 128
            scale = self._FULL_SCALE[np.dtype(np.uint8)]
        else:
            scale = self._FULL_SCALE.get(data.dtype, full_scale)

        logger.info(f"Loaded {self.path.name}: {len(data)} samples at {rate} Hz")
        super().__init__(
            data,
            sample_rate=rate,
            frame_length=frame_length,
            loop=loop,
            full_scale=scale,
        )


class SoundDeviceSource(AudioSource):
    """
    Live microphone input through ``sounddevice``.

    Reads use the blocking stream API so that exactly one frame is captured
    per pipeline pass. Samples arrive as normalized float32.
    """

    def __init__(
        self,
        device: int | None = None,
        sample_rate: int = SAMPLE_RATE,
        frame_length: int = FRAME_LENGTH,
    ):
        import sounddevice as sd

        self._sd = sd
        self._sample_rate = sample_rate
        self._frame_length = frame_length
        try:
            self._stream = sd.InputStream(
                device=device,
                samplerate=sample_rate,
                blocksize=frame_length,
                channels=1,
                dtype="float32",
            )
            self._stream.start()
        except sd.PortAudioError as e:
            raise AudioSourceError(f"Cannot open input device {device}: {e}") from e
        logger.info(f"Listening on device {device if device is not None else 'default'}")

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frame_length(self) -> int:
        return self._frame_length

    def read(self) -> np.ndarray:
        try:
            data, overflowed = self._stream.read(self._frame_length)
        except self._sd.PortAudioError as e:
            raise AudioSourceError(f"Audio read failed: {e}") from e
        if overflowed:
            raise AudioSourceError("Input overflow, frame discarded")
        return normalize_samples(data)

    def close(self):
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None


def list_input_devices() -> list[tuple[int, str]]:
    """(index, name) for every device with input channels."""
    import sounddevice as sd

    return [
        (i, device["name"])
        for i, device in enumerate(sd.query_devices())
        if device["max_input_channels"] > 0
    ]
