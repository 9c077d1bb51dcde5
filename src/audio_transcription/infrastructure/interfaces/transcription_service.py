"""Abstract interface for transcription service operations."""

from abc import ABC, abstractmethod

from audio_transcription.domain.models import TranscriptionResponse


class TranscriptionService(ABC):
    """Abstract base class for speech-to-text backends."""

    @abstractmethod
    def transcribe_audio(self, audio_url: str) -> TranscriptionResponse:
        """
        Transcribes the audio reachable at a URL.

        Args:
            audio_url: A publicly fetchable URL of the audio file.

        Returns:
            The successful API response.

        Raises:
            TranscriptionError: On network/timeout errors, non-success HTTP
                status, or a response that reports failure.
        """
        pass
