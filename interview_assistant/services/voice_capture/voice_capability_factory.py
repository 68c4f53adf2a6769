"""
Selects the voice capability for a new session from what the client reported.
"""

from typing import Optional

from loguru import logger

from interview_assistant.services.transcription.transcriber import TranscriberService, get_transcriber_service
from .chunk_audio_recorder import ChunkAudioRecorder
from .voice_capability import LiveVoiceCapability, UnavailableVoiceCapability, VoiceCapability
from .whisper_speech_recognizer import WhisperSpeechRecognizer


def select_voice_capability(voice_supported: bool, transcriber: Optional[TranscriberService] = None) -> VoiceCapability:
    if not voice_supported:
        logger.info("Client cannot record audio; voice input disabled for this session")
        return UnavailableVoiceCapability()
    transcriber = transcriber or get_transcriber_service()
    return LiveVoiceCapability(
        recognizer_factory=lambda: WhisperSpeechRecognizer(transcriber),
        recorder_factory=ChunkAudioRecorder,
    )
