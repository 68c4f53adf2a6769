from .voice_capability import (
    AudioRecorder,
    LiveVoiceCapability,
    SpeechRecognizer,
    UnavailableVoiceCapability,
    VoiceCapability,
    VoiceProducers,
)
from .chunk_audio_recorder import ChunkAudioRecorder
from .whisper_speech_recognizer import WhisperSpeechRecognizer
from .voice_capability_factory import select_voice_capability

__all__ = [
    "AudioRecorder",
    "LiveVoiceCapability",
    "SpeechRecognizer",
    "UnavailableVoiceCapability",
    "VoiceCapability",
    "VoiceProducers",
    "ChunkAudioRecorder",
    "WhisperSpeechRecognizer",
    "select_voice_capability",
]
