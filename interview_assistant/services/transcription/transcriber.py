"""
Description:
This module provides functionality to transcribe recorded audio using the Faster Whisper model.
Calls are blocking, including the first one, which loads the model; async callers
run them with asyncio.to_thread. The app lifespan warms the model off the event loop.

Dependencies:
- faster-whisper: For audio transcription.
- tempfile: For creating temporary files.
"""
from dataclasses import dataclass, field
from typing import List, Optional
from faster_whisper import WhisperModel
import tempfile
from loguru import logger
import os
import threading

_model = None
_model_lock = threading.Lock()

@dataclass
class TranscribedWord:
    text: str
    probability: float

@dataclass
class TranscriptionResult:
    text: str
    segments: List[str] = field(default_factory=list)
    words: List[TranscribedWord] = field(default_factory=list)

def load_whisper_model() -> WhisperModel:
    """
    Initializes and returns the shared WhisperModel instance.
    The model is loaded (and downloaded if needed) only once and reused for subsequent calls.

    Returns:
        WhisperModel: An instance of the WhisperModel configured for transcription.
    """
    global _model
    if _model is None:
        with _model_lock:
            if _model is None:
                model_name = os.getenv("WHISPER_MODEL", "base.en")
                logger.info(f"Loading whisper model {model_name}")
                _model = WhisperModel(model_name, device="cpu", compute_type="int8", num_workers=1, cpu_threads=4)
    return _model

class TranscriberService:
    def __init__(self, model: Optional[WhisperModel] = None):
        self._model = model

    @property
    def model(self) -> WhisperModel:
        # Resolved on first transcription, which runs in a worker thread
        if self._model is None:
            self._model = load_whisper_model()
        return self._model
    
    def transcribe_bytes(
        self,
        audio_bytes: bytes,
        word_timestamps: bool = False,
        initial_prompt: Optional[str] = None,
    ) -> TranscriptionResult:
        """
        Transcribes recorded audio (WebM/Opus from the browser recorder) to text.
        
        Args:
            audio_bytes (bytes): Raw audio data
            word_timestamps (bool): Also return per-word probabilities
            initial_prompt (str): Prompt that biases the decoder, e.g. to keep disfluencies
            
        Returns:
            TranscriptionResult: Joined text, per-segment text and, when requested, words
        """
        logger.debug(f"Transcribing audio data, size: {len(audio_bytes)} bytes")
        temp_path = None
        try:
            # Use .webm extension for WebM/Opus format
            with tempfile.NamedTemporaryFile(delete=False, suffix=".webm") as temp_audio:
                temp_audio.write(audio_bytes)
                temp_path = temp_audio.name
            
            segments, _ = self.model.transcribe(
                temp_path,
                beam_size=5,
                best_of=1,
                temperature=0,
                vad_filter=True,
                word_timestamps=word_timestamps,
                condition_on_previous_text=False,
                initial_prompt=initial_prompt,
            )
            
            result = TranscriptionResult(text="")
            for seg in segments:
                result.segments.append(seg.text.strip())
                for word in seg.words or []:
                    result.words.append(TranscribedWord(text=word.word.strip(), probability=word.probability))
            result.text = " ".join(text for text in result.segments if text)
            return result
            
        except Exception as e:
            logger.error(f"Error transcribing audio: {str(e)}")
            raise
        finally:
            if temp_path is not None:
                try:
                    os.unlink(temp_path)
                except OSError as e:
                    logger.warning(f"Error removing temporary file {temp_path}: {str(e)}")

_transcriber: Optional[TranscriberService] = None

def get_transcriber_service() -> TranscriberService:
    """Shared transcriber. Constructing it does not load the model."""
    global _transcriber
    if _transcriber is None:
        _transcriber = TranscriberService()
    return _transcriber
