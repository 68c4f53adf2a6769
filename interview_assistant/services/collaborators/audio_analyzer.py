"""
Audio Analyzer Service Module

Derives delivery metrics from a recorded answer: transcription confidence,
filler words and an overall sentiment. Transcription runs on faster-whisper
with word timestamps; sentiment is classified per segment by a chat model and
reduced to one label by majority vote.

Dependencies:
- faster-whisper (through TranscriberService): For word-level transcription.
- openai: For per-segment sentiment.
- loguru: For logging operations.
"""

import asyncio
import time
from collections import Counter
from typing import Iterable, List, Optional

from loguru import logger
from openai import AsyncOpenAI

from interview_assistant.constants.regex_patterns import FILLER_WORD_PATTERN, WORD_PUNCTUATION_PATTERN
from interview_assistant.core.ai_client_manager import get_audio_analysis_client, get_model
from interview_assistant.core.secure_prompt_manager import secure_prompt_manager
from interview_assistant.errors.exceptions import AudioAnalysisFailure
from interview_assistant.helper.extract_regex_fields import extract_sentiment_labels
from interview_assistant.schemas.session_schemas import Sentiment, VocalAnalysis
from interview_assistant.services.transcription.transcriber import TranscriberService, get_transcriber_service

# Whisper drops disfluencies unless the prompt contains some
FILLER_PRESERVING_PROMPT = "Umm, let me think, uh... hmm. Okay, so, um, here's what I'd do."

# Tie-break order for the majority vote, most preferred first
SENTIMENT_PRIORITY = (Sentiment.NEUTRAL, Sentiment.POSITIVE, Sentiment.NEGATIVE)


def detect_filler_words(words: Iterable[str]) -> List[str]:
    """Filler words in spoken order, normalized to lower case without punctuation."""
    fillers = []
    for word in words:
        token = WORD_PUNCTUATION_PATTERN.sub("", word).lower()
        if token and FILLER_WORD_PATTERN.match(token):
            fillers.append(token)
    return fillers


def aggregate_sentiment(labels: Iterable[Sentiment]) -> Sentiment:
    """Majority vote over segment labels; ties go to NEUTRAL, then POSITIVE."""
    counts = Counter(labels)
    if not counts:
        return Sentiment.NEUTRAL
    return max(SENTIMENT_PRIORITY, key=lambda label: (counts[label], -SENTIMENT_PRIORITY.index(label)))


class WhisperAudioAnalyzer:
    def __init__(
        self,
        transcriber: Optional[TranscriberService] = None,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
    ):
        self._transcriber = transcriber
        self._client = client
        self.model = model or get_model("audio_analysis")

    @property
    def transcriber(self) -> TranscriberService:
        if self._transcriber is None:
            self._transcriber = get_transcriber_service()
        return self._transcriber

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = get_audio_analysis_client()
        return self._client

    async def analyze(self, audio: bytes) -> VocalAnalysis:
        """
        Analyze a recorded answer.

        Args:
            audio (bytes): The complete recording.

        Returns:
            VocalAnalysis: Sentiment, confidence, filler word count and filler words.

        Raises:
            AudioAnalysisFailure: If the audio cannot be transcribed or contains no words.
        """
        start_time = time.time()
        try:
            result = await asyncio.to_thread(
                self.transcriber.transcribe_bytes, audio, True, FILLER_PRESERVING_PROMPT
            )
        except Exception as e:
            raise AudioAnalysisFailure(f"Failed to transcribe audio: {e}") from e
        if not result.words:
            raise AudioAnalysisFailure("No speech detected in the recording")

        probabilities = [word.probability for word in result.words]
        confidence = min(max(sum(probabilities) / len(probabilities), 0.0), 1.0)
        fillers = detect_filler_words(word.text for word in result.words)
        sentiment = await self._classify_sentiment(result.segments)

        logger.info(
            f"Audio analyzed in {time.time() - start_time:.3f}s: {len(result.words)} words, "
            f"{len(fillers)} fillers, sentiment {sentiment.value}"
        )
        return VocalAnalysis(
            sentiment=sentiment,
            confidence=confidence,
            fillerWordCount=len(fillers),
            fillerWords=fillers,
        )

    async def _classify_sentiment(self, segments: List[str]) -> Sentiment:
        segments = [segment for segment in segments if segment.strip()]
        if not segments:
            return Sentiment.NEUTRAL
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                max_tokens=200,
                temperature=0,
                response_format={"type": "json_object"},
                messages=[{"role": "user", "content": secure_prompt_manager.get_sentiment_prompt(segments)}],
            )
            content = response.choices[0].message.content if response.choices else ""
        except Exception as e:
            logger.warning(f"Sentiment classification failed, defaulting to NEUTRAL: {e}")
            return Sentiment.NEUTRAL
        labels = [Sentiment(label) for label in extract_sentiment_labels(content or "") if label in Sentiment.__members__]
        return aggregate_sentiment(labels)
