"""
Description:
Fixed parameters of an interview session: the round ladder, the bot's scripted
messages and the voice capture thresholds.

Dependencies:
- typing: For type annotations.
"""
from typing import NamedTuple, Tuple


class Rung(NamedTuple):
    difficulty: str
    time_limit_seconds: int


# Six rounds, two per difficulty.
QUESTION_LADDER: Tuple[Rung, ...] = (
    Rung("Easy", 60),
    Rung("Easy", 60),
    Rung("Medium", 120),
    Rung("Medium", 120),
    Rung("Hard", 240),
    Rung("Hard", 240),
)
TOTAL_QUESTIONS = len(QUESTION_LADDER)

DETAIL_FIELDS: Tuple[str, ...] = ("name", "email", "phone")

# Audio smaller than this is treated as containing no speech.
MIN_SPEECH_BYTES = 1000

TICK_SECONDS = 1.0
COMPLETION_RESET_SECONDS = 5.0

PERSISTENCE_ROOT_KEY = "root"

TIMEOUT_ANSWER_TEXT = "No answer provided within the time limit."
GREETING_MESSAGE = "Hello! Thanks for uploading your resume."
MISSING_DETAIL_MESSAGE = "I couldn't find your {field}. Could you please provide it?"
DETAILS_CONFIRMED_MESSAGE = "Great, I have all your details. Let's begin the interview."
GENERATION_FAILURE_MESSAGE = "Sorry, an error occurred: {reason}. Please try again later."
FINAL_SCORE_MESSAGE = "**Final Score: {score}/100**"
EVALUATION_FAILURE_MESSAGE = "Sorry, an error occurred during evaluation: {reason}."
AUDIO_ANALYSIS_FAILURE_MESSAGE = "Could not analyze audio. Your answer was recorded without vocal analysis."
REHYDRATION_NOTICE = "Your previous session could not be restored. A new session has been started."
VOICE_PERMISSION_DENIED_NOTICE = "Microphone access denied. Voice input is disabled for this session, you can keep typing your answers."
VOICE_STOPPED_NOTICE = "Voice input stopped unexpectedly. You can type your answer instead."
VOICE_UNAVAILABLE_NOTICE = "Voice input is not available for this session."
