"""
Secure Prompt Manager Module

This module provides a secure way to manage AI prompts by isolating them from user data
to prevent injection attacks. It implements a template-based system with explicit
placeholders and comprehensive sanitization.

The module contains:
- PromptTemplate: A dataclass for secure prompt templates with placeholders
- SecurePromptManager: Templates for question generation, transcript evaluation
  and answer sentiment
- sanitize_text: Utility function for text sanitization

Dependencies:
- dataclasses: For template data structures
- typing: For type hints
- re: For regex-based sanitization
- html: For HTML entity encoding
"""

from typing import Dict, List
from dataclasses import dataclass
import re
import html
import logging
from interview_assistant.schemas.collaborator_schemas import EvaluationRequest, QuestionGenerationRequest
from interview_assistant.schemas.session_schemas import VocalAnalysis

logger = logging.getLogger(__name__)

NO_ANSWER_TEXT = "(no answer)"

def sanitize_text(text: str, max_length: int = 1000, escape_html: bool = True) -> str:
    """
    Sanitize text input to prevent injection attacks and ensure data safety.
    
    Args:
        text (str): The text to sanitize
        max_length (int): Maximum allowed length (default: 1000)
        escape_html (bool): Whether to HTML escape the text (default: True)
        
    Returns:
        str: The sanitized text
        
    Raises:
        ValueError: If text is None or empty after sanitization
    """
    if text is None:
        raise ValueError("Text cannot be None")
    
    text = str(text)
    
    if escape_html:
        text = html.escape(text)
    
    text = text.strip()
    
    # Remove null bytes and other control characters (except newlines and tabs)
    text = re.sub(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]', '', text)
    
    if len(text) > max_length:
        text = text[:max_length]
        logger.warning(f"Text truncated to {max_length} characters for security")
    
    text = text.encode('utf-8', errors='ignore').decode('utf-8')
    
    if not text:
        raise ValueError("Text cannot be empty after sanitization")
    
    return text

def describe_vocal_analysis(analysis: VocalAnalysis) -> str:
    """One-line summary of delivery metrics for the evaluator."""
    fillers = f" ({', '.join(analysis.fillerWords)})" if analysis.fillerWords else ""
    return (
        f"[Vocal Analysis: Sentiment: {analysis.sentiment.value}, "
        f"Confidence: {round(analysis.confidence * 100)}%, "
        f"Filler Words: {analysis.fillerWordCount}{fillers}]"
    )

@dataclass
class PromptTemplate:
    """Secure prompt template with placeholders for safe data injection."""
    template: str
    placeholders: Dict[str, str]
    sanitization_config: Dict[str, Dict] = None  # Per-placeholder sanitization config
    
    def render(self, **kwargs) -> str:
        """
        Safely render the template with provided data.
        
        Raises:
            ValueError: If required placeholders are missing or data is invalid
        """
        missing_placeholders = set(self.placeholders.keys()) - set(kwargs.keys())
        if missing_placeholders:
            raise ValueError(f"Missing required placeholders: {missing_placeholders}")
        
        sanitized_data = {}
        for key, value in kwargs.items():
            if key in self.placeholders:
                config = self.sanitization_config.get(key, {}) if self.sanitization_config else {}
                max_length = config.get('max_length', 1000)
                escape_html = config.get('escape_html', True)
                
                sanitized_data[key] = sanitize_text(str(value), max_length=max_length, escape_html=escape_html)
            else:
                # Skip unknown keys to prevent injection
                logger.warning(f"Unknown placeholder key: {key}")
        
        try:
            return self.template.format(**sanitized_data)
        except KeyError as e:
            raise ValueError(f"Template rendering error: {e}") from e

class SecurePromptManager:
    """
    Secure prompt manager that isolates prompts from user data to prevent injection attacks.
    
    Candidate-provided text (answers, spoken segments) only ever reaches the
    model through sanitized placeholders.
    """
    
    def __init__(self):
        self._templates = self._initialize_templates()
    
    def _initialize_templates(self) -> Dict[str, PromptTemplate]:
        """Initialize secure prompt templates with explicit placeholders."""
        return {
            "question_generation": PromptTemplate(
                template="""You are an interviewer screening candidates for a Full Stack (React/Node.js) developer role.

Generate one {difficulty} interview question. The candidate has {time_limit} seconds to answer, so the
question must be answerable in that time. Use "conceptual" when the answer is expected to be verbal and
"problem-solving" when it requires typing code or a detailed written explanation.

Return ONLY valid JSON with this exact structure - no markdown, no explanation:
{{
  "questionText": "The question to ask",
  "questionType": "conceptual" | "problem-solving"
}}""",
                placeholders={
                    "difficulty": "Easy, Medium or Hard",
                    "time_limit": "Seconds available to answer",
                }
            ),
            "evaluation": PromptTemplate(
                template="""You are evaluating a technical screening interview for a Full Stack (React/Node.js) developer role.

Below is the full transcript. Some answers include a vocal analysis of how they were spoken; use it
as a secondary signal about communication, never as a substitute for technical content.

<transcript>
{transcript}
</transcript>

Score the candidate out of 100 on technical accuracy, depth and clarity of communication, and write a
summary of 3-4 sentences covering strengths and the most important gap.

Return ONLY valid JSON with this exact structure - no markdown, no explanation:
{{
  "score": 72,
  "summary": "Three to four sentence summary"
}}""",
                placeholders={
                    "transcript": "Question and answer pairs of the interview",
                },
                sanitization_config={
                    "transcript": {
                        "max_length": 30000,
                        "escape_html": False  # answers are sanitized one by one when the transcript is built
                    }
                }
            ),
            "sentiment_analysis": PromptTemplate(
                template="""Classify the sentiment of each numbered segment of a spoken interview answer as
POSITIVE, NEGATIVE or NEUTRAL. Judge the speaker's tone and confidence, not the topic.

<segments>
{segments}
</segments>

Return ONLY valid JSON with one label per segment, in order:
{{
  "sentiments": ["NEUTRAL", "POSITIVE"]
}}""",
                placeholders={
                    "segments": "Numbered transcript segments",
                },
                sanitization_config={
                    "segments": {
                        "max_length": 10000,
                        "escape_html": False  # segments are sanitized one by one
                    }
                }
            ),
        }
    
    def get_question_generation_prompt(self, request: QuestionGenerationRequest) -> str:
        template = self._templates["question_generation"]
        return template.render(
            difficulty=request.difficulty.value,
            time_limit=request.timeLimitSeconds,
        )
    
    def get_evaluation_prompt(self, request: EvaluationRequest) -> str:
        """
        Get a secure evaluation prompt for a full interview transcript.
        
        Args:
            request: The ordered transcript
            
        Returns:
            str: Secure prompt with sanitized data
        """
        lines = []
        for number, entry in enumerate(request.transcript, start=1):
            answer = sanitize_text(entry.answerText, max_length=4000) if entry.answerText.strip() else NO_ANSWER_TEXT
            lines.append(f"Q{number}: {sanitize_text(entry.questionText)}")
            lines.append(f"A{number}: {answer}")
            if entry.analysis is not None:
                lines.append(describe_vocal_analysis(entry.analysis))
        template = self._templates["evaluation"]
        return template.render(transcript="\n".join(lines))
    
    def get_sentiment_prompt(self, segments: List[str]) -> str:
        numbered = "\n".join(
            f"{number}. {sanitize_text(segment, max_length=1000)}"
            for number, segment in enumerate(segments, start=1)
        )
        template = self._templates["sentiment_analysis"]
        return template.render(segments=numbered)


# Global instance for reuse across the application
secure_prompt_manager = SecurePromptManager()
