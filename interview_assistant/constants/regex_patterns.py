"""
Description: 
This module contains precompiled regex patterns for pulling fields out of
JSON-like model output and for spotting filler words in transcripts.

Dependencies:
- re: Python's built-in regular expression module for pattern matching.
"""

import re

# Compile regex patterns once for better performance
REGEX_PATTERNS = {
    'score': re.compile(r"[\"']score[\"']\s*:\s*(\d+(?:\.\d+)?)"),
    'summary': re.compile(r"[\"']summary[\"']\s*:\s*[\"'](.*?)[\"']\s*[,}]", re.DOTALL),
    'questionText': re.compile(r"[\"']questionText[\"']\s*:\s*[\"'](.*?)[\"']\s*[,}]", re.DOTALL),
    'questionType': re.compile(r"[\"']questionType[\"']\s*:\s*[\"'](conceptual|problem-solving)[\"']"),
    'sentiments': re.compile(r"[\"']sentiments[\"']\s*:\s*\[(.*?)\]", re.DOTALL),
}

# Single-token disfluencies; whisper emits them with trailing punctuation.
FILLER_WORD_PATTERN = re.compile(r"^(u+h+m*|u+m+|e+r+m*|a+h+|h+m+|m+h*m+)$", re.IGNORECASE)
WORD_PUNCTUATION_PATTERN = re.compile(r"[^\w'-]+")
