"""
Description:
Extract structured fields from model output, using regex patterns when the output is not valid JSON.

Arguments:
- content: The text content from which to extract fields.

Returns:
- Dictionaries with the fields that could be recovered; missing fields are absent.

Dependencies:
- interview_assistant.constants.regex_patterns: For accessing precompiled regex patterns.
- interview_assistant.helper.clean_ai_response: For stripping reasoning text around the JSON.
- json: Python's built-in JSON module.
"""
import json
from typing import Any, Dict, List
from loguru import logger
from interview_assistant.constants.regex_patterns import REGEX_PATTERNS
from interview_assistant.helper.clean_ai_response import clean_ai_response

def parse_json_object(content: str) -> Dict[str, Any]:
    """Parse model output as a JSON object, raising ValueError if it is not one."""
    data = json.loads(clean_ai_response(content or ""))
    if not isinstance(data, dict):
        raise ValueError("Model output is not a JSON object")
    return data

def _extract_str(pattern: str, text: str):
    match = REGEX_PATTERNS[pattern].search(text)
    if match:
        return match.group(1).strip()
    return None

# Extract evaluation fields from the content, falling back to regex patterns
def extract_evaluation_fields(content: str) -> Dict[str, Any]:
    try:
        data = parse_json_object(content)
        return {key: data[key] for key in ("score", "summary") if key in data}
    except ValueError:
        logger.warning("Evaluation output is not valid JSON, falling back to regex extraction")
        fields: Dict[str, Any] = {}
        score = _extract_str('score', content or "")
        if score is not None:
            fields["score"] = float(score)
        summary = _extract_str('summary', content or "")
        if summary:
            fields["summary"] = summary
        return fields

# Extract question fields from the content, falling back to regex patterns
def extract_question_fields(content: str) -> Dict[str, Any]:
    try:
        data = parse_json_object(content)
        return {key: data[key] for key in ("questionText", "questionType") if key in data}
    except ValueError:
        logger.warning("Question output is not valid JSON, falling back to regex extraction")
        fields: Dict[str, Any] = {}
        for key in ("questionText", "questionType"):
            value = _extract_str(key, content or "")
            if value:
                fields[key] = value
        return fields

# Extract per-segment sentiment labels, falling back to regex patterns
def extract_sentiment_labels(content: str) -> List[str]:
    try:
        data = parse_json_object(content)
        labels = data.get("sentiments", [])
    except ValueError:
        match = REGEX_PATTERNS['sentiments'].search(content or "")
        labels = [item.strip().strip('"\'') for item in match.group(1).split(',')] if match else []
    if not isinstance(labels, list):
        return []
    return [str(label).strip().upper() for label in labels if str(label).strip()]
