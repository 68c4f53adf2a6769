"""
Description:
Strip reasoning text some models emit around their JSON answer.

Arguments:
- content: Raw model output.

Returns:
- The first complete JSON object found in the content, or the stripped content if there is none.

Dependencies:
- re: Python's built-in regular expression module for pattern matching.
- loguru: For logging.
"""
import re
from loguru import logger

def clean_ai_response(content: str) -> str:
    if not content or not isinstance(content, str):
        return content
    original_length = len(content)

    # Remove thinking tags and their content
    content = re.sub(r'<think>.*?</think>', '', content, flags=re.DOTALL | re.IGNORECASE)
    content = re.sub(r'</?think[^>]*>', '', content, flags=re.IGNORECASE)
    # Markdown code fences
    content = re.sub(r'```(?:json)?', '', content, flags=re.IGNORECASE).strip()

    # Extract the first complete JSON object
    json_start = content.find('{')
    if json_start != -1:
        brace_count = 0
        for i in range(json_start, len(content)):
            if content[i] == '{':
                brace_count += 1
            elif content[i] == '}':
                brace_count -= 1
                if brace_count == 0:
                    content = content[json_start:i + 1]
                    break

    if len(content) != original_length:
        logger.debug(f"AI response cleaned: {original_length} -> {len(content)} chars")
    return content
