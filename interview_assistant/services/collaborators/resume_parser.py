"""
Resume Parser Service Module

Extracts a candidate's name, email and phone from an uploaded resume through
the APILayer resume parser. Failures never reach the caller: they produce
empty details and the session asks for the fields instead.

Dependencies:
- httpx: For the upload request.
- loguru: For logging operations.
"""

import mimetypes
import os
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from interview_assistant.schemas.session_schemas import CandidateDetails

RESUME_PARSER_URL = "https://api.apilayer.com/resume_parser/upload"


def details_from_payload(payload: Dict[str, Any]) -> CandidateDetails:
    """Map the parser's response onto candidate details, blank values become None."""
    def pick(key: str) -> Optional[str]:
        value = payload.get(key)
        if isinstance(value, list):
            value = value[0] if value else None
        value = str(value).strip() if value is not None else ""
        return value or None

    return CandidateDetails(name=pick("name"), email=pick("email"), phone=pick("phone"))


class ApiLayerResumeParser:
    def __init__(self, api_key: Optional[str] = None, url: str = RESUME_PARSER_URL, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key if api_key is not None else os.getenv("APILAYER_API_KEY")
        self.url = url
        self.transport = transport

    async def parse(self, document: bytes, filename: str = "resume.pdf") -> CandidateDetails:
        if not self.api_key:
            logger.warning("APILAYER_API_KEY not set - resume details will be collected in chat")
            return CandidateDetails()
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=None) as client:
                response = await client.post(
                    self.url,
                    headers={"apikey": self.api_key, "Content-Type": mimetypes.guess_type(filename)[0] or "application/octet-stream"},
                    content=document,
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Resume parsing failed for {filename}: {e}")
            return CandidateDetails()
        details = details_from_payload(payload if isinstance(payload, dict) else {})
        logger.info(f"Parsed resume {filename}; missing fields: {details.missing_fields()}")
        return details
