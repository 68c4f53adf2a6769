"""
AI Client Manager

This module manages separate AI client instances for the interview collaborators
(question generation, evaluation, audio sentiment analysis) so that a slow
evaluation call never queues behind question generation. Clients point at an
OpenAI-compatible endpoint, OpenRouter unless OPENROUTER_BASE_URL says otherwise.
"""

import os
from openai import AsyncOpenAI
import logging
import threading
from typing import Dict, Optional
from dotenv import load_dotenv

# Ensure .env is loaded
load_dotenv()

logger = logging.getLogger(__name__)

# Model per service, overridable through the named environment variable
SERVICE_MODELS = {
    "question_generation": ("QUESTION_MODEL", "openai/gpt-4o"),
    "evaluation": ("EVALUATION_MODEL", "openai/gpt-4o"),
    "audio_analysis": ("SENTIMENT_MODEL", "openai/gpt-4o-mini"),
}
SERVICE_TYPES = tuple(SERVICE_MODELS)

class AIClientManager:
    """
    Manages dedicated AI client instances for different services.
    
    Creates one AsyncOpenAI client per collaborator on first use.
    """
    
    def __init__(self):
        self._clients: Dict[str, AsyncOpenAI] = {}
        self._initialized = False
        self._lock = threading.Lock()
    
    def _initialize_clients(self):
        """Lazy initialization of client instances."""
        if self._initialized:
            return
            
        with self._lock:
            # Double-check locking for initialization
            if self._initialized:
                return
                
            api_key = os.getenv("OPENROUTER_API_KEY")
            if not api_key:
                if os.getenv("ENV") == "test":
                    logger.warning("OPENROUTER_API_KEY not set - AI clients unavailable in test mode")
                    return
                raise RuntimeError(
                    "OPENROUTER_API_KEY environment variable is not set. "
                    "Please set it in your .env file or environment variables."
                )
            
            base_url = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
            
            try:
                self._clients = {
                    service_type: AsyncOpenAI(base_url=base_url, api_key=api_key)
                    for service_type in SERVICE_TYPES
                }
                self._initialized = True
                logger.info(f"Initialized {len(self._clients)} dedicated AI client instances")
                
            except Exception as e:
                logger.error(f"Failed to initialize AI clients: {e}")
                raise RuntimeError(f"Failed to initialize AI clients: {e}") from e
    
    def get_client(self, service_type: str) -> AsyncOpenAI:
        """
        Get a dedicated client for the specified service type.
        
        Args:
            service_type (str): One of "question_generation", "evaluation", "audio_analysis"
                              
        Returns:
            AsyncOpenAI: Dedicated client instance for the service
            
        Raises:
            ValueError: If service_type is not supported
            RuntimeError: If clients failed to initialize
        """
        if service_type not in SERVICE_TYPES:
            raise ValueError(f"Unsupported service type: {service_type}. Available: {list(SERVICE_TYPES)}")

        # Lazy initialization on first access
        self._initialize_clients()
        
        if not self._initialized:
            raise RuntimeError("AI clients failed to initialize properly")
        
        return self._clients[service_type]

def get_model(service_type: str) -> str:
    """Model name used by a service type."""
    env_var, default = SERVICE_MODELS[service_type]
    return os.getenv(env_var, default)

# Lazy initialization - no eager instantiation
_ai_manager: Optional[AIClientManager] = None
_manager_lock = threading.Lock()

def get_ai_client_manager() -> AIClientManager:
    """
    Get the singleton AIClientManager instance with lazy initialization.
    
    Returns:
        AIClientManager: The singleton instance
    """
    global _ai_manager
    
    if _ai_manager is None:
        with _manager_lock:
            # Double-check locking pattern
            if _ai_manager is None:
                _ai_manager = AIClientManager()
    
    return _ai_manager

def get_question_generation_client() -> AsyncOpenAI:
    """Get dedicated client for question generation."""
    return get_ai_client_manager().get_client("question_generation")

def get_evaluation_client() -> AsyncOpenAI:
    """Get dedicated client for transcript evaluation."""
    return get_ai_client_manager().get_client("evaluation")

def get_audio_analysis_client() -> AsyncOpenAI:
    """Get dedicated client for answer sentiment analysis."""
    return get_ai_client_manager().get_client("audio_analysis")
