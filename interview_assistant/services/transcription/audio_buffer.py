from collections import deque
import time
from typing import Optional
from loguru import logger

class IncrementalAudioBuffer:
    """
    Audio buffer for one live transcription stream. Accumulates raw chunks and
    tells the recognizer when enough NEW chunks arrived for another interim pass.
    """
    
    def __init__(self, incremental_size_threshold: int = 5, header: Optional[bytes] = None):
        self.chunks = deque()
        self.incremental_size_threshold = incremental_size_threshold
        # Container header of the recording, prepended when a stream starts mid-recording
        self.header = header
        self.last_chunk_time = None
        self.last_incremental_size = 0
        
    def add_chunk(self, chunk_data: bytes):
        """Add a chunk of raw audio."""
        self.chunks.append(chunk_data)
        self.last_chunk_time = time.time()
        
    def should_do_incremental_transcription(self) -> bool:
        """
        Determine if we should do incremental transcription.
        Only transcribe if we have accumulated enough NEW chunks.
        """
        current_size = len(self.chunks)
        return current_size >= self.last_incremental_size + self.incremental_size_threshold
            
    def mark_incremental_transcription_done(self, size: Optional[int] = None):
        """Mark that incremental transcription was done at the given (or current) size."""
        self.last_incremental_size = len(self.chunks) if size is None else size
        
    def get_audio_data(self) -> Optional[bytes]:
        """All audio of the stream so far, decodable on its own."""
        if not self.chunks:
            return None
        combined_data = b"".join(self.chunks)
        if self.header and not combined_data.startswith(self.header):
            combined_data = self.header + combined_data
        logger.debug(f"Combined {len(self.chunks)} chunks, {len(combined_data)} bytes")
        return combined_data
        
    def clear(self):
        """Clear all chunks and reset state."""
        self.chunks.clear()
        self.last_incremental_size = 0
        self.last_chunk_time = None
        
    def has_chunks(self) -> bool:
        """Check if there are any chunks in the buffer."""
        return bool(self.chunks)
