"""Client script utilities.

- env.py: server and key defaults
- network.py: ws url building
- files.py: audio decoding, chunking and sample discovery
"""

from __future__ import annotations

from .network import ws_url, append_auth_query
from .env import resolve_api_key, derive_default_server
from .files import (
    SAMPLES_DIR,
    write_pcm16_wav,
    find_sample_files,
    iter_pcm16_chunks,
    make_silence_pcm16,
    find_sample_by_name,
    file_duration_seconds,
    file_to_pcm16_mono_16k,
)

__all__ = [
    "SAMPLES_DIR",
    "append_auth_query",
    "derive_default_server",
    "file_duration_seconds",
    "file_to_pcm16_mono_16k",
    "find_sample_by_name",
    "find_sample_files",
    "iter_pcm16_chunks",
    "make_silence_pcm16",
    "resolve_api_key",
    "write_pcm16_wav",
    "ws_url",
]
