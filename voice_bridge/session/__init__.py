from .handle import SessionHandle
from .audio_buffer import AudioSink, AudioJitterBuffer

__all__ = ["AudioJitterBuffer", "AudioSink", "SessionHandle"]
