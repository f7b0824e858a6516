from .engine import SessionEngine
from .demux import InboundDemultiplexer
from .channel import SessionChannel
from .outbound import OutboundSequence

__all__ = ["InboundDemultiplexer", "OutboundSequence", "SessionChannel", "SessionEngine"]
