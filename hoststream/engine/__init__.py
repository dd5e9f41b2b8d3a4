from .encoder import build_payload, encode_frame, payload_from_reading
from .sampling_loop import SamplingLoop, Sender, SessionState

__all__ = [
    "build_payload",
    "encode_frame",
    "payload_from_reading",
    "SamplingLoop",
    "Sender",
    "SessionState",
]
