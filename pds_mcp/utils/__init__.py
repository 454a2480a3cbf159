from .get_endpoint import get_endpoint
from .response_utils import accept_header, decode_failure, decode_success

__all__ = ["get_endpoint", "accept_header", "decode_success", "decode_failure"]
