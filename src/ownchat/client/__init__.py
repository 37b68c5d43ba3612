from .relay_client import RelayClient, RelayError, build_payload

__all__ = ["RelayClient", "RelayError", "build_payload"]
