"""Client for talking to a running relay."""

from chat_relay.client.relay_client import RelayClient, RelayReply, offline_reply

__all__ = ["RelayClient", "RelayReply", "offline_reply"]
