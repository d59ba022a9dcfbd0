DEFAULT_TCP_PORT = 8087
DEFAULT_TLS_PORT = 8089
DEFAULT_UDP_PORT = 8087

DEFAULT_MULTICAST_ADDRESS = "239.2.3.1"
DEFAULT_MULTICAST_PORT = 6969


# Single read size for stream transports. No framing is done, so larger
# messages arrive split across reads.
MAX_STREAM_CHUNK = 8192
MAX_DATAGRAM_SIZE = 65535

# How long has_pending_data() waits for bytes before reporting none.
PENDING_DATA_POLL = 0.001
