from .group_socket import open_group_socket as open_group_socket
from .interface_selector import select_multicast_interface as select_multicast_interface
from .multicast_interface import MulticastInterface as MulticastInterface
from .multicast_transport import MulticastTransport as MulticastTransport
