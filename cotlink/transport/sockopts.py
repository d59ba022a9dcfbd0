import socket


def apply_keep_alive(
    sock: socket.socket,
    interval: int | float | None,
):
    if not interval:
        return

    seconds = max(int(interval), 1)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)

    if hasattr(socket, "TCP_KEEPIDLE"):
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, seconds)

    elif hasattr(socket, "TCP_KEEPALIVE"):
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPALIVE, seconds)

    if hasattr(socket, "TCP_KEEPINTVL"):
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, seconds)


def apply_tcp_user_timeout(
    sock: socket.socket,
    timeout: int | float | None,
) -> bool:
    """
    Set TCP_USER_TIMEOUT so the kernel drops the connection once sent data
    stays unacknowledged for ``timeout`` seconds. Only Linux exposes the
    option; elsewhere this does nothing and returns ``False``.
    """
    if not timeout or not hasattr(socket, "TCP_USER_TIMEOUT"):
        return False

    sock.setsockopt(
        socket.IPPROTO_TCP,
        socket.TCP_USER_TIMEOUT,
        int(timeout * 1000),
    )

    return True
