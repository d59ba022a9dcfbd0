from .flow_decision import FlowDecision


class MessageSkipped(Exception):
    """
    Raised by multicast ``receive()`` when flow tag rules withhold a
    datagram. Not a failure: callers reading in a loop should catch it
    and keep receiving.
    """

    def __init__(
        self,
        reason: FlowDecision,
        origin: str,
        sequence: int,
    ) -> None:
        super().__init__(
            f"Message skipped due to flow tag rules ({reason.value}) - origin={origin} sequence={sequence}"
        )

        self.reason = reason
        self.origin = origin
        self.sequence = sequence
