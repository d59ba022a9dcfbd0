import threading
import time
from typing import Callable

from cotlink.cot import FlowTags

from .sequence_counter import SequenceCounter


def _now_milliseconds() -> int:
    return time.time_ns() // 1_000_000


class FlowTagContext:
    """
    Process-wide state shared by every flow tag producer. All multicast
    transports in the process draw sequence numbers from the same counter.
    """

    def __init__(
        self,
        counter: SequenceCounter | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        if counter is None:
            counter = SequenceCounter()

        if clock is None:
            clock = _now_milliseconds

        self.counter = counter
        self._clock = clock

    def mint(self, client_id: str) -> FlowTags:
        return FlowTags(
            origin=client_id,
            sequence=self.counter.next(),
            created_at=self._clock(),
        )


_flow_context: FlowTagContext | None = None
_flow_context_lock = threading.Lock()


def init_flow_context(
    counter: SequenceCounter | None = None,
    clock: Callable[[], int] | None = None,
) -> FlowTagContext:
    global _flow_context

    with _flow_context_lock:
        if _flow_context is not None:
            raise RuntimeError("Err. - flow tag context is already initialized.")

        _flow_context = FlowTagContext(
            counter=counter,
            clock=clock,
        )

        return _flow_context


def get_flow_context() -> FlowTagContext:
    global _flow_context

    with _flow_context_lock:
        if _flow_context is None:
            _flow_context = FlowTagContext()

        return _flow_context


def teardown_flow_context():
    global _flow_context

    with _flow_context_lock:
        _flow_context = None
