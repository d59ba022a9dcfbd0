from enum import Enum


class FlowDecision(Enum):
    PROCESS = "process"
    PASS_THROUGH = "pass_through"
    SELF_ORIGINATED = "self_originated"
    DUPLICATE = "duplicate"

    @property
    def suppressed(self) -> bool:
        return self in (
            FlowDecision.SELF_ORIGINATED,
            FlowDecision.DUPLICATE,
        )
