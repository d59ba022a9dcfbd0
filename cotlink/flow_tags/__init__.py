from .flow_decision import FlowDecision as FlowDecision
from .flow_tag_context import (
    FlowTagContext as FlowTagContext,
    get_flow_context as get_flow_context,
    init_flow_context as init_flow_context,
    teardown_flow_context as teardown_flow_context,
)
from .flow_tag_relay import FlowTagRelay as FlowTagRelay
from .message_skipped import MessageSkipped as MessageSkipped
from .registry_pruner import (
    DEFAULT_PRUNE_INTERVAL as DEFAULT_PRUNE_INTERVAL,
    DEFAULT_PRUNE_THRESHOLD as DEFAULT_PRUNE_THRESHOLD,
    RegistryPruner as RegistryPruner,
)
from .seen_message_registry import SeenMessageRegistry as SeenMessageRegistry
from .sequence_counter import SequenceCounter as SequenceCounter
