from .context import CancellationContext as CancellationContext
from .env import Env as Env, load_env as load_env
from .flow_tags import (
    FlowDecision as FlowDecision,
    init_flow_context as init_flow_context,
    teardown_flow_context as teardown_flow_context,
)
from .transport import (
    ConnectionConfig as ConnectionConfig,
    ConnectionType as ConnectionType,
    MessageSkipped as MessageSkipped,
    Transport as Transport,
    create_transport as create_transport,
)
