from .cancellation_context import CancellationContext as CancellationContext
