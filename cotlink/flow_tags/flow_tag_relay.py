from cotlink.cot import CoTParseError, CoTSerializeError, Event, FlowTags, XMLParser
from cotlink.logging import Logger

from .flow_decision import FlowDecision
from .flow_tag_context import FlowTagContext, get_flow_context
from .logging_models import FlowTagDebug, FlowTagTrace
from .seen_message_registry import SeenMessageRegistry


class FlowTagRelay:
    """
    Tags outgoing multicast messages and classifies incoming ones so that a
    mesh of peers neither reacts to its own broadcasts nor re-processes
    relayed copies of the same message.

    Payloads that do not parse as CoT events are passed through untouched
    in both directions and never reach the registry.
    """

    def __init__(
        self,
        client_id: str,
        registry: SeenMessageRegistry,
        parser: XMLParser | None = None,
        flow_context: FlowTagContext | None = None,
    ) -> None:
        if parser is None:
            parser = XMLParser()

        self.client_id = client_id
        self.registry = registry
        self._parser = parser
        self._flow_context = flow_context
        self._logger = Logger("flow_tags")

    @property
    def flow_context(self) -> FlowTagContext:
        if self._flow_context is None:
            return get_flow_context()

        return self._flow_context

    async def tag_outgoing(self, data: bytes) -> bytes:
        event = await self._parse(data)
        if event is None:
            return data

        flow_tags = event.detail.flow_tags

        if flow_tags is None:
            flow_tags = self.flow_context.mint(self.client_id)
            event.detail.flow_tags = flow_tags

            await self._log_debug(
                "Adding flow tags to outgoing message",
                origin=flow_tags.origin,
                sequence=flow_tags.sequence,
            )

        elif flow_tags.origin != self.client_id:
            flow_tags.add_hop(self.client_id)

            await self._log_debug(
                "Updating flow tags for forwarded message",
                origin=flow_tags.origin,
                sequence=flow_tags.sequence,
            )

        else:
            return data

        try:
            return self._parser.serialize(event)

        except CoTSerializeError as err:
            await self._log_debug(f"Sending raw data without flow tag processing - {err}")
            return data

    async def classify(
        self,
        data: bytes,
    ) -> tuple[FlowDecision, FlowTags | None]:
        event = await self._parse(data)
        if event is None:
            return FlowDecision.PASS_THROUGH, None

        flow_tags = event.detail.flow_tags
        if flow_tags is None:
            return FlowDecision.PROCESS, None

        if flow_tags.origin == self.client_id:
            await self._log_trace(
                "Skipping self-originated message",
                origin=flow_tags.origin,
                sequence=flow_tags.sequence,
            )

            return FlowDecision.SELF_ORIGINATED, flow_tags

        if await self.registry.admit(flow_tags.origin, flow_tags.sequence) is False:
            await self._log_trace(
                "Skipping already seen message",
                origin=flow_tags.origin,
                sequence=flow_tags.sequence,
            )

            return FlowDecision.DUPLICATE, flow_tags

        return FlowDecision.PROCESS, flow_tags

    async def _parse(self, data: bytes) -> Event | None:
        try:
            return self._parser.parse(data)

        except CoTParseError as err:
            await self._log_trace(f"Payload is not CoT XML - {err}")
            return None

    async def _log_trace(
        self,
        message: str,
        origin: str | None = None,
        sequence: int | None = None,
    ):
        await self._logger.log(
            FlowTagTrace(
                message=message,
                client_id=self.client_id,
                origin=origin,
                sequence=sequence,
            )
        )

    async def _log_debug(
        self,
        message: str,
        origin: str | None = None,
        sequence: int | None = None,
    ):
        await self._logger.log(
            FlowTagDebug(
                message=message,
                client_id=self.client_id,
                origin=origin,
                sequence=sequence,
            )
        )
