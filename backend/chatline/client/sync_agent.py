"""
Client Sync Agent.

Keeps one user's client in step with the server for the lifetime of a
login session:

    DISCONNECTED → CONNECTING → CONNECTED → DISCONNECTED
                                CONNECTED → RECONNECTING → CONNECTED

Subscriptions are owned by scopes. The session scope holds the presence
subscription; the peer scope holds the single message_delivery subscription
for the selected peer and is closed before the next one opens, so switching
peers never stacks handlers.

The server never replays missed events. After a reconnect the agent
re-fetches history for the selected peer instead.
"""

import asyncio
import logging
from contextlib import ExitStack, asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Sequence

from chatline.application.dto.message import MessageDTO
from chatline.application.dto.user import RosterEntryDTO
from chatline.application.realtime.events import EventType
from chatline.client.api import ChatApiClient
from chatline.client.conversation import ConversationView
from chatline.client.errors import ChatClientError, ConnectionLostError
from chatline.client.subscriptions import EventBus
from chatline.client.transport import EventTransport
from chatline.config.settings import Config

logger = logging.getLogger(__name__)


class AgentState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"


class SyncAgent:
    def __init__(
        self,
        user_id: str,
        api: ChatApiClient,
        transport: EventTransport,
        bus: Optional[EventBus] = None,
        reconnect_delays: Sequence[float] = tuple(Config.CLIENT_RECONNECT_DELAYS),
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.user_id = user_id
        self.bus = bus or EventBus()
        self.state = AgentState.DISCONNECTED
        self.online: frozenset[str] = frozenset()
        self.selected_peer: Optional[str] = None
        self.view = ConversationView()
        self._api = api
        self._transport = transport
        self._reconnect_delays = list(reconnect_delays)
        self._sleep = sleep
        self._session_scope: Optional[ExitStack] = None
        self._peer_scope: Optional[ExitStack] = None
        self._pump: Optional[asyncio.Task] = None

    # ==================== LIFECYCLE ====================

    async def start(self) -> None:
        """
        Open the realtime connection and subscribe to presence.

        Raises:
            ConnectionLostError: If the first connection attempt fails
        """
        if self.state is not AgentState.DISCONNECTED:
            return
        self.state = AgentState.CONNECTING
        try:
            await self._transport.connect()
        except ConnectionLostError:
            self.state = AgentState.DISCONNECTED
            raise

        self._session_scope = ExitStack()
        self._session_scope.enter_context(
            self.bus.subscribe(EventType.PRESENCE_SNAPSHOT.value, self._on_presence)
        )
        self.state = AgentState.CONNECTED
        self._pump = asyncio.create_task(self._run())
        self._pump.add_done_callback(self._on_pump_done)
        logger.info(f"[SyncAgent] {self.user_id} connected")

    async def stop(self) -> None:
        """Release every subscription and close the connection."""
        self.deselect_peer()
        if self._session_scope is not None:
            self._session_scope.close()
            self._session_scope = None

        pump, self._pump = self._pump, None
        if pump is not None and pump is not asyncio.current_task():
            pump.cancel()
            try:
                await pump
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.error(f"[SyncAgent] Event pump had failed: {e}", exc_info=True)

        await self._transport.close()
        self.online = frozenset()
        self.state = AgentState.DISCONNECTED
        logger.info(f"[SyncAgent] {self.user_id} disconnected")

    @asynccontextmanager
    async def session(self) -> AsyncIterator["SyncAgent"]:
        """Tie the agent to an authenticated session: login → start, logout → stop."""
        await self.start()
        try:
            yield self
        finally:
            await self.stop()

    # ==================== PEER SELECTION ====================

    async def select_peer(self, peer_id: str) -> None:
        """
        Switch the conversation view to ``peer_id``.

        Closes the previous peer scope first, then subscribes once to
        message_delivery and loads the full history.
        """
        self._release_peer_scope()
        self.selected_peer = peer_id
        self.view = ConversationView(peer_id)

        scope = ExitStack()
        scope.enter_context(
            self.bus.subscribe(EventType.MESSAGE_DELIVERY.value, self._on_delivery)
        )
        self._peer_scope = scope
        await self.refresh_history()

    def deselect_peer(self) -> None:
        self._release_peer_scope()
        self.selected_peer = None
        self.view = ConversationView()

    async def refresh_history(self) -> None:
        """Replace the view with server history, keeping pushes that raced the fetch."""
        peer, view = self.selected_peer, self.view
        if peer is None:
            return
        view.begin_fetch()
        try:
            history = await self._api.get_messages(peer)
        except ChatClientError:
            view.abort_fetch()
            raise
        if self.view is not view:
            return  # peer switched while fetching
        view.replace(history)

    def _release_peer_scope(self) -> None:
        if self._peer_scope is not None:
            self._peer_scope.close()
            self._peer_scope = None

    # ==================== SENDING ====================

    async def send(
        self,
        text: Optional[str] = None,
        image: Optional[str] = None,
        video: Optional[str] = None,
    ) -> MessageDTO:
        """
        Send to the selected peer and merge the stored record into the view.

        Raises:
            ChatClientError subclasses from ChatApiClient.send_message
        """
        if self.selected_peer is None:
            raise ChatClientError("No conversation selected")
        peer, view = self.selected_peer, self.view
        message = await self._api.send_message(peer, text=text, image=image, video=video)
        if self.view is view:
            view.merge(message)
        return message

    def is_online(self, user_id: str) -> bool:
        return user_id in self.online

    async def roster(
        self, online_only: bool = False, query: str = ""
    ) -> list[RosterEntryDTO]:
        """
        Everyone but this user, with ``online`` taken from the live presence
        snapshot. ``query`` matches display names case-insensitively.
        """
        needle = query.lower()
        entries = []
        for entry in await self._api.list_users():
            entry = entry.model_copy(update={"online": self.is_online(entry.id)})
            if online_only and not entry.online:
                continue
            if needle not in entry.display_name.lower():
                continue
            entries.append(entry)
        return entries

    # ==================== EVENT HANDLERS ====================

    def _on_presence(self, event: dict[str, Any]) -> None:
        self.online = frozenset(event["data"]["user_ids"])

    def _on_delivery(self, event: dict[str, Any]) -> None:
        message = MessageDTO.model_validate(event["data"])
        peer = self.selected_peer
        if peer is None:
            return
        if (message.sender_id, message.recipient_id) in (
            (self.user_id, peer),
            (peer, self.user_id),
        ):
            self.view.merge(message)

    # ==================== CONNECTION PUMP ====================

    def _on_pump_done(self, pump: asyncio.Task) -> None:
        if pump.cancelled() or pump.exception() is None:
            return
        logger.error(f"[SyncAgent] Event pump died: {pump.exception()}")
        self.state = AgentState.DISCONNECTED

    async def _run(self) -> None:
        while True:
            try:
                event = await self._transport.receive()
            except ConnectionLostError as e:
                logger.warning(f"[SyncAgent] Connection lost: {e}")
                if not await self._reconnect():
                    return
                continue
            if not isinstance(event, dict):
                logger.warning(f"[SyncAgent] Ignoring malformed event: {event!r:.80}")
                continue
            self.bus.publish(event)

    async def _reconnect(self) -> bool:
        self.state = AgentState.RECONNECTING
        for attempt, delay in enumerate(self._reconnect_delays, start=1):
            await self._sleep(delay)
            try:
                await self._transport.connect()
            except ConnectionLostError as e:
                logger.info(f"[SyncAgent] Reconnect attempt {attempt} failed: {e}")
                continue

            self.state = AgentState.CONNECTED
            logger.info(f"[SyncAgent] Reconnected after {attempt} attempt(s)")
            try:
                await self.refresh_history()
            except ChatClientError as e:
                logger.warning(f"[SyncAgent] History refresh after reconnect failed: {e}")
            return True

        logger.error("[SyncAgent] Giving up reconnecting")
        self.deselect_peer()
        if self._session_scope is not None:
            self._session_scope.close()
            self._session_scope = None
        self.online = frozenset()
        self.state = AgentState.DISCONNECTED
        return False
