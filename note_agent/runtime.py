"""
Note Agent Runtime

Message-passing boundary between the UI-facing caller and the background
agent task. Requests and replies travel through bounded asyncio queues
(one turn in flight by default). Channel failures never raise: the caller
gets a degraded textual reply instead. Errors raised by the agent itself
(unparseable model reply, completion API failure) are handed back to the
caller unchanged.
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple, Union

from config.settings import settings
from note_agent.agents.note_editing_agent import NoteEditingAgent
from note_agent.errors import AgentNotRunningError, NoteAgentError
from note_agent.models.chat_models import ChatAction, ConversationMessage, ReplyAction
from note_agent.models.note_models import Note

logger = logging.getLogger(__name__)

NO_REPLY_MESSAGE = "Agent did not reply to interaction"
RECEIVE_FAILED_MESSAGE = "Failed to receive reply"

_turn_ids = itertools.count(1)


@dataclass
class ChatRequest:
    """One conversation turn sent to the agent"""
    messages: Sequence[Union[ConversationMessage, Dict[str, str]]]
    note: Note
    cursor_position: int
    turn_id: int = field(default_factory=lambda: next(_turn_ids))


# Reply queue items: (turn_id, action or agent error)
ChatOutcome = Tuple[int, Union[ChatAction, NoteAgentError]]
EventHandler = Callable[[ChatRequest], Awaitable[Optional[ChatAction]]]


class ChatSource:
    """Agent side of the channel: consumes requests, produces replies"""

    def __init__(self, request_queue: asyncio.Queue, reply_queue: asyncio.Queue):
        self._request_queue = request_queue
        self._reply_queue = reply_queue

    def spawn(self, on_event: EventHandler) -> asyncio.Task:
        """Start the background task handling each request with `on_event`"""
        return asyncio.create_task(self._run(on_event))

    async def _run(self, on_event: EventHandler):
        while True:
            request = await self._request_queue.get()
            if request is None:
                logger.info("Chat channel closed, stopping agent loop")
                return

            try:
                outcome = await on_event(request)
                if outcome is None:
                    logger.warning(NO_REPLY_MESSAGE)
                    outcome = ReplyAction(content=NO_REPLY_MESSAGE)
            except NoteAgentError as e:
                logger.warning(f"Turn {request.turn_id} failed: {e}")
                outcome = e
            except Exception as e:
                logger.error(f"❌ Agent failed on turn {request.turn_id}: {e}")
                outcome = ReplyAction(content=NO_REPLY_MESSAGE)

            await self._reply_queue.put((request.turn_id, outcome))


class ChatHandler:
    """Caller side of the channel: sends a request and waits for its reply"""

    def __init__(self, request_queue: asyncio.Queue, reply_queue: asyncio.Queue):
        self._request_queue = request_queue
        self._reply_queue = reply_queue
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def chat(self, request: ChatRequest, timeout: Optional[float] = None) -> ChatAction:
        """
        Send a chat request and wait for the agent's reply

        Returns a degraded ReplyAction when the channel is closed or the reply
        does not arrive within `timeout` seconds.

        Raises:
            NoteAgentError: the agent failed to produce an action for this turn
        """
        if timeout is None:
            timeout = settings.CHAT_REPLY_TIMEOUT_SECONDS

        async with self._lock:
            if self._closed:
                logger.error(f"{RECEIVE_FAILED_MESSAGE}: channel closed")
                return ReplyAction(content=RECEIVE_FAILED_MESSAGE)

            loop = asyncio.get_running_loop()
            deadline = loop.time() + timeout
            try:
                await asyncio.wait_for(self._request_queue.put(request), timeout)
                while True:
                    remaining = deadline - loop.time()
                    turn_id, outcome = await asyncio.wait_for(self._reply_queue.get(), max(remaining, 0))
                    if turn_id == request.turn_id:
                        break
                    logger.debug(f"Discarding stale reply for turn {turn_id}")
            except asyncio.TimeoutError:
                logger.error(f"{RECEIVE_FAILED_MESSAGE}: no reply within {timeout}s")
                return ReplyAction(content=RECEIVE_FAILED_MESSAGE)

        if isinstance(outcome, NoteAgentError):
            raise outcome
        return outcome

    async def close(self):
        """Close the channel; the agent loop stops after the current turn"""
        if self._closed:
            return
        self._closed = True
        await self._request_queue.put(None)


def create_chat(queue_size: Optional[int] = None) -> Tuple[ChatSource, ChatHandler]:
    """Create a connected chat source and handler"""
    size = queue_size or settings.CHAT_QUEUE_SIZE
    request_queue: asyncio.Queue = asyncio.Queue(maxsize=size)
    reply_queue: asyncio.Queue = asyncio.Queue(maxsize=size)
    return ChatSource(request_queue, reply_queue), ChatHandler(request_queue, reply_queue)


class NoteAgentRuntime:
    """Runs a NoteEditingAgent behind a chat channel"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        agent: Optional[NoteEditingAgent] = None,
        queue_size: Optional[int] = None,
    ):
        self.agent = agent or NoteEditingAgent(api_key=api_key)
        self._source, self._handler = create_chat(queue_size)
        self._task: Optional[asyncio.Task] = None

    async def _on_event(self, request: ChatRequest) -> Optional[ChatAction]:
        return await self.agent.process(request.messages, request.note, request.cursor_position)

    def start(self):
        """Start the agent loop (must be called from a running event loop)"""
        if self._task is not None:
            logger.warning("Agent is already running")
            return
        self._task = self._source.spawn(self._on_event)
        logger.info("✅ Agent runtime started")

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done() and not self._handler.closed

    async def chat(
        self,
        messages: List[Union[ConversationMessage, Dict[str, Any]]],
        cursor_position: int,
        note: Note,
        timeout: Optional[float] = None,
    ) -> ChatAction:
        """Send one conversation turn to the agent and return its action"""
        if not self.is_running():
            raise AgentNotRunningError("Agent is not running. Call start() first.")
        request = ChatRequest(messages=messages, note=note, cursor_position=cursor_position)
        return await self._handler.chat(request, timeout=timeout)

    async def stop(self):
        """Close the channel and wait for the agent loop to finish"""
        if self._task is None:
            return
        await self._handler.close()
        await self._task
        logger.info("Agent runtime stopped")
