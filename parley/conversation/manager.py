"""Session manager: runs one conversation turn end to end.

A turn resolves (or creates) the conversation, appends the caller's
message, asks the completion provider for a reply with the full history,
appends the reply and returns it together with the conversation id.

Turn states:
    received -> resolving -> appending user message -> calling provider
      -> success: appending reply -> returning
      -> failure: returning error (the user message stays recorded)
"""

from pydantic import BaseModel, Field

from parley.config.models.session import (
    DEFAULT_SYSTEM_PROMPT,
    SessionConfig,
    UnknownConversationPolicy,
)
from parley.conversation.locks import ConversationLocks
from parley.conversation.models import Conversation, Role
from parley.conversation.store import ConversationStore
from parley.errors import ConversationNotFoundError, ValidationError
from parley.observability import NullReporter, Operation, Reporter
from parley.observability.logging import get_logger
from parley.observability.metrics import CONVERSATIONS_CREATED
from parley.providers.completion import CompletionProvider

logger = get_logger(__name__)


class TurnResult(BaseModel):
    """Outcome of a successful turn."""

    reply: str = Field(..., description="Generated assistant reply")
    conversation_id: str = Field(..., description="Conversation the turn belongs to")


class SessionManager:
    """Owns all conversation mutation.

    The store is a passive container and the provider a single-call
    adapter; both are injected. When ``serialize_turns`` is set, turns
    naming the same conversation are processed one at a time.
    """

    def __init__(
        self,
        store: ConversationStore,
        provider: CompletionProvider,
        *,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        provider_timeout: float | None = 30.0,
        serialize_turns: bool = True,
        unknown_conversation_policy: UnknownConversationPolicy = "create",
        max_message_length: int = 10000,
        reporter: Reporter | None = None,
        locks: ConversationLocks | None = None,
    ) -> None:
        """Initialize the session manager.

        Args:
            store: Conversation storage
            provider: Completion provider client
            system_prompt: Preamble for new conversations
            provider_timeout: Upper bound on each provider call (seconds)
            serialize_turns: Enforce one turn at a time per conversation
            unknown_conversation_policy: "create" a fresh conversation or
                "reject" with ConversationNotFoundError
            max_message_length: Longest accepted message, in characters
            reporter: Observability reporter
            locks: Lock registry (a private one is created if omitted)
        """
        self._store = store
        self._provider = provider
        self._system_prompt = system_prompt
        self._provider_timeout = provider_timeout
        self._serialize_turns = serialize_turns
        self._unknown_policy = unknown_conversation_policy
        self._max_message_length = max_message_length
        self._reporter = reporter or NullReporter()
        self._locks = locks or ConversationLocks()

    @classmethod
    def from_config(
        cls,
        config: SessionConfig,
        store: ConversationStore,
        provider: CompletionProvider,
        reporter: Reporter | None = None,
    ) -> "SessionManager":
        """Build a session manager from the session settings section."""
        return cls(
            store,
            provider,
            system_prompt=config.system_prompt,
            provider_timeout=config.provider_timeout,
            serialize_turns=config.serialize_turns,
            unknown_conversation_policy=config.unknown_conversation_policy,
            max_message_length=config.max_message_length,
            reporter=reporter,
        )

    async def handle(
        self, message: str, conversation_id: str | None = None
    ) -> TurnResult:
        """Process one turn.

        Args:
            message: Caller's message; must be non-empty after trimming
            conversation_id: Conversation to continue, or None to start one

        Returns:
            TurnResult with the reply and the (new or reused) conversation id

        Raises:
            ValidationError: Message empty or too long; nothing mutated
            ConversationNotFoundError: Unknown id under the "reject" policy
            CompletionError: Provider failed; the user message stays recorded
        """
        conversation_id = conversation_id or None

        with self._reporter.operation(
            "turn",
            requested_conversation_id=conversation_id,
            message_length=len(message) if isinstance(message, str) else None,
        ) as op:
            self._validate(message)

            if self._serialize_turns and conversation_id is not None:
                async with self._locks.acquire(conversation_id):
                    return await self._run_turn(message, conversation_id, op)
            return await self._run_turn(message, conversation_id, op)

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        """Return a snapshot of a stored conversation, or None if unknown."""
        conversation = await self._store.get(conversation_id)
        if conversation is None:
            return None
        return conversation.model_copy(deep=True)

    async def _run_turn(
        self,
        message: str,
        conversation_id: str | None,
        op: Operation,
    ) -> TurnResult:
        conversation = await self._resolve(conversation_id, op)
        op.annotate(
            conversation_id=conversation.id,
            message_count=conversation.message_count,
        )

        conversation.append(Role.USER, message)
        await self._store.save(conversation)

        reply = await self._provider.complete(
            conversation.messages, timeout=self._provider_timeout
        )

        conversation.append(Role.ASSISTANT, reply)
        await self._store.save(conversation)

        logger.info(
            "turn_completed",
            conversation_id=conversation.id,
            message_count=conversation.message_count,
            reply_length=len(reply),
        )
        return TurnResult(reply=reply, conversation_id=conversation.id)

    async def _resolve(
        self, conversation_id: str | None, op: Operation
    ) -> Conversation:
        if conversation_id is not None:
            existing = await self._store.get(conversation_id)
            if existing is not None:
                return existing
            if self._unknown_policy == "reject":
                raise ConversationNotFoundError(conversation_id)
            logger.info(
                "unknown_conversation_replaced",
                requested_conversation_id=conversation_id,
            )

        conversation = await self._store.create(self._system_prompt)
        CONVERSATIONS_CREATED.inc()
        op.annotate(conversation_created=True)
        logger.info("conversation_created", conversation_id=conversation.id)
        return conversation

    def _validate(self, message: str) -> None:
        if not isinstance(message, str) or not message.strip():
            raise ValidationError("Message is required")
        if len(message) > self._max_message_length:
            raise ValidationError(
                f"Message exceeds {self._max_message_length} characters"
            )
