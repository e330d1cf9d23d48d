"""
The chat application: actions, state hooks and per-chat sessions.

ChatApp wires the model client, the tool registry, the chat store and the
session provider together and exposes the lifecycle hooks a host calls:

- ``on_get_ui_state`` rebuilds the UI of a chat for a signed-in user;
- ``on_set_ai_state`` persists a finalised transcript for a signed-in user.
"""

from datetime import datetime

from ..exceptions import ChatInputError
from ..llm.catalog import ModelCatalog
from ..llm.client import LLMClient
from ..models.messages import AIState, Chat, UIMessage, UIState
from ..models.ui import UserMessage
from ..tools import build_default_registry
from ..tools.registry import ToolRegistry
from ..utils.ids import new_id
from ..utils.logging import get_logger
from .config import ChatConfig, get_config
from .dispatch import TurnDispatcher
from .persistence import ChatStore, InMemoryChatStore
from .reducer import get_ui_state_from_ai_state
from .session import SessionProvider, StaticSessionProvider
from .state import MutableAIState

logger = get_logger(__name__)


class ChatApp:
    """
    Example:
        app = ChatApp(store=FileChatStore("./data/chats"),
                      session_provider=StaticSessionProvider("local"))
        session = app.new_session()
        message = await session.send("I want papers in Computer Science")
        async for node in message.display:
            render(node)
    """

    def __init__(
        self,
        config: ChatConfig | None = None,
        llm: LLMClient | None = None,
        registry: ToolRegistry | None = None,
        catalog: ModelCatalog | None = None,
        store: ChatStore | None = None,
        session_provider: SessionProvider | None = None,
    ):
        self.config = config or get_config()
        self.catalog = catalog or ModelCatalog()
        self.llm = llm or LLMClient(
            default_model=self.catalog.get(self.config.default_model).litellm_model,
            provider_api_keys=self.config.provider_api_keys(),
            max_retries=self.config.llm_max_retries,
            timeout=self.config.llm_timeout,
            temperature=self.config.temperature,
        )
        self.registry = registry or build_default_registry(self.config)
        self.store = store or InMemoryChatStore()
        self.session_provider = session_provider or StaticSessionProvider()
        self.dispatcher = TurnDispatcher(self.llm, self.registry, self.catalog, self.config)

        self.actions = {"submit_user_message": self.submit_user_message}

    def initial_ai_state(self) -> AIState:
        return AIState(chat_id=new_id(), messages=[])

    def initial_ui_state(self) -> UIState:
        return []

    async def submit_user_message(
        self,
        state: MutableAIState,
        content: str,
        model: str | None = None,
        images: list[str] | None = None,
    ) -> UIMessage:
        return await self.dispatcher.submit_user_message(state, content, model=model, images=images)

    async def on_get_ui_state(self, ai_state: AIState) -> UIState | None:
        """UI of the chat for a signed-in user, None otherwise."""
        session = await self.session_provider.auth()
        if session is None or session.user is None:
            return None
        return get_ui_state_from_ai_state(ai_state, self.registry)

    async def on_set_ai_state(self, state: AIState) -> None:
        """Save the finalised transcript when a user is signed in."""
        session = await self.session_provider.auth()
        if session is None or session.user is None:
            logger.debug("chat_not_saved_signed_out", chat_id=state.chat_id)
            return

        first = state.messages[0].content if state.messages else ""
        title = first[: self.config.title_max_length] if isinstance(first, str) else ""

        chat = Chat(
            id=state.chat_id,
            title=title,
            user_id=session.user.id,
            created_at=datetime.now(),
            messages=state.messages,
            path=f"/chat/{state.chat_id}",
        )
        await self.store.save_chat(chat)

    def new_session(self, ai_state: AIState | None = None) -> "ChatSession":
        return ChatSession(self, ai_state)

    async def load_session(self, chat_id: str) -> "ChatSession | None":
        """
        Reopen a saved chat for the signed-in user.

        Returns:
            The session, or None when signed out or the chat is not found
        """
        session = await self.session_provider.auth()
        if session is None or session.user is None:
            return None
        chat = await self.store.get_chat(chat_id, session.user.id)
        if chat is None:
            return None

        ai_state = chat.to_ai_state()
        ui_state = await self.on_get_ui_state(ai_state)
        return ChatSession(self, ai_state, ui_state or [])


class ChatSession:
    """Current AI and UI state of one chat, as held by a host."""

    def __init__(self, app: ChatApp, ai_state: AIState | None = None, ui_state: UIState | None = None):
        self.app = app
        self.ai_state = ai_state or app.initial_ai_state()
        self.ui_state = ui_state if ui_state is not None else app.initial_ui_state()
        self._turn: MutableAIState | None = None

    @property
    def chat_id(self) -> str:
        return self.ai_state.chat_id

    async def send(self, content: str, model: str | None = None, images: list[str] | None = None) -> UIMessage:
        """
        Submit a user turn.

        Raises:
            ChatInputError: If the previous turn is still running or the
                input is rejected
        """
        if self._turn is not None:
            if not self._turn.is_done:
                raise ChatInputError("The previous message is still being answered")
            self.ai_state = self._turn.get()

        turn = MutableAIState(self.ai_state, on_done=self._on_done)
        message = await self.app.submit_user_message(turn, content, model=model, images=images)
        self._turn = turn

        self.ui_state.append(UIMessage(id=new_id(), display=UserMessage(content=content, images=images or [])))
        self.ui_state.append(message)
        return message

    async def wait(self) -> None:
        """Wait until the last turn's transcript has been saved."""
        if self._turn is not None and self._turn.pending is not None:
            await self._turn.pending

    async def _on_done(self, state: AIState) -> None:
        self.ai_state = state
        await self.app.on_set_ai_state(state)
