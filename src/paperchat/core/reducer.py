"""
Transcript to UI reduction, used when a saved chat is reopened.
"""

from ..models.enums import MessageRole
from ..models.messages import AIState, Chat, ToolResultPart, UIMessage, UIState
from ..models.ui import BotMessage, UserMessage
from ..tools.registry import ToolRegistry


def get_ui_state_from_ai_state(chat: Chat | AIState, registry: ToolRegistry) -> UIState:
    """
    Rebuild the UI list of a chat from its transcript.

    System messages are dropped before numbering, so ids are
    ``{chat_id}-{index}`` over the remaining messages. Tool messages render
    through the tool's registered renderer; assistant tool-call messages
    have nothing to show and get a None display.
    """
    chat_id = chat.id if isinstance(chat, Chat) else chat.chat_id
    visible = [m for m in chat.messages if m.role != MessageRole.SYSTEM]

    ui_state: UIState = []
    for index, message in enumerate(visible):
        if message.role == MessageRole.TOOL and not message.is_text:
            display = [
                registry.render_result(part)
                for part in message.content
                if isinstance(part, ToolResultPart)
            ]
        elif message.role == MessageRole.USER:
            content = message.content if message.is_text else ""
            display = UserMessage(content=content, images=message.images)
        elif message.role == MessageRole.ASSISTANT and message.is_text:
            display = BotMessage(content=message.content)
        else:
            display = None

        ui_state.append(UIMessage(id=f"{chat_id}-{index}", display=display))

    return ui_state
