from .relay_consumer import BotClient, ConversationView, TurnState

__all__ = [
    "BotClient",
    "ConversationView",
    "TurnState",
]
