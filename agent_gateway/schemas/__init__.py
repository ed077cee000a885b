from .agent import (
    MergeMessagesRequest,
    MergeMessagesResponse,
    SendMessageRequest,
    SendMessageResponse,
)

__all__ = [
    "MergeMessagesRequest",
    "MergeMessagesResponse",
    "SendMessageRequest",
    "SendMessageResponse",
]
