from .messages import Message, Response, Role
from .session import Session, SYSTEM_PROMPT
from .history import HistoryStore
from .codeblocks import CodeBlock, extract_code_blocks, iter_code_blocks

__all__ = [
    "Message",
    "Response",
    "Role",
    "Session",
    "SYSTEM_PROMPT",
    "HistoryStore",
    "CodeBlock",
    "extract_code_blocks",
    "iter_code_blocks",
]
