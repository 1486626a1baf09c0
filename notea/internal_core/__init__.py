from .config import NoteaConfig, load_config
from .session_store import InMemorySessionStore

__all__ = ["NoteaConfig", "load_config", "InMemorySessionStore"]
