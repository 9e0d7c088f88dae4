"""API dependencies."""
from ..config import Settings, get_settings
from ..core.pattern_detector import get_pattern_detector, PatternDetector
from ..core.session import get_session_store, SessionStore


def get_store() -> SessionStore:
    """Dependency for the board session store."""
    return get_session_store()


def get_detector() -> PatternDetector:
    """Dependency for the pattern detector."""
    return get_pattern_detector()


def get_app_settings() -> Settings:
    """Dependency for application settings."""
    return get_settings()
