"""FastAPI dependencies."""
from topik_practice.dependencies.state import get_app_state

__all__ = ["get_app_state"]
