"""API route modules."""
from topik_practice.routes import bank, sessions, statistics, wrong_answers

__all__ = ["bank", "sessions", "statistics", "wrong_answers"]
