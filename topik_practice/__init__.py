"""TOPIK practice engine: question bank, practice sessions and wrong-answer review."""
