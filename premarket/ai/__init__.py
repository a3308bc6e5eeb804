"""Prompt construction and language-model synthesis."""
