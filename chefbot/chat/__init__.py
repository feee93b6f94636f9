"""Preference-driven menu recommendations backed by the LLM layer."""
