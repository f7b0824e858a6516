"""Bidirectional speech-to-speech session bridge."""
