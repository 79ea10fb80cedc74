"""Narrative generation for a detected meta.

- requester.py: prompt building and placeholder handling around a text generator
- groq_client.py: production generator backed by Groq chat completions
"""
