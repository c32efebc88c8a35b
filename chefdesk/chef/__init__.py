"""
AI chef assistant.

Responsibilities:
- Turn a restaurant profile into the system prompt for the LLM.
- Request advice for a user message with bounded conversation history.
- Classify the reply and pull recipe-like recommendations out of it.
"""
