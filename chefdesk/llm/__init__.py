"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build the Groq client that the chef service is constructed with.
- Send one chat completion per advice request and return its text.
"""
