"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Send a system/user prompt pair to the Groq chat-completions endpoint.
- Decode the model's JSON-object reply for the recommendation service.
"""
