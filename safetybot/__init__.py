"""Occupational safety chatbot - keyword-searched knowledge base for an LLM.

The knowledge base (FAQ items, accident case reports, law articles) is
searched with weighted keyword matching; the best records are rendered into
a context block that is sent to Gemini, OpenAI or Anthropic together with
the user's message.

Environment Variables:
    AI_PROVIDER: "google" (default), "openai" or "anthropic".
    GOOGLE_API_KEY / OPENAI_API_KEY / ANTHROPIC_API_KEY: key for the provider.
"""

__version__ = "0.1.0"
