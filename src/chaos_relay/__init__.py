"""
Chaos Relay package.

Provides:
- A stateless relay from one user message to one short persona reply
- HTTP and WebSocket surfaces over the same relay (FastAPI)
- A one-shot CLI for manual checks
"""
