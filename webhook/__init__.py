"""
Webhook module - FastAPI route handlers.

Includes:
- whatsapp.py: WhatsApp webhook verification and message receiver
- voice_relay.py: Voice message pipeline (download → transcribe → reply)
"""

from webhook.whatsapp import router as whatsapp_router

__all__ = ["whatsapp_router"]
