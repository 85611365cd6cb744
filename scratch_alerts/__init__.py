"""Scratch card loyalty WhatsApp notification service."""
