"""Relay service for TikTok OAuth logins and video publishing."""

__version__ = "0.1.0"
