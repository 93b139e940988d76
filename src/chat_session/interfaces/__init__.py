"""Collaborator interface exports."""

from .reply_provider import ReplyProvider
from .storage import StorageClient
from .transcriber import Transcriber

__all__ = ["ReplyProvider", "StorageClient", "Transcriber"]
