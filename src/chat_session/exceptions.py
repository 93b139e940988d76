"""Custom exceptions for the conversation session service."""


class MessageNotFoundError(Exception):
    """Raised when a message id is no longer present in the log."""

    def __init__(self, message_id: str):
        self.message_id = message_id
        super().__init__(f"Message '{message_id}' not found in conversation log")


class CaptureInProgressError(Exception):
    """Raised when voice capture is started while another capture is active."""

    def __init__(self, placeholder_id: str):
        self.placeholder_id = placeholder_id
        super().__init__(f"Voice capture already in progress (placeholder '{placeholder_id}')")


class PlaceholderMismatchError(Exception):
    """Raised when a capture is completed under an id other than the active placeholder's."""

    def __init__(self, placeholder_id: str, active_placeholder_id: str):
        self.placeholder_id = placeholder_id
        self.active_placeholder_id = active_placeholder_id
        super().__init__(
            f"Placeholder '{placeholder_id}' is not the active capture "
            f"(active placeholder '{active_placeholder_id}')"
        )


class PermissionDeniedError(Exception):
    """Raised when the user denied a permission the operation needs."""

    def __init__(self, permission: str):
        self.permission = permission
        super().__init__(f"Permission '{permission}' was denied")


class SessionClosedError(Exception):
    """Raised when a closed conversation session is mutated."""

    def __init__(self, conversation_id: str):
        self.conversation_id = conversation_id
        super().__init__(f"Conversation '{conversation_id}' is closed")


class ConversationNotFoundError(Exception):
    """Raised when a requested conversation does not exist."""

    def __init__(self, conversation_id: str):
        self.conversation_id = conversation_id
        super().__init__(f"Conversation {conversation_id} not found")


class ReplyProviderError(Exception):
    """Raised when the reply provider cannot produce a reply."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class TranscriptionError(Exception):
    """Raised when audio transcription fails."""

    def __init__(self, audio_reference: str, cause: Exception | None = None):
        self.audio_reference = audio_reference
        self.cause = cause
        super().__init__(f"Failed to transcribe audio '{audio_reference}'")


class StorageDownloadError(Exception):
    """Raised when downloading a file from storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to download '{object_name}' from storage")


class StorageUploadError(Exception):
    """Raised when uploading a file to storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to upload '{object_name}' to storage")
