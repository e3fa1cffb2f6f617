class GalleryError(Exception):
    """Base class for every error raised by the gallery core."""


class PersistenceReadFailure(GalleryError):
    """Stored value is missing, unreadable or not valid JSON."""


class PersistenceWriteFailure(GalleryError):
    """Stored value could not be serialized or written."""


class DuplicateUser(GalleryError):
    def __init__(self, username: str):
        super().__init__(f"user already exists: {username}")
        self.username = username


class InvalidCredentials(GalleryError):
    def __init__(self, username: str):
        super().__init__(f"invalid credentials for: {username}")
        self.username = username


class NotAuthorized(GalleryError):
    def __init__(self, action: str, role: str):
        super().__init__(f"{action} requires admin role, got {role!r}")
        self.action = action
        self.role = role
