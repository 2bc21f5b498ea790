"""Memory engine exceptions"""


class GuardianMemoryError(Exception):
    """Base exception for memory engine errors"""
    pass


class StorageError(GuardianMemoryError):
    """Reading or appending the corpus file failed"""
    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{message}: {path}")


class InvalidInputError(GuardianMemoryError, ValueError):
    """Input is empty or unusable after sanitizing"""
    pass
