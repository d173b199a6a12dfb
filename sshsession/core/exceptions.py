"""
Unified exception definitions
"""


class SessionError(Exception):
    """Base exception class"""
    pass


class ConfigError(SessionError):
    """Configuration error"""
    pass


class ConnectionError(SessionError):
    """Transport connection could not be opened"""
    pass


class IdentityVerificationError(SessionError):
    """Host fingerprint did not match the expected value"""
    pass


class AuthenticationError(SessionError):
    """Credentials or key rejected by the remote host"""
    pass


class NotConnectedError(SessionError):
    """Operation attempted without a connected session"""
    pass


class LocalFileNotFoundError(SessionError):
    """Local source file does not exist"""
    pass


class TransportError(SessionError):
    """Low-level transport failure while dispatching a request"""
    pass


class RemoteOperationError(SessionError):
    """Remote operation error"""
    pass


class RemoteWriteError(RemoteOperationError):
    """File could not be written on the remote host"""
    pass


class RemoteReadError(RemoteOperationError):
    """File could not be read from the remote host"""
    pass


class RemoteCommandError(RemoteOperationError):
    """Remote command failed or could not be dispatched"""
    pass
