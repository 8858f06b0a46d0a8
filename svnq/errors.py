#===============================================================================
# Imports
#===============================================================================
from svnq.constants import (
    e,  # Errors
)

#===============================================================================
# Classes
#===============================================================================
class RepositoryError(Exception):
    pass

class OpenError(RepositoryError):
    def __init__(self, location, reason):
        self.location = location
        self.reason = reason
        RepositoryError.__init__(self, e.OpenFailed % (location, reason))

class CreateError(RepositoryError):
    def __init__(self, location, reason):
        self.location = location
        self.reason = reason
        RepositoryError.__init__(self, e.CreateFailed % (location, reason))

class ClosedError(RepositoryError):
    def __init__(self, msg=None):
        RepositoryError.__init__(self, msg or e.HandleClosed)

class RevisionNotFoundError(RepositoryError):
    def __init__(self, rev, latest, msg=None):
        self.rev = rev
        self.latest = latest
        RepositoryError.__init__(self, msg or e.NoSuchRevision % (rev, latest))

class PathNotFoundError(RepositoryError):
    def __init__(self, path, rev):
        self.path = path
        self.rev = rev
        RepositoryError.__init__(self, e.PathNotFound % (path, rev))

class NodeKindError(RepositoryError):
    _fmt = None

    def __init__(self, path, rev):
        self.path = path
        self.rev = rev
        RepositoryError.__init__(self, self._fmt % (path, rev))

class NotADirectoryError(NodeKindError):
    _fmt = e.NotADirectory

class NotAFileError(NodeKindError):
    _fmt = e.NotAFile

class PropertyNotFoundError(RepositoryError):
    def __init__(self, path, rev, key):
        self.path = path
        self.rev = rev
        self.key = key
        RepositoryError.__init__(self, e.PropertyNotFound % (key, path, rev))

class EngineError(RepositoryError):
    def __init__(self, message, apr_err=None):
        self.message = message
        self.apr_err = apr_err
        RepositoryError.__init__(self, e.EngineFailure % message)

# vim:set ts=8 sw=4 sts=4 tw=78 et:
