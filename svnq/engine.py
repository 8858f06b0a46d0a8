#===============================================================================
# Imports
#===============================================================================
import atexit
import logging
import threading

import svn
import svn.core

from contextlib import (
    contextmanager,
)

from svnq.util import (
    from_svn,
)

from svnq.constants import (
    NodeKind,
)

from svnq.errors import (
    EngineError,
    NotAFileError,
    PathNotFoundError,
    NotADirectoryError,
    RevisionNotFoundError,
)

#===============================================================================
# Globals
#===============================================================================
logger = logging.getLogger(__name__)

_lock = threading.Lock()
_refcount = 0
_initialised = False

#===============================================================================
# Helper Methods
#===============================================================================
def _terminate():
    global _initialised
    with _lock:
        if not _initialised:
            return
        logger.debug("terminating engine runtime (%d handles open)", _refcount)
        svn.core.apr_terminate()
        _initialised = False

def acquire():
    """
    Registers a new repository handle with the process-wide engine runtime,
    initialising the runtime on first use.  Teardown is deferred until the
    interpreter exits, so handles may be opened and closed any number of
    times.
    """
    global _refcount, _initialised
    with _lock:
        if not _initialised:
            logger.debug("initialising engine runtime")
            svn.core.apr_initialize()
            atexit.register(_terminate)
            _initialised = True
        _refcount += 1
        return _refcount

def release():
    global _refcount
    with _lock:
        assert _refcount > 0
        _refcount -= 1
        return _refcount

def active_handles():
    return _refcount

def node_kind(kind):
    """
    Maps an engine `svn_node_kind_t` onto `NodeKind`; None for anything that
    is neither a file nor a directory (including absent nodes).
    """
    if kind == svn.core.svn_node_file:
        return NodeKind.File
    elif kind == svn.core.svn_node_dir:
        return NodeKind.Directory
    return None

def error_message(exc):
    if exc.args:
        return from_svn(exc.args[0])
    return str(exc)

@contextmanager
def translate_errors(path=None, rev=None, latest=None):
    """
    Converts `svn.core.SubversionException` raised inside the block into the
    matching `svnq.errors` exception, annotated with `path` and `rev`.
    """
    try:
        yield
    except svn.core.SubversionException as exc:
        code = getattr(exc, 'apr_err', None)
        msg = error_message(exc)
        logger.debug("engine error %s on %s@%s: %s", code, path, rev, msg)
        if code == svn.core.SVN_ERR_FS_NOT_FOUND and path is not None:
            raise PathNotFoundError(path, rev) from exc
        elif code == svn.core.SVN_ERR_FS_NOT_DIRECTORY and path is not None:
            raise NotADirectoryError(path, rev) from exc
        elif code == svn.core.SVN_ERR_FS_NOT_FILE and path is not None:
            raise NotAFileError(path, rev) from exc
        elif code == svn.core.SVN_ERR_FS_NO_SUCH_REVISION:
            latest = -1 if latest is None else latest
            raise RevisionNotFoundError(rev, latest, msg=msg) from exc
        raise EngineError(msg, code) from exc

# vim:set ts=8 sw=4 sts=4 tw=78 et:
