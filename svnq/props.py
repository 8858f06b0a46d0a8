#===============================================================================
# Imports
#===============================================================================
import svn
import svn.fs

from svnq.engine import (
    translate_errors,
)

from svnq.errors import (
    PropertyNotFoundError,
)

from svnq.path import (
    normalize_path,
)

from svnq.util import (
    from_svn,
    decode_proplist,
)

#===============================================================================
# Classes
#===============================================================================
class PropertyStore(object):
    """
    Versioned properties of a path at a revision.  Keys are free-form
    strings; `svn:mime-type`, `svn:special` and friends are conventions,
    not a closed set.
    """
    def __init__(self, repo):
        self.repo = repo

    def node_prop(self, path, rev, key):
        """
        Returns the value of `key` on `path@rev`, or None when it isn't set.
        """
        path = normalize_path(path)
        repo = self.repo
        repo.require_kind(path, rev)
        root = repo.root(rev)
        with repo.scratch_pool() as pool, translate_errors(path, rev):
            return from_svn(svn.fs.node_prop(root, path, key, pool))

    def propget(self, path, rev, key):
        value = self.node_prop(path, rev, key)
        if value is None:
            raise PropertyNotFoundError(normalize_path(path), rev, key)
        return value

    def proplist(self, path, rev):
        path = normalize_path(path)
        repo = self.repo
        repo.require_kind(path, rev)
        root = repo.root(rev)
        with repo.scratch_pool() as pool, translate_errors(path, rev):
            return decode_proplist(svn.fs.node_proplist(root, path, pool))

# vim:set ts=8 sw=4 sts=4 tw=78 et:
