#===============================================================================
# Imports
#===============================================================================
import svn
import svn.fs

from collections import (
    namedtuple,
)

import svnq.engine as engine

from svnq.constants import (
    NodeKind,
)

from svnq.errors import (
    NotADirectoryError,
)

from svnq.path import (
    join_path,
    normalize_path,
)

from svnq.util import (
    from_svn,
)

#===============================================================================
# Named Tuples
#===============================================================================
Entry = namedtuple('Entry', ('name', 'kind'))

#===============================================================================
# Classes
#===============================================================================
class TreeReader(object):
    def __init__(self, repo):
        self.repo = repo

    def tree(self, path, rev):
        """
        Returns the immediate children of directory `path` as it existed at
        `rev`, as a list of `Entry` records sorted by name.
        """
        path = normalize_path(path)
        repo = self.repo
        if repo.require_kind(path, rev) != NodeKind.Directory:
            raise NotADirectoryError(path, rev)

        root = repo.root(rev)
        with repo.scratch_pool() as pool, engine.translate_errors(path, rev):
            dirents = svn.fs.dir_entries(root, path, pool)
            entries = [
                Entry(from_svn(d.name), engine.node_kind(d.kind))
                    for d in dirents.values()
            ]

        return sorted(entries)

    def walk(self, path, rev):
        """
        Yields `(path, Entry)` for every node beneath `path` at `rev`, depth
        first.
        """
        path = normalize_path(path)
        for entry in self.tree(path, rev):
            child = join_path(path, entry.name)
            yield (child, entry)
            if entry.kind == NodeKind.Directory:
                for item in self.walk(child, rev):
                    yield item

# vim:set ts=8 sw=4 sts=4 tw=78 et:
