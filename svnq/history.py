#===============================================================================
# Imports
#===============================================================================
import logging

import svn
import svn.fs

from svnq.engine import (
    translate_errors,
)

from svnq.errors import (
    PathNotFoundError,
)

from svnq.path import (
    normalize_path,
)

from svnq.util import (
    from_svn,
)

#===============================================================================
# Globals
#===============================================================================
logger = logging.getLogger(__name__)

#===============================================================================
# Classes
#===============================================================================
class PathHistoryResolver(object):
    """
    Answers "when did this path last change" and "which commits touched this
    path" by walking the engine's node history.  Directory history includes
    every revision that changed something beneath the directory.
    """
    def __init__(self, repo):
        self.repo = repo

    def last_path_rev(self, path, upper_bound):
        """
        Returns the greatest revision <= `upper_bound` in which `path` was
        created or had its content or properties changed.  `path` must exist
        at `upper_bound`.
        """
        path = normalize_path(path)
        repo = self.repo
        root = repo.root(upper_bound)
        repo.require_kind(path, upper_bound)

        with repo.scratch_pool() as pool, translate_errors(path, upper_bound):
            history = svn.fs.node_history(root, path, pool)
            history = svn.fs.history_prev(history, 0, pool)
            (hpath, rev) = svn.fs.history_location(history, pool)

        logger.debug("last change to %s at or before r%d: r%d",
                     path, upper_bound, rev)
        return rev

    def history(self, path, from_rev, to_rev, limit=0):
        """
        Returns the commits within [from_rev, to_rev] that changed `path`.

        Commits come back in the direction of the requested range: ascending
        when `from_rev <= to_rev`, descending otherwise.  A positive `limit`
        keeps only the first `limit` commits in that order.
        """
        path = normalize_path(path)
        repo = self.repo
        latest = repo.youngest_rev()
        from_rev = repo.check_rev(from_rev, latest)
        to_rev = repo.check_rev(to_rev, latest)

        descending = from_rev > to_rev
        (low, high) = (to_rev, from_rev) if descending else (from_rev, to_rev)

        start = self._newest_existing_rev(path, low, high)
        if start is None:
            raise PathNotFoundError(path, high)

        revs = list()
        for (hpath, rev) in self.walk(path, start, low):
            if revs and revs[-1] == rev:
                continue
            revs.append(rev)
            if descending and 0 < limit <= len(revs):
                break

        if not descending:
            revs.reverse()
        if limit and limit > 0:
            revs = revs[:limit]

        logger.debug("history of %s r%d:%d (limit %d): %r",
                     path, from_rev, to_rev, limit or 0, revs)
        return [ repo.revisions.commit_info(r) for r in revs ]

    def walk(self, path, rev, stop_rev=0):
        """
        Yields `(path, rev)` pairs for each location in the history of
        `path@rev`, newest first, down to (and including) `stop_rev`.  The
        first pair is the revision in which `path@rev` was last changed.
        """
        path = normalize_path(path)
        repo = self.repo
        root = repo.root(rev)
        cross_copies = int(repo.conf.cross_copies)
        with repo.scratch_pool() as pool, translate_errors(path, rev):
            history = svn.fs.node_history(root, path, pool)
            while history:
                history = svn.fs.history_prev(history, cross_copies, pool)
                if not history:
                    break
                (hpath, hrev) = svn.fs.history_location(history, pool)
                if hrev < stop_rev:
                    break
                yield (normalize_path(from_svn(hpath)), hrev)

    def _newest_existing_rev(self, path, low, high):
        repo = self.repo
        for rev in range(high, low-1, -1):
            # Transient roots; existence checks stay out of the root cache.
            with repo.scratch_pool() as pool:
                if repo.node_kind(path, rev, pool) is not None:
                    return rev
        return None

# vim:set ts=8 sw=4 sts=4 tw=78 et:
