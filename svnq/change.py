#===============================================================================
# Imports
#===============================================================================
import logging

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
    EngineError,
)

from svnq.path import (
    normalize_path,
)

from svnq.perfmon import (
    ResourceUsageTracker,
    DummyResourceUsageTracker,
)

from svnq.util import (
    from_svn,
    Dict,
    Constant,
)

#===============================================================================
# Globals
#===============================================================================
logger = logging.getLogger(__name__)

#===============================================================================
# Change Constant Classes
#===============================================================================
class _ChangeKind(Constant):
    Add     = 'add'
    Copy    = 'copy'
    Modify  = 'modify'
    Delete  = 'delete'
ChangeKind = _ChangeKind()

#===============================================================================
# Named Tuples & Helper Methods
#===============================================================================
ChangedPath = namedtuple(
    'ChangedPath', (
        'path',
        'change_kind',
        'node_kind',
        'text_modified',
        'props_modified',
        'copied_from',
        'diff',
    )
)

def change_kind(action, copied_from):
    """
    Collapses the engine's path change action (plus copy information) into a
    `ChangeKind`.  Adds and replacements with a copy source are copies;
    replacements without one are adds.
    """
    if action == svn.fs.path_change_delete:
        return ChangeKind.Delete
    elif action == svn.fs.path_change_modify:
        return ChangeKind.Modify
    elif action in (svn.fs.path_change_add, svn.fs.path_change_replace):
        return ChangeKind.Copy if copied_from else ChangeKind.Add
    raise EngineError("unknown path change kind: %r" % action)

#===============================================================================
# Classes
#===============================================================================
class Changeset(object):
    """
    A revision's commit metadata plus every path it changed, keyed by path.
    """
    def __init__(self, commit, changed_paths, usage=None):
        self.commit = commit
        self.changed_paths = changed_paths
        self.usage = usage

    @property
    def rev(self):
        return self.commit.revision

    @property
    def paths(self):
        return list(self.changed_paths)

    def __len__(self):
        return len(self.changed_paths)

    def __iter__(self):
        return iter(self.changed_paths.values())

    def __getitem__(self, path):
        return self.changed_paths[normalize_path(path)]

    def __contains__(self, path):
        return normalize_path(path) in self.changed_paths

    def __repr__(self):
        return '<%s r%d (%d paths)>' % (
            self.__class__.__name__,
            self.rev,
            len(self),
        )

class ChangesetBuilder(object):
    def __init__(self, repo):
        self.repo = repo

    def _tracker(self, rev):
        if self.repo.conf.track_resource_usage:
            return ResourceUsageTracker('Changeset r%d' % rev)
        else:
            return DummyResourceUsageTracker()

    def changes(self, rev):
        """
        Returns a dict mapping each path changed in `rev` to a `Dict` of raw
        change details (change kind, node kind, text/prop modification flags
        and copy source).
        """
        repo = self.repo
        root = repo.root(rev)
        results = dict()
        with repo.scratch_pool() as pool, engine.translate_errors(rev=rev):
            changes = svn.fs.paths_changed2(root, pool)
            for (path, change) in changes.items():
                path = normalize_path(from_svn(path))
                c = Dict()
                c.action = change.change_kind
                c.node_kind = engine.node_kind(change.node_kind)
                c.text_mod = bool(change.text_mod)
                c.prop_mod = bool(change.prop_mod)
                c.copied_from = None
                if c.action != svn.fs.path_change_delete:
                    c.copied_from = self._copied_from(root, path, change, pool)
                results[path] = c
        return results

    def _copied_from(self, root, path, change, pool):
        if change.copyfrom_known:
            (src_path, src_rev) = (change.copyfrom_path, change.copyfrom_rev)
        else:
            (src_rev, src_path) = svn.fs.copied_from(root, path, pool)
        if not src_path or src_rev < 0:
            return None
        return (normalize_path(from_svn(src_path)), src_rev)

    def changeset(self, rev, suppress_diff=False):
        repo = self.repo
        rev = repo.check_rev(rev)
        tracker = self._tracker(rev)

        with tracker.track('commit_info'):
            commit = repo.revisions.commit_info(rev)

        with tracker.track('paths_changed'):
            changes = self.changes(rev)

        changed_paths = dict()
        for path in sorted(changes):
            c = changes[path]
            kind = change_kind(c.action, c.copied_from)
            node_kind = c.node_kind
            if node_kind is None and kind != ChangeKind.Delete:
                node_kind = repo.node_kind(path, rev)

            diff = ''
            wants_diff = (
                not suppress_diff and
                kind != ChangeKind.Delete and
                node_kind == NodeKind.File and
                c.text_mod
            )
            if wants_diff:
                with tracker.track('diff %s' % path):
                    diff = repo.diffs.text_diff(path, rev)

            changed_paths[path] = ChangedPath(
                path,
                kind,
                node_kind,
                c.text_mod,
                c.prop_mod,
                c.copied_from,
                diff,
            )

        usage = None
        if isinstance(tracker, ResourceUsageTracker):
            usage = tracker

        logger.debug("built changeset r%d: %d paths", rev, len(changed_paths))
        return Changeset(commit, changed_paths, usage)

# vim:set ts=8 sw=4 sts=4 tw=78 et:
