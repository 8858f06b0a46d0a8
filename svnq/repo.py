#===============================================================================
# Imports
#===============================================================================
import os
import logging

import svn
import svn.fs
import svn.core
import svn.repos

from functools import (
    wraps,
)

from collections import (
    OrderedDict,
)

import svnq.engine as engine

from svnq.config import (
    get_or_create_config,
)

from svnq.constants import (
    e,  # Errors
)

from svnq.errors import (
    OpenError,
    ClosedError,
    CreateError,
    PathNotFoundError,
    NotADirectoryError,
    RevisionNotFoundError,
)

from svnq.path import (
    normalize_path,
)

from svnq.util import (
    from_svn,
    Pool,
)

from svnq.revision import (
    RevisionResolver,
)

from svnq.history import (
    PathHistoryResolver,
)

from svnq.tree import (
    TreeReader,
)

from svnq.content import (
    ContentReader,
)

from svnq.props import (
    PropertyStore,
)

from svnq.diff import (
    DiffEngine,
)

from svnq.change import (
    ChangesetBuilder,
)

#===============================================================================
# Globals
#===============================================================================
logger = logging.getLogger(__name__)

#===============================================================================
# Decorators & Helper Methods
#===============================================================================
def requires_open(f):
    @wraps(f)
    def wrapper(*args, **kwds):
        obj = args[0]
        if not obj.is_open:
            raise ClosedError()
        return f(*args, **kwds)
    return wrapper

def find_repository_root(location):
    """
    Returns the root of the repository containing `location`, or None when
    `location` isn't inside a repository.
    """
    with Pool() as pool:
        root = svn.repos.svn_repos_find_root_path(location, pool)
        return from_svn(root) if root else None

def open_repository(location, conf=None):
    return Repository(location, conf=conf).open()

def create_repository(location, conf=None):
    return Repository.create(location, conf=conf)

#===============================================================================
# Classes
#===============================================================================
class Repository(object):
    """
    A handle onto a Subversion repository on local disk.

    The handle owns the engine connection (repository object, filesystem
    pointer and the memory pool both live in) and a small cache of the most
    recently used revision roots.  Query components borrow the handle for
    the duration of a call and hold no state of their own.  A handle moves
    from unopened to open to closed; every query outside the open state
    raises `ClosedError`.

    A single handle is not safe for concurrent use; open one handle per
    concurrent reader instead.
    """
    max_cached_roots = 16

    def __init__(self, location, conf=None):
        self.__location = os.path.abspath(location)
        self.__conf = conf or get_or_create_config()

        self.__fs = None
        self.__pool = None
        self.__repos = None
        self.__roots = OrderedDict()

        self.__opened = False
        self.__closed = False

        self.revisions = RevisionResolver(self)
        self.history = PathHistoryResolver(self)
        self.tree = TreeReader(self)
        self.content = ContentReader(self)
        self.props = PropertyStore(self)
        self.diffs = DiffEngine(self)
        self.changesets = ChangesetBuilder(self)

    def __repr__(self):
        state = (
            'closed' if self.__closed else
            'open' if self.__opened else
            'unopened'
        )
        return '<%s %s (%s)>' % (
            self.__class__.__name__,
            self.__location,
            state,
        )

    #===========================================================================
    # Lifecycle
    #===========================================================================
    @classmethod
    def create(cls, location, conf=None):
        location = os.path.abspath(location)
        if find_repository_root(location):
            raise CreateError(location, e.RepositoryExists)

        logger.debug("creating repository at %s", location)
        engine.acquire()
        try:
            with Pool() as pool:
                svn.repos.create(location, None, None, None, None, pool)
        except svn.core.SubversionException as exc:
            raise CreateError(location, engine.error_message(exc)) from exc
        finally:
            engine.release()

        return cls(location, conf=conf).open()

    def open(self):
        if self.__closed:
            raise ClosedError(e.HandleAlreadyClosed)
        if self.__opened:
            raise OpenError(self.__location, e.HandleAlreadyOpen)

        root = find_repository_root(self.__location)
        if not root:
            raise OpenError(self.__location, e.NotARepository)

        engine.acquire()
        pool = svn.core.Pool()
        try:
            self.__repos = svn.repos.open(root, pool)
            self.__fs = svn.repos.fs(self.__repos)
        except svn.core.SubversionException as exc:
            pool.destroy()
            engine.release()
            self.__repos = None
            raise OpenError(self.__location, engine.error_message(exc)) from exc

        self.__pool = pool
        self.__location = root
        self.__opened = True
        logger.debug("opened repository %s", root)
        return self

    def close(self):
        if self.__closed:
            raise ClosedError(e.HandleAlreadyClosed)
        if not self.__opened:
            raise ClosedError()

        self.__closed = True
        self.__roots.clear()
        self.__fs = None
        self.__repos = None
        self.__pool.destroy()
        self.__pool = None
        engine.release()
        logger.debug("closed repository %s", self.__location)

    def __enter__(self):
        if not self.__opened:
            self.open()
        return self

    def __exit__(self, *exc_info):
        if self.is_open:
            self.close()

    @property
    def is_open(self):
        return self.__opened and not self.__closed

    @property
    def closed(self):
        return self.__closed

    @property
    def location(self):
        return self.__location

    @property
    def conf(self):
        return self.__conf

    #===========================================================================
    # Engine Access (used by the query components)
    #===========================================================================
    @property
    @requires_open
    def fs(self):
        return self.__fs

    @property
    @requires_open
    def pool(self):
        return self.__pool

    @requires_open
    def scratch_pool(self):
        return Pool(self.__pool)

    @requires_open
    def youngest_rev(self):
        with engine.translate_errors():
            return svn.fs.youngest_rev(self.__fs, self.__pool)

    def check_rev(self, rev, latest=None):
        """
        Returns `rev` as an int if it lies within [0, latest], raising
        `RevisionNotFoundError` otherwise.
        """
        if latest is None:
            latest = self.youngest_rev()
        try:
            valid = (
                not isinstance(rev, bool) and
                int(rev) == rev and
                0 <= rev <= latest
            )
        except (TypeError, ValueError):
            valid = False
        if not valid:
            raise RevisionNotFoundError(rev, latest)
        return int(rev)

    @property
    def cached_revisions(self):
        """
        Revisions whose roots are currently cached, least recently used
        first.
        """
        return list(self.__roots)

    @requires_open
    def root(self, rev):
        """
        Returns the revision root for `rev`.  Up to `max_cached_roots` roots
        are kept, each in its own child pool; the least recently used one is
        dropped when the cache is full.
        """
        rev = self.check_rev(rev)
        roots = self.__roots
        root = roots.get(rev)
        if root is not None:
            roots.move_to_end(rev)
            return root

        logger.debug("opening revision root r%d", rev)
        pool = svn.core.Pool(self.__pool)
        try:
            with engine.translate_errors(rev=rev):
                root = svn.fs.revision_root(self.__fs, rev, pool)
        except Exception:
            pool.destroy()
            raise

        roots[rev] = root
        while len(roots) > self.max_cached_roots:
            # Evicted roots aren't destroyed: a root keeps its pool alive for
            # as long as a stream or history walk still refers to it.
            (evicted, _) = roots.popitem(last=False)
            logger.debug("evicting revision root r%d", evicted)
        return root

    def node_kind(self, path, rev, pool=None):
        """
        Returns the `NodeKind` of `path` at `rev`, or None if nothing lives
        there.  If `pool` is given, a transient revision root is opened in it
        instead of going through the root cache.
        """
        path = normalize_path(path)
        with self.scratch_pool() as scratch:
            if pool is None:
                root = self.root(rev)
            else:
                with engine.translate_errors(rev=rev):
                    root = svn.fs.revision_root(self.__fs, rev, pool)
            try:
                with engine.translate_errors(path, rev):
                    kind = svn.fs.check_path(root, path, scratch)
            except NotADirectoryError:
                # One of the path's ancestors is a file.
                return None
        return engine.node_kind(kind)

    def require_kind(self, path, rev):
        kind = self.node_kind(path, rev)
        if kind is None:
            raise PathNotFoundError(normalize_path(path), rev)
        return kind

    #===========================================================================
    # Flat Query Surface
    #===========================================================================
    def latest_revision(self):
        return self.revisions.latest_revision()

    def commit_info(self, rev):
        return self.revisions.commit_info(rev)

    def commits(self, from_rev, to_rev):
        return self.revisions.commits(from_rev, to_rev)

    def last_path_rev(self, path, upper_bound):
        return self.history.last_path_rev(path, upper_bound)

    def history_of(self, path, from_rev, to_rev, limit=0):
        return self.history.history(path, from_rev, to_rev, limit)

    def tree_entries(self, path, rev):
        return self.tree.tree(path, rev)

    def file_size(self, path, rev):
        return self.content.file_size(path, rev)

    def mime_type(self, path, rev):
        return self.content.mime_type(path, rev)

    def file_content(self, path, rev):
        return self.content.file_content(path, rev)

    def propget(self, path, rev, key):
        return self.props.propget(path, rev, key)

    def proplist(self, path, rev):
        return self.props.proplist(path, rev)

    def diff(self, path, rev):
        return self.diffs.diff(path, rev)

    def changeset(self, rev, suppress_diff=False):
        return self.changesets.changeset(rev, suppress_diff)

# vim:set ts=8 sw=4 sts=4 tw=78 et:
