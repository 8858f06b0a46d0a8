#===============================================================================
# Imports
#===============================================================================
import inspect
import tempfile
import unittest

from os.path import (
    isdir,
    join,
)

from svnq.constants import (
    SVN_PROP_SPECIAL,
    SVN_PROP_MIME_TYPE,
    SVN_PROP_REVISION_LOG,
    SVN_PROP_REVISION_AUTHOR,
)

from svnq.path import (
    normalize_path,
)

from svnq.util import (
    to_svn,
    try_remove_dir,
    try_remove_dir_atexit,
)

from svnq.config import (
    Config,
)

#===============================================================================
# Globals
#===============================================================================
try:
    import svn.core
    HAVE_SVN = True
except ImportError:
    HAVE_SVN = False

requires_svn = unittest.skipUnless(
    HAVE_SVN,
    "Subversion Python bindings are not installed"
)

TEST_ROOT = None

#===============================================================================
# Sample History
#===============================================================================
SAMPLE_AUTHOR = 'lz'

MAKEFILE_EXPORTS = (
    b'export GOPATH := $(CURDIR)\n'
    b'export LIBGIT_INSTALL_PREFIX := $(CURDIR)/vendor/libgit2_bin\n'
    b'export LIBGIT_SRC_PATH := $(CURDIR)/vendor/libgit2\n'
)

MAKEFILE_HEADER = b'# Make file to build newbc project\n'

MAKEFILE_R1 = MAKEFILE_EXPORTS + (
    b'\n'
    b'all:\n'
    b'\tgo build ./...\n'
)

MAKEFILE_R3 = MAKEFILE_R1 + (
    b'\n'
    b'libgit2:\n'
    b'\tmkdir -p $(LIBGIT_SRC_PATH)/build\n'
    b'\tcd $(LIBGIT_SRC_PATH)/build && cmake .. \\\n'
    b'\t\t-DCMAKE_INSTALL_PREFIX=$(LIBGIT_INSTALL_PREFIX) \\\n'
    b'\t\t-DBUILD_SHARED_LIBS=OFF -DTHREADSAFE=ON\n'
    b'\tcd $(LIBGIT_SRC_PATH)/build && cmake --build . --target install\n'
    b'\n'
    b'test:\n'
    b'\tgo test ./...\n'
)

def pad(data, size):
    """
    Pads `data` with '#' comment lines so that it's exactly `size` bytes.
    """
    remaining = size - len(data)
    assert remaining >= 2, (len(data), size)
    lines = list()
    while remaining >= 74:
        lines.append(b'#' * 71 + b'\n')
        remaining -= 72
    lines.append(b'#' * (remaining - 1) + b'\n')
    return data + b''.join(lines)

MAKEFILE_R4 = pad(
    MAKEFILE_R3 + (
        b'\n'
        b'clean:\n'
        b'\trm -rf $(LIBGIT_SRC_PATH)/build $(LIBGIT_INSTALL_PREFIX)\n'
        b'\tgo clean ./...\n'
        b'\n'
        b'.PHONY: all libgit2 test clean\n'
        b'\n'
    ),
    1244,
)

MAKEFILE_R5 = MAKEFILE_HEADER + MAKEFILE_R4

MAKEFILE_R9 = MAKEFILE_R5.replace(b'all:\n', b'all: \n', 1)

MAIN_GO = (
    b'package main\n'
    b'\n'
    b'import "fmt"\n'
    b'\n'
    b'func main() {\n'
    b'\tfmt.Println("newbc")\n'
    b'}\n'
)

TODO = b'Readme\n'

PLAY_PNG = (
    b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x10\x00\x00\x00\x10'
    b'\x08\x06\x00\x00\x00\x1f\xf3\xffa\x00\x00\x00\x00IEND\xaeB`\x82'
)

LOGO_SVG = b'<svg xmlns="http://www.w3.org/2000/svg"/>\n'

IMG_LINK = b'link images'

SAMPLE_LOGS = {
    1: 'Initial layout',
    2: 'Add main package',
    3: 'Add libgit2 and test targets',
    4: 'Add clean target',
    5: 'Describe the Makefile',
    6: 'Add TODO',
    7: 'Add images',
    8: 'Rename main.go to app.go',
    9: 'White space change',
    10: 'Add img link',
    11: 'Branch stable',
}

def build_sample_history(repo):
    """
    Commits the sample history (r1-r11) to the empty `TestRepo` `repo`:

        r1  mkdir trunk, branches; add trunk/Makefile
        r2  mkdir trunk/src; add trunk/src/main.go
        r3  modify trunk/Makefile
        r4  modify trunk/Makefile (1244 bytes)
        r5  prepend a header line to trunk/Makefile (1279 bytes)
        r6  add trunk/TODO
        r7  add trunk/images/{play.png,logo.svg}; logo.svg has a mime-type
        r8  move trunk/src/main.go -> trunk/src/app.go
        r9  whitespace only change to trunk/Makefile
        r10 add trunk/img (svn:special symlink)
        r11 copy trunk@10 -> branches/stable
    """
    commit = repo.commit

    with commit(SAMPLE_LOGS[1]) as c:
        c.mkdir('trunk')
        c.mkdir('branches')
        c.add_file('trunk/Makefile', MAKEFILE_R1)

    with commit(SAMPLE_LOGS[2]) as c:
        c.mkdir('trunk/src')
        c.add_file('trunk/src/main.go', MAIN_GO)

    with commit(SAMPLE_LOGS[3]) as c:
        c.put('trunk/Makefile', MAKEFILE_R3)

    with commit(SAMPLE_LOGS[4]) as c:
        c.put('trunk/Makefile', MAKEFILE_R4)

    with commit(SAMPLE_LOGS[5]) as c:
        c.put('trunk/Makefile', MAKEFILE_R5)

    with commit(SAMPLE_LOGS[6]) as c:
        c.add_file('trunk/TODO', TODO)

    with commit(SAMPLE_LOGS[7]) as c:
        c.mkdir('trunk/images')
        c.add_file('trunk/images/play.png', PLAY_PNG)
        c.add_file(
            'trunk/images/logo.svg',
            LOGO_SVG,
            props={ SVN_PROP_MIME_TYPE: 'image/svg+xml' },
        )

    with commit(SAMPLE_LOGS[8]) as c:
        c.copy('trunk/src/main.go', 7, 'trunk/src/app.go')
        c.delete('trunk/src/main.go')

    with commit(SAMPLE_LOGS[9]) as c:
        c.put('trunk/Makefile', MAKEFILE_R9)

    with commit(SAMPLE_LOGS[10]) as c:
        c.add_file(
            'trunk/img',
            IMG_LINK,
            props={ SVN_PROP_SPECIAL: '*' },
        )

    with commit(SAMPLE_LOGS[11]) as c:
        c.copy('trunk', 10, 'branches/stable')

    return repo

_sample_repo = None
def sample_repo():
    """
    Returns the `TestRepo` holding the sample history, building it on first
    use.  The repository is shared by every test in the process and must not
    be committed to.
    """
    global _sample_repo
    if _sample_repo is None:
        repo = TestRepo('sample')
        repo.create()
        build_sample_history(repo)
        _sample_repo = repo
    return _sample_repo

def get_test_root():
    global TEST_ROOT
    if TEST_ROOT is None:
        TEST_ROOT = tempfile.mkdtemp(prefix='svnq-test-')
        if not TestRepo.keep:
            try_remove_dir_atexit(TEST_ROOT)
    return TEST_ROOT

#===============================================================================
# Classes
#===============================================================================
class TestCommit(object):
    """
    Builds a single revision straight through the filesystem layer of the
    bindings; use as a context manager.  The transaction is committed when
    the block exits cleanly and aborted otherwise.  The new revision number
    is available as `rev` afterwards.
    """
    def __init__(self, repo, log, author):
        self.repo = repo
        self.log = log
        self.author = author

        self.rev = None
        self.txn = None
        self.root = None
        self.pool = None

    def __enter__(self):
        import svn.fs
        self.pool = svn.core.Pool()
        fs = self.repo.fs
        base = svn.fs.youngest_rev(fs, self.pool)
        self.txn = svn.fs.begin_txn2(fs, base, 0, self.pool)
        self._txn_prop(SVN_PROP_REVISION_AUTHOR, self.author)
        self._txn_prop(SVN_PROP_REVISION_LOG, self.log)
        self.root = svn.fs.txn_root(self.txn, self.pool)
        return self

    def __exit__(self, *exc_info):
        import svn.fs
        try:
            if exc_info[0] is None:
                (conflict, self.rev) = svn.fs.commit_txn(self.txn, self.pool)
            else:
                svn.fs.abort_txn(self.txn, self.pool)
        finally:
            self.pool.destroy()
            self.pool = None

    def _txn_prop(self, name, value):
        import svn.fs
        svn.fs.change_txn_prop(self.txn, name, to_svn(value), self.pool)

    def mkdir(self, path):
        import svn.fs
        svn.fs.make_dir(self.root, normalize_path(path), self.pool)

    def put(self, path, contents):
        import svn.fs
        import svn.delta
        path = normalize_path(path)
        (handler, baton) = svn.fs.apply_textdelta(
            self.root,
            path,
            None,
            None,
            self.pool,
        )
        svn.delta.svn_txdelta_send_string(contents, handler, baton, self.pool)

    def add_file(self, path, contents, props=None):
        import svn.fs
        path = normalize_path(path)
        svn.fs.make_file(self.root, path, self.pool)
        self.put(path, contents)
        for (name, value) in (props or dict()).items():
            self.propset(path, name, value)

    def propset(self, path, name, value):
        import svn.fs
        svn.fs.change_node_prop(
            self.root,
            normalize_path(path),
            name,
            to_svn(value),
            self.pool,
        )

    def propdel(self, path, name):
        import svn.fs
        svn.fs.change_node_prop(
            self.root,
            normalize_path(path),
            name,
            None,
            self.pool,
        )

    def copy(self, src_path, src_rev, dst_path):
        import svn.fs
        fs = self.repo.fs
        src_root = svn.fs.revision_root(fs, src_rev, self.pool)
        svn.fs.copy(
            src_root,
            normalize_path(src_path),
            self.root,
            normalize_path(dst_path),
            self.pool,
        )

    def delete(self, path):
        import svn.fs
        svn.fs.delete(self.root, normalize_path(path), self.pool)

class TestRepo(object):
    keep = False
    author = SAMPLE_AUTHOR

    def __init__(self, name):
        self.name = name
        self.path = join(get_test_root(), name)
        self.conf = Config()

        self.pool = None
        self.repos = None
        self.fs = None

    def create(self):
        import svn.repos
        from svnq.repo import create_repository

        if isdir(self.path):
            try_remove_dir(self.path)

        with create_repository(self.path, conf=self.conf):
            pass

        self.pool = svn.core.Pool()
        self.repos = svn.repos.open(self.path, self.pool)
        self.fs = svn.repos.fs(self.repos)
        return self

    def open(self):
        from svnq.repo import open_repository
        return open_repository(self.path, conf=self.conf)

    def commit(self, log, author=None):
        return TestCommit(self, log, author or self.author)

class SvnqTest(object):
    repo = None

    @property
    def repo_name(self):
        # Helper method; can be called from derived classes for a convenient
        # way to get at the repo name without needing to create the repo.
        test_name = inspect.currentframe().f_back.f_code.co_name
        return '_'.join((self.__class__.__name__, test_name))

    def create_repo(self):
        test_name = inspect.currentframe().f_back.f_code.co_name
        repo_name = '_'.join((self.__class__.__name__, test_name))
        repo = TestRepo(repo_name)
        repo.create()
        self.repo = repo
        return repo

    def open_sample(self):
        """
        Opens a fresh handle onto the shared sample repository and arranges
        for it to be closed when the test finishes.
        """
        handle = sample_repo().open()
        self.addCleanup(self._close_quietly, handle)
        return handle

    def _close_quietly(self, handle):
        if handle.is_open:
            handle.close()

# vim:set ts=8 sw=4 sts=4 tw=78 et:
