#===============================================================================
# Imports
#===============================================================================
import logging

import svn
import svn.fs
import svn.core

from functools import (
    partial,
)

import svnq.engine as engine

from svnq.constants import (
    NodeKind,
    SVN_PROP_MIME_TYPE,
    e,  # Errors
)

from svnq.errors import (
    ClosedError,
    NotAFileError,
)

from svnq.path import (
    normalize_path,
)

#===============================================================================
# Globals
#===============================================================================
logger = logging.getLogger(__name__)

#===============================================================================
# Classes
#===============================================================================
class FileContentStream(object):
    """
    Single-pass reader over the bytes of one file at one revision.

    The stream owns a child pool of the repository handle's pool and holds
    on to its revision root; `close()` releases both.  Bytes are handed back
    exactly as stored: no keyword or end-of-line translation is applied.
    """
    def __init__(self, repo, path, rev, chunk_size):
        self.path = path
        self.rev = rev
        self.chunk_size = chunk_size

        self._eof = False
        self._closed = False
        self._buffer = b''

        self._root = repo.root(rev)
        self._pool = svn.core.Pool(repo.pool)
        try:
            with engine.translate_errors(path, rev):
                self._stream = svn.fs.file_contents(
                    self._root,
                    path,
                    self._pool,
                )
        except Exception:
            self._pool.destroy()
            raise

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __iter__(self):
        return iter(partial(self.read, self.chunk_size), b'')

    @property
    def closed(self):
        return self._closed

    def _check_readable(self):
        if self._closed:
            raise ValueError(e.StreamClosed)
        # The handle was closed underneath us, taking our pool with it.
        if not self._pool.valid():
            raise ClosedError()

    def _fill(self, size):
        if self._eof:
            return b''
        with engine.translate_errors(self.path, self.rev):
            chunk = svn.core.svn_stream_read_full(self._stream, size)
        if not chunk or len(chunk) < size:
            self._eof = True
        return chunk or b''

    def read(self, n=-1):
        self._check_readable()
        if n is None or n < 0:
            chunks = [ self._buffer ]
            self._buffer = b''
            while not self._eof:
                chunks.append(self._fill(self.chunk_size))
            return b''.join(chunks)

        if len(self._buffer) < n:
            self._buffer += self._fill(n - len(self._buffer))
        (data, self._buffer) = (self._buffer[:n], self._buffer[n:])
        return data

    def readline(self):
        self._check_readable()
        while b'\n' not in self._buffer and not self._eof:
            self._buffer += self._fill(self.chunk_size)
        ix = self._buffer.find(b'\n')
        if ix == -1:
            (line, self._buffer) = (self._buffer, b'')
        else:
            (line, self._buffer) = (self._buffer[:ix+1], self._buffer[ix+1:])
        return line

    def readlines(self):
        return list(iter(self.readline, b''))

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._buffer = b''
        if self._pool.valid():
            try:
                svn.core.svn_stream_close(self._stream)
            finally:
                self._pool.destroy()
        self._stream = None
        self._root = None

class ContentReader(object):
    def __init__(self, repo):
        self.repo = repo

    def _require_file(self, path, rev):
        if self.repo.require_kind(path, rev) != NodeKind.File:
            raise NotAFileError(path, rev)

    def file_size(self, path, rev):
        path = normalize_path(path)
        repo = self.repo
        self._require_file(path, rev)
        root = repo.root(rev)
        with repo.scratch_pool() as pool, engine.translate_errors(path, rev):
            return svn.fs.file_length(root, path, pool)

    def mime_type(self, path, rev):
        """
        Returns the `svn:mime-type` of `path` at `rev`, falling back to the
        configured default (application/octet-stream) when it isn't set.
        """
        path = normalize_path(path)
        self._require_file(path, rev)
        value = self.repo.props.node_prop(path, rev, SVN_PROP_MIME_TYPE)
        return value or self.repo.conf.default_mime_type

    def file_content(self, path, rev):
        path = normalize_path(path)
        self._require_file(path, rev)
        chunk_size = self.repo.conf.chunk_size
        logger.debug("streaming %s@%d", path, rev)
        return FileContentStream(self.repo, path, rev, chunk_size)

    def file_bytes(self, path, rev):
        with self.file_content(path, rev) as stream:
            return stream.read()

# vim:set ts=8 sw=4 sts=4 tw=78 et:
