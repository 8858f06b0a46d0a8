#===============================================================================
# Imports
#===============================================================================
import difflib
import logging

from svnq.constants import (
    NodeKind,
    TEXTUAL_MIME_TYPES,
    SVN_PROP_MIME_TYPE,
    DIFF_INDEX_SEPARATOR,
    DIFF_NO_NEWLINE_MARKER,
    DIFF_BINARY_SNIFF_BYTES,
)

from svnq.errors import (
    NotAFileError,
    PathNotFoundError,
)

from svnq.path import (
    normalize_path,
)

#===============================================================================
# Globals
#===============================================================================
logger = logging.getLogger(__name__)

#===============================================================================
# Helper Methods
#===============================================================================
def is_textual_mime_type(mime_type):
    """
    >>> is_textual_mime_type('text/plain; charset=utf-8')
    True
    >>> is_textual_mime_type('image/x-xbitmap')
    True
    >>> is_textual_mime_type('application/octet-stream')
    False
    """
    mime_type = mime_type.split(';', 1)[0].strip().lower()
    return mime_type.startswith('text/') or mime_type in TEXTUAL_MIME_TYPES

def is_binary(data, mime_type=None):
    """
    Returns True if `data` should be treated as binary: either an explicit
    `svn:mime-type` marks it as non-textual, or a NUL byte shows up near the
    start of the content.

    >>> is_binary(b'Readme\\n')
    False
    >>> is_binary(b'\\x89PNG\\r\\n\\x1a\\n\\x00\\x00')
    True
    >>> is_binary(b'Readme\\n', 'application/pdf')
    True
    >>> is_binary(b'\\x00', 'text/plain')
    True
    """
    if mime_type and not is_textual_mime_type(mime_type):
        return True
    return b'\0' in data[:DIFF_BINARY_SNIFF_BYTES]

def split_lines(data):
    """
    Splits `data` on '\\n' only, keeping line endings.  A final line without
    a newline is kept as is.

    >>> split_lines(b'a\\r\\nb\\n')
    ['a\\r\\n', 'b\\n']
    >>> split_lines(b'a\\nb')
    ['a\\n', 'b']
    >>> split_lines(b'')
    []
    """
    text = data.decode('utf-8', 'surrogateescape')
    parts = text.split('\n')
    lines = [ p + '\n' for p in parts[:-1] ]
    if parts[-1]:
        lines.append(parts[-1])
    return lines

def format_range(start, stop):
    """
    Unified diff range, as `difflib` renders it.

    >>> format_range(0, 3)
    '1,3'
    >>> format_range(4, 5)
    '5'
    >>> format_range(0, 0)
    '0,0'
    """
    beginning = start + 1
    length = stop - start
    if length == 1:
        return '%d' % beginning
    if not length:
        beginning -= 1
    return '%d,%d' % (beginning, length)

def format_header(path, old_rev, new_rev):
    return '\n'.join((
        'Index: %s' % path,
        DIFF_INDEX_SEPARATOR,
        '--- %s\t(revision %d)' % (path, old_rev),
        '+++ %s\t(revision %d)' % (path, new_rev),
    )) + '\n'

def unified_diff(path, old, new, old_rev, new_rev, context=3, binary=False):
    """
    Renders the difference between the `old` and `new` byte strings as
    unified diff text headed with an `Index:` line.  Binary content only
    gets the header.

    >>> diff = unified_diff('TODO', b'', b'Readme\\n', 0, 6)
    >>> print(diff, end='')  # doctest: +NORMALIZE_WHITESPACE
    Index: TODO
    ===================================================================
    --- TODO	(revision 0)
    +++ TODO	(revision 6)
    @@ -0,0 +1 @@
    +Readme
    """
    out = [ format_header(path, old_rev, new_rev) ]
    if binary:
        return out[0]

    a = split_lines(old)
    b = split_lines(new)

    def emit(prefix, lines):
        for line in lines:
            out.append(prefix + line)
            if not line.endswith('\n'):
                out.append('\n' + DIFF_NO_NEWLINE_MARKER + '\n')

    matcher = difflib.SequenceMatcher(None, a, b, autojunk=False)
    for group in matcher.get_grouped_opcodes(context):
        (first, last) = (group[0], group[-1])
        out.append('@@ -%s +%s @@\n' % (
            format_range(first[1], last[2]),
            format_range(first[3], last[4]),
        ))
        for (tag, i1, i2, j1, j2) in group:
            if tag == 'equal':
                emit(' ', a[i1:i2])
                continue
            if tag in ('replace', 'delete'):
                emit('-', a[i1:i2])
            if tag in ('replace', 'insert'):
                emit('+', b[j1:j2])

    return ''.join(out)

#===============================================================================
# Classes
#===============================================================================
class DiffEngine(object):
    """
    Produces the unified diff of a file between `rev-1` and `rev`.  All the
    formatting happens in `unified_diff`; this class only loads the two
    snapshots.
    """
    def __init__(self, repo):
        self.repo = repo

    def snapshots(self, path, rev):
        """
        Returns `(old_bytes, new_bytes, old_rev, binary)` for `path@rev`.  A
        path that didn't exist as a file at `rev-1` has an empty old side
        labelled revision 0; a file deleted in `rev` has an empty new side.
        """
        path = normalize_path(path)
        repo = self.repo
        new_kind = repo.node_kind(path, rev)
        if new_kind == NodeKind.Directory:
            raise NotAFileError(path, rev)

        old_kind = repo.node_kind(path, rev-1) if rev > 0 else None
        if new_kind is None and old_kind != NodeKind.File:
            raise PathNotFoundError(path, rev)

        new = b''
        binary = False
        if new_kind == NodeKind.File:
            new = repo.content.file_bytes(path, rev)
            new_mime = repo.props.node_prop(path, rev, SVN_PROP_MIME_TYPE)
            binary = is_binary(new, new_mime)

        old = b''
        old_rev = 0
        if old_kind == NodeKind.File:
            old_rev = rev - 1
            old = repo.content.file_bytes(path, old_rev)
            old_mime = repo.props.node_prop(path, old_rev, SVN_PROP_MIME_TYPE)
            binary = binary or is_binary(old, old_mime)

        return (old, new, old_rev, binary)

    def diff(self, path, rev):
        path = normalize_path(path)
        (old, new, old_rev, binary) = self.snapshots(path, rev)
        logger.debug("diffing %s r%d:%d%s", path, old_rev, rev,
                     ' (binary)' if binary else '')
        context = self.repo.conf.context_lines
        return unified_diff(path, old, new, old_rev, rev, context, binary)

    def text_diff(self, path, rev):
        """
        As `diff`, but binary files yield an empty string instead of a bare
        header.
        """
        path = normalize_path(path)
        (old, new, old_rev, binary) = self.snapshots(path, rev)
        if binary:
            return ''
        context = self.repo.conf.context_lines
        return unified_diff(path, old, new, old_rev, rev, context)

# vim:set ts=8 sw=4 sts=4 tw=78 et:
