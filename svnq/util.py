#===============================================================================
# Imports
#===============================================================================
import os
import sys
import shutil
import atexit

from itertools import (
    chain,
    repeat,
)

from functools import (
    partial,
)

#===============================================================================
# Helper Methods
#===============================================================================
def bytes_to_mb(b):
    return '%0.3fMB' % (float(b)/1024.0/1024.0)

def iterable(i):
    if isinstance(i, str) or not hasattr(i, '__iter__'):
        return (i,)
    return i

def try_int(i):
    if not i:
        return
    try:
        i = int(i)
    except ValueError:
        return
    else:
        return i

def add_linesep_if_missing(s):
    return s if s.endswith(os.linesep) else s + os.linesep

def prepend_error_if_missing(s):
    return add_linesep_if_missing(
        s if s.startswith('error: ') else 'error: ' + s
    )

def file_exists_and_not_empty(path):
    """
    Returns `path` if it names a regular, non-empty file, None otherwise.
    """
    try:
        if os.path.isfile(path) and os.stat(path).st_size > 0:
            return path
    except OSError:
        pass
    return None

def try_remove_dir(path):
    shutil.rmtree(path, ignore_errors=True)

def try_remove_dir_atexit(path):
    atexit.register(try_remove_dir, path)

def from_svn(value):
    """
    Converts a value handed back by the Subversion bindings into text.

    Depending on the bindings version, paths, property names and property
    values come back as either `bytes` or `str`; we always hand `str` to
    our callers.  Undecodable bytes survive the trip via surrogateescape.

    >>> from_svn(b'trunk/Makefile')
    'trunk/Makefile'
    >>> from_svn('trunk')
    'trunk'
    >>> from_svn(None) is None
    True
    """
    if isinstance(value, bytes):
        return value.decode('utf-8', 'surrogateescape')
    return value

def to_svn(value):
    """
    The inverse of `from_svn`: text destined for the bindings.

    >>> to_svn('svn:special')
    b'svn:special'
    """
    if isinstance(value, str):
        return value.encode('utf-8', 'surrogateescape')
    return value

def decode_proplist(props):
    """
    >>> decode_proplist({b'svn:special': b'*'})
    {'svn:special': '*'}
    >>> decode_proplist(None)
    {}
    """
    if not props:
        return dict()
    return dict((from_svn(k), from_svn(v)) for (k, v) in props.items())

def render_text_table(rows, **kwds):
    banner = kwds.get('banner')
    footer = kwds.get('footer')
    output = kwds.get('output', sys.stdout)
    balign = kwds.get('balign', str.center)
    formats = kwds.get('formats')
    special = kwds.get('special')
    rows = list(rows)
    if not formats:
        formats = lambda: chain((str.ljust,), repeat(str.rjust))

    cols = len(rows[0])
    paddings = [
        max([len(str(r[i])) for r in rows]) + 2
            for i in range(cols)
    ]

    length = sum(paddings) + cols
    strip = '+%s+' % ('-' * (length-1))
    out = list()
    if banner:
        lines = iterable(banner)
        banner = [ strip ] + \
                 [ '|%s|' % balign(l, length-1) for l in lines ] + \
                 [ strip, ]
        out.append('\n'.join(banner))

    rows.insert(1, [ '-', ] * cols)
    out += [
        '\n'.join([
            k + '|'.join([
                fmt(str(column), padding, (
                    special if column == special else fill
                )) for (column, fmt, padding) in zip(row, fmts(), paddings)
            ]) + k for (row, fmts, fill, k) in zip(
                rows,
                chain(
                    repeat(lambda: repeat(str.center,), 1),
                    repeat(formats,)
                ),
                chain((' ',), repeat('-', 1), repeat(' ')),
                chain(('|', '+'), repeat('|'))
            )
        ] + [strip,])
    ]

    if footer:
        footers = iterable(footer)
        footer = [ strip ] + \
                 [ '|%s|' % balign(f, length-1) for f in footers ] + \
                 [ strip, '' ]
        out.append('\n'.join(footer))

    output.write(add_linesep_if_missing('\n'.join(out)))

#===============================================================================
# Memoize Helpers
#===============================================================================
# For instance methods only
class memoize(object):
    def __init__(self, func):
        self.func = func
    def __get__(self, obj, objtype=None):
        if obj is None:
            return self.func
        return partial(self, obj)
    def __call__(self, *args, **kw):
        obj = args[0]
        try:
            cache = obj.__cache
        except AttributeError:
            cache = obj.__cache = {}
        key = (self.func, args[1:], frozenset(kw.items()))
        try:
            res = cache[key]
        except KeyError:
            res = cache[key] = self.func(*args, **kw)
        return res

#===============================================================================
# Helper Classes
#===============================================================================
class Constant(dict):
    """
    Class attributes double as a reverse lookup table.

    >>> class _Colour(Constant):
    ...     Red = 1
    ...     Blue = 2
    >>> Colour = _Colour()
    >>> Colour.Red
    1
    >>> Colour[2]
    'Blue'
    """
    def __init__(self):
        items = self.__class__.__dict__.items()
        for (key, value) in filter(lambda t: t[0][:2] != '__', items):
            try:
                self[value] = key
            except TypeError:
                pass
    def __getattr__(self, name):
        return self.__getitem__(name)
    def __setattr__(self, name, value):
        return self.__setitem__(name, value)

class Pool(object):
    """
    Context manager yielding a scratch Subversion memory pool that is
    destroyed on exit.
    """
    def __init__(self, parent_pool=None):
        self.__parent_pool = parent_pool
        self.__pool = None

    def __enter__(self):
        import svn.core
        self.__pool = svn.core.Pool(self.__parent_pool)
        return self.__pool

    def __exit__(self, *exc_info):
        self.__pool.destroy()
        del self.__pool

class Options(dict):
    def __init__(self, values=None):
        values = values or dict()
        assert isinstance(values, dict)
        dict.__init__(self, **values)

    def __getattr__(self, name):
        if name not in self:
            return False
        else:
            return self.__getitem__(name)

class Dict(dict):
    """
    A dict that allows direct attribute access to keys.
    """
    def __getattr__(self, name):
        try:
            return self.__getitem__(name)
        except KeyError:
            raise AttributeError(name)
    def __setattr__(self, name, value):
        return self.__setitem__(name, value)

# vim:set ts=8 sw=4 sts=4 tw=78 et:
