#===============================================================================
# Imports
#===============================================================================
import os

from abc import (
    ABCMeta,
    abstractmethod,
)

from svnq.repo import (
    open_repository,
)

from svnq.util import (
    add_linesep_if_missing,
)

#===============================================================================
# Helpers
#===============================================================================
def parse_rev(rev_str, youngest):
    """
    >>> parse_rev('HEAD', 9)
    9
    >>> parse_rev('4', 9)
    4
    >>> parse_rev('x', 9)
    Traceback (most recent call last):
        ...
    svnq.command.CommandError: invalid revision: 'x'
    """
    if rev_str is None or str(rev_str).upper() == 'HEAD':
        return youngest
    try:
        r = int(rev_str)
    except ValueError:
        raise CommandError("invalid revision: '%s'" % rev_str)
    if r < 0:
        raise CommandError("invalid revision: '%d'" % r)
    if r > youngest:
        m = "revision '%d' is too high, repository is only at r%d"
        raise CommandError(m % (r, youngest))
    return r

def parse_rev_range(rev_range, youngest):
    """
    Parses 'FROM:TO' (either side may be a number or HEAD, a missing side
    means 0 or HEAD respectively).  Descending ranges are allowed.

    >>> parse_rev_range('1:2', 9)
    (1, 2)
    >>> parse_rev_range('5:HEAD', 9)
    (5, 9)
    >>> parse_rev_range('HEAD:3', 9)
    (9, 3)
    >>> parse_rev_range(':4', 9)
    (0, 4)
    >>> parse_rev_range('7', 9)
    (7, 9)
    """
    if ':' not in rev_range:
        rev_range += ':HEAD'
    (start, end) = rev_range.split(':', 1)
    return (parse_rev(start or '0', youngest), parse_rev(end or 'HEAD', youngest))

#===============================================================================
# Commands
#===============================================================================
class CommandError(Exception):
    pass

class Command(metaclass=ABCMeta):
    def __init__(self, istream, ostream, estream):
        self.istream = istream
        self.ostream = ostream
        self.estream = estream

        self.conf = None
        self.args = None
        self.options = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self._deallocate()

    def _deallocate(self):
        """
        Called by `__exit__`.  Subclasses should implement this method in
        order to clean up any resources acquired by `run()` once the context
        has been left.
        """
        pass

    def _out(self, msg):
        """
        Write `msg` to the output stream.

        Does not prepend anything to `msg`.
        Adds trailing linesep to `msg` if there's not one already.
        """
        self.ostream.write(add_linesep_if_missing(msg))

    def _raw(self, data):
        """
        Write `data` to the output stream untouched.  Bytes go to the
        underlying binary buffer when the stream has one.
        """
        if isinstance(data, bytes):
            buf = getattr(self.ostream, 'buffer', None)
            if buf is not None:
                self.ostream.flush()
                buf.write(data)
                buf.flush()
                return
            data = data.decode('utf-8', 'surrogateescape')
        self.ostream.write(data)

    @abstractmethod
    def run(self):
        raise NotImplementedError

class RepositoryCommand(Command):
    path = None
    repo = None
    youngest_rev = None

    def _deallocate(self):
        if self.repo is not None and self.repo.is_open:
            self.repo.close()
        self.repo = None

    def run(self):
        assert self.path
        self.path = os.path.abspath(self.path)

        if not os.path.exists(self.path):
            m = "repository path does not exist: '%s'"
            raise CommandError(m % self.path)

        self.repo = open_repository(self.path, conf=self.conf)
        self.youngest_rev = self.repo.latest_revision()

class RepositoryRevisionCommand(RepositoryCommand):
    """
    Subclass of RepositoryCommand that supports a single revision argument.

    ``rev_str`` should be set to a string-representation of the revision
    argument prior to calling ``run()`` by the calling class (this is taken
    care of by ``svnq.cli.CommandLine``).  It will be validated and the
    resulting revision integer placed in ``rev``.  HEAD is used if
    ``rev_str`` is None.
    """
    rev_str = None
    rev = None

    def run(self):
        RepositoryCommand.run(self)
        self.rev = parse_rev(self.rev_str, self.youngest_rev)

class RepositoryRevisionRangeCommand(RepositoryCommand):
    revision_range = None

    start_rev = None
    end_rev = None

    def run(self):
        RepositoryCommand.run(self)
        rev_range = self.revision_range or '0:HEAD'
        (self.start_rev, self.end_rev) = (
            parse_rev_range(rev_range, self.youngest_rev)
        )

# vim:set ts=8 sw=4 sts=4 tw=78 et:
