#===============================================================================
# Imports
#===============================================================================
import os

from svnq.command import (
    Command,
    RepositoryCommand,
    RepositoryRevisionCommand,
    RepositoryRevisionRangeCommand,
)

from svnq.change import (
    ChangeKind,
)

from svnq.constants import (
    NodeKind,
)

from svnq.path import (
    format_file,
)

from svnq.repo import (
    create_repository,
)

#===============================================================================
# Globals
#===============================================================================
ACTION_LETTERS = {
    ChangeKind.Add      : 'A',
    ChangeKind.Copy     : 'A',
    ChangeKind.Modify   : 'M',
    ChangeKind.Delete   : 'D',
}

#===============================================================================
# Helpers
#===============================================================================
def format_commit(commit):
    date = commit.timestamp.strftime('%Y-%m-%d %H:%M:%S %z') \
        if commit.timestamp else '(no date)'
    nlines = len(commit.log.splitlines())
    header = 'r%d | %s | %s | %d line%s' % (
        commit.revision,
        commit.author or '(no author)',
        date,
        nlines,
        '' if nlines == 1 else 's',
    )
    return '\n'.join((header, '', commit.log))

#===============================================================================
# Commands
#===============================================================================
class CreateCommand(Command):
    path = None

    def run(self):
        path = os.path.abspath(self.path)
        with create_repository(path, conf=self.conf) as repo:
            self._out("created repository at %s (r%d)" % (
                repo.location,
                repo.latest_revision(),
            ))

class YoungestCommand(RepositoryCommand):
    def run(self):
        RepositoryCommand.run(self)
        self._out(str(self.youngest_rev))

class InfoCommand(RepositoryRevisionCommand):
    def run(self):
        RepositoryRevisionCommand.run(self)
        self._out(format_commit(self.repo.commit_info(self.rev)))

class LogCommand(RepositoryRevisionRangeCommand):
    separator = '-' * 72

    def run(self):
        RepositoryRevisionRangeCommand.run(self)
        (start, end) = (self.start_rev, self.end_rev)
        commits = self.repo.commits(min(start, end), max(start, end))
        if start > end:
            commits.reverse()
        self._out(self.separator)
        for commit in commits:
            self._out(format_commit(commit))
            self._out(self.separator)

class _PathCommand(object):
    repo_relpath = None

class HistoryCommand(RepositoryRevisionRangeCommand, _PathCommand):
    limit = 0

    def run(self):
        RepositoryRevisionRangeCommand.run(self)
        commits = self.repo.history_of(
            self.repo_relpath,
            self.start_rev,
            self.end_rev,
            self.limit,
        )
        for commit in commits:
            self._out('r%d | %s | %s' % (
                commit.revision,
                commit.author,
                commit.log.splitlines()[0] if commit.log else '',
            ))

class LastChangedCommand(RepositoryRevisionCommand, _PathCommand):
    def run(self):
        RepositoryRevisionCommand.run(self)
        rev = self.repo.last_path_rev(self.repo_relpath, self.rev)
        self._out(str(rev))

class LsCommand(RepositoryRevisionCommand, _PathCommand):
    def run(self):
        RepositoryRevisionCommand.run(self)
        for entry in self.repo.tree_entries(self.repo_relpath or '', self.rev):
            suffix = '/' if entry.kind == NodeKind.Directory else ''
            self._out(entry.name + suffix)

class CatCommand(RepositoryRevisionCommand, _PathCommand):
    def run(self):
        RepositoryRevisionCommand.run(self)
        with self.repo.file_content(self.repo_relpath, self.rev) as stream:
            for chunk in stream:
                self._raw(chunk)

class SizeCommand(RepositoryRevisionCommand, _PathCommand):
    def run(self):
        RepositoryRevisionCommand.run(self)
        self._out(str(self.repo.file_size(self.repo_relpath, self.rev)))

class MimeTypeCommand(RepositoryRevisionCommand, _PathCommand):
    def run(self):
        RepositoryRevisionCommand.run(self)
        self._out(self.repo.mime_type(self.repo_relpath, self.rev))

class PropgetCommand(RepositoryRevisionCommand, _PathCommand):
    propname = None

    def run(self):
        RepositoryRevisionCommand.run(self)
        value = self.repo.propget(self.repo_relpath, self.rev, self.propname)
        self._out(value)

class ProplistCommand(RepositoryRevisionCommand, _PathCommand):
    def run(self):
        RepositoryRevisionCommand.run(self)
        props = self.repo.proplist(self.repo_relpath, self.rev)
        for name in sorted(props):
            self._out('  %s: %s' % (name, props[name]))

class DiffCommand(RepositoryRevisionCommand, _PathCommand):
    def run(self):
        RepositoryRevisionCommand.run(self)
        self._raw(self.repo.diff(self.repo_relpath, self.rev))

class ChangesetCommand(RepositoryRevisionCommand):
    no_diff = False

    def run(self):
        RepositoryRevisionCommand.run(self)
        cs = self.repo.changeset(self.rev, suppress_diff=self.no_diff)
        self._out(format_commit(cs.commit))
        self._out('')
        self._out('Changed paths:')
        for c in cs:
            copied = ''
            if c.copied_from:
                copied = ' (from %s:%d)' % c.copied_from
            self._out('   %s %s%s' % (
                ACTION_LETTERS[c.change_kind],
                format_file(c.path),
                copied,
            ))
        diffs = [ c.diff for c in cs if c.diff ]
        if diffs:
            self._out('')
            for diff in diffs:
                self._raw(diff)
        if cs.usage is not None:
            cs.usage.results_to_table(output=self.estream)

# vim:set ts=8 sw=4 sts=4 tw=78 et:
