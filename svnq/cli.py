#===============================================================================
# Imports
#===============================================================================
import os
import re
import sys
import logging
import optparse
import textwrap

import svnq

from abc import (
    ABCMeta,
    abstractmethod,
)

from textwrap import (
    dedent,
)

from svnq.config import (
    Config,
    ConfigError,
)

from svnq.command import (
    CommandError,
)

from svnq.errors import (
    RepositoryError,
)

from svnq.util import (
    add_linesep_if_missing,
    prepend_error_if_missing,
    Dict,
    Options,
)

#===============================================================================
# CLI and CommandLine Classes
#===============================================================================
class CLI(metaclass=ABCMeta):
    __unknown_subcommand__ = "Unknown subcommand '%s'"
    __usage__ = "Type '%prog help' for usage."
    __help__ = """\
        Type '%prog help <subcommand>' for help on a specific subcommand.

        Available subcommands:"""

    def __init__(self, args):
        self.__args = args
        self.__help = self.__help__
        self.__commandlines_by_name = dict()
        self.__commandlines_by_shortname = dict()
        self.__load_commandlines()

        if not args:
            self.help()

        self.__process_commandline(args)

    @property
    @abstractmethod
    def program_name(self):
        raise NotImplementedError()

    @property
    @abstractmethod
    def commandline_subclasses(self):
        raise NotImplementedError()

    def __find_commandline_subclasses(self):
        l = list()
        for sc in self.commandline_subclasses:
            if sc.__name__[0] != '_':
                l.append((sc.__name__, sc))
            else:
                l += [ (ssc.__name__, ssc) for ssc in sc.__subclasses__() ]
        return l

    def __helpstr(self, name):
        return os.linesep + (' ' * 12) + name

    def __load_commandlines(self):
        subclasses = [
            sc[1] for sc in sorted(self.__find_commandline_subclasses())
        ]

        for subclass in subclasses:
            cl = subclass(self.program_name)
            assert cl.name not in self.__commandlines_by_name
            helpstr = self.__helpstr(cl.name)

            if cl.shortname:
                assert cl.shortname not in self.__commandlines_by_shortname
                self.__commandlines_by_shortname[cl.shortname] = cl
                helpstr += ' (%s)' % cl.shortname

            self.__help += helpstr
            self.__commandlines_by_name[cl.name] = cl

        # 'version' is intercepted in __process_commandline before the normal
        # lookup; it only needs to show up in the list of subcommands.
        self.__help += self.__helpstr('version')
        self.__commandlines_by_name['version'] = None

    def __find_commandline(self, cmdline):
        return self.__commandlines_by_name.get(cmdline,
               self.__commandlines_by_shortname.get(cmdline))

    def __process_commandline(self, args):
        cmdline = args.pop(0).lower()

        if cmdline and cmdline[0] != '_':
            if '-' not in cmdline and hasattr(self, cmdline):
                getattr(self, cmdline)(args)
                self._exit(0)
            elif cmdline in ('-v', '-V', '--version'):
                self.version()
            else:
                cl = self.__find_commandline(cmdline)
                if cl:
                    try:
                        cl.run(args)
                        self._exit(0)
                    except (CommandError, ConfigError, RepositoryError) as err:
                        self.__commandline_error(cl, str(err))

        self._error(
            os.linesep.join((
                self.__unknown_subcommand__ % cmdline,
                self.__usage__,
            ))
        )

    @classmethod
    def _exit(self, code):
        sys.exit(code)

    def __commandline_error(self, cl, msg):
        args = (self.program_name, cl.name, msg)
        msg = '%s %s failed: %s' % args
        sys.stderr.write(prepend_error_if_missing(msg))
        self._exit(1)

    def _error(self, msg):
        sys.stderr.write(
            add_linesep_if_missing(
                dedent(msg).replace(
                    '%prog', self.program_name
                )
            )
        )
        self._exit(1)

    def version(self, args=None):
        sys.stdout.write(add_linesep_if_missing(svnq.__version__))
        self._exit(0)

    def help(self, args=None):
        if args:
            l = [ args.pop(0), '-h' ]
            if args:
                l += args
            self.__process_commandline(l)
        else:
            self._error(self.__help + os.linesep)

class CommandHelpFormatter(optparse.IndentedHelpFormatter):
    def _default(self, txt):
        return txt + "\n" if txt else ""

    def format_description(self, description):
        return self._default(description)

class CommandLine(metaclass=ABCMeta):
    """
    The `CommandLine` class exposes `Command` classes via the `CLI` class.

    """
    _rev_ = None
    _conf_ = False
    _repo_ = False
    _path_ = False
    _argc_ = 0
    _vargc_ = None
    _usage_ = None
    _verbose_ = None
    _rev_range_ = None
    _shortname_ = None
    _description_ = None

    @property
    @abstractmethod
    def commands_module(self):
        raise NotImplementedError()

    def __init__(self, program_name):
        self.__program_name = program_name
        pattern = re.compile('[A-Z][^A-Z]*')
        self.classname = self.__class__.__name__
        tokens = [ t for t in pattern.findall(self.classname) ]
        assert tokens[-2:] == [ 'Command', 'Line' ]
        ccn = ''.join(tokens[:-1])
        self.command_classname = ccn
        self.command_class = getattr(self.commands_module, ccn)

        self.command = self.command_class(sys.stdin, sys.stdout, sys.stderr)

        tokens = [ t.lower() for t in tokens[:-2] ]
        self.name = '-'.join(t for t in tokens)
        self.shortname = None
        if self._shortname_ is not None:
            self.shortname = self._shortname_
        elif len(tokens) > 1:
            self.shortname = ''.join(t[0] for t in tokens)

        self.conf = Config()
        self.parser = None

    @property
    def program_name(self):
        return self.__program_name

    @property
    def _subcommand(self):
        return '%s %s' % (self.program_name, self.name)

    def _add_parser_options(self):
        pass

    def _pre_process_parser_results(self):
        pass

    def _process_parser_results(self):
        pass

    def _configure_logging(self):
        level = self.conf.log_level
        if self.conf.verbose or (self._verbose_ and self.options.verbose):
            level = logging.DEBUG
        logging.basicConfig(format=self.conf.log_format, stream=sys.stderr)
        logging.getLogger('svnq').setLevel(level)

    def usage_error(self, msg):
        self.parser.print_help()
        sys.stderr.write("\nerror: %s\n" % msg)
        self.parser.exit(status=1)

    def run(self, args):
        k = Dict()
        k.prog = self._subcommand
        if self._usage_:
            k.usage = self._usage_
        elif self._repo_ and self._path_:
            k.usage = '%prog [ options ] REPO_PATH PATH'
        elif self._repo_:
            k.usage = '%prog [ options ] REPO_PATH'
        if self._description_:
            k.description = self._description_

        k.formatter = CommandHelpFormatter()
        self.parser = optparse.OptionParser(**k)

        if self._verbose_:
            self.parser.add_option(
                '-v', '--verbose',
                dest='verbose',
                action='store_true',
                default=False,
                help="run in verbose mode [default: %default]"
            )

        if self._conf_:
            self.parser.add_option(
                '-c', '--conf',
                metavar='FILE',
                help="use alternate configuration file FILE"
            )

        if self._rev_:
            assert self._rev_range_ is None
            self.parser.add_option(
                '-r',
                dest='revision',
                metavar='ARG',
                action='store',
                default=None,
                help="revision [default: HEAD]"
            )

        if self._rev_range_:
            assert self._rev_ is None
            self.parser.add_option(
                '-r',
                dest='revision_range',
                metavar='ARG',
                action='store',
                default='0:HEAD',
                help="revision range [default: %default]"
            )

        self._add_parser_options()
        (opts, self.args) = self.parser.parse_args(args)

        # Ignore variable argument commands altogether.
        if self._vargc_ is not True:
            arglen = len(self.args)
            if arglen == 0 and self._argc_ != 0:
                self.parser.print_help()
                self.parser.exit(status=1)
            if len(self.args) != self._argc_ and self._argc_ != 0:
                self.usage_error("invalid number of arguments")

        self.options = Options(opts.__dict__)

        self._pre_process_parser_results()

        f = None
        if self._conf_:
            f = self.options.conf
            if f and not os.path.exists(f):
                self.usage_error("configuration file '%s' does not exist" % f)

        self.conf.load(filename=f)
        self.command.conf = self.conf
        self._configure_logging()

        if self._repo_:
            if len(self.args) < 1:
                self.usage_error("missing REPO_PATH argument")

            self.command.path = self.args.pop(0)

        if self._path_:
            if len(self.args) < 1:
                self.usage_error("missing PATH argument")

            self.command.repo_relpath = self.args.pop(0)

        if self._rev_:
            self.command.rev_str = self.options.revision

        if self._rev_range_:
            assert self.options.revision_range
            self.command.revision_range = self.options.revision_range

        self.command.args = self.args
        self.command.options = self.options
        self._process_parser_results()
        with self.command:
            self.command.run()

#===============================================================================
# svnq Command Lines
#===============================================================================
class SvnqCommandLine(CommandLine):
    _conf_ = True
    _repo_ = True
    _verbose_ = True

    @property
    def commands_module(self):
        import svnq.commands
        return svnq.commands

class SvnqCLI(CLI):

    @property
    def program_name(self):
        return 'svnq'

    @property
    def commandline_subclasses(self):
        return SvnqCommandLine.__subclasses__()

class CreateCommandLine(SvnqCommandLine):
    _argc_ = 1
    _description_ = textwrap.dedent("""\
        Create a new, empty repository at REPO_PATH.

        Fails if REPO_PATH already holds (or lives inside) a repository.
    """)

class YoungestCommandLine(SvnqCommandLine):
    _argc_ = 1
    _description_ = "Print the latest revision number of the repository."

class InfoCommandLine(SvnqCommandLine):
    _rev_ = True
    _argc_ = 1
    _description_ = "Show author, date and log message of a revision."

class LogCommandLine(SvnqCommandLine):
    _rev_range_ = True
    _argc_ = 1
    _description_ = textwrap.dedent("""\
        Show commit metadata for every revision in a range.

        Use -r FROM:TO; either side may be a number or HEAD.  A descending
        range prints newest first.
    """)

class HistoryCommandLine(SvnqCommandLine):
    _path_ = True
    _rev_range_ = True
    _argc_ = 2
    _description_ = textwrap.dedent("""\
        Show the commits that changed PATH within a revision range,
        following copies and renames.
    """)

    def _add_parser_options(self):
        self.parser.add_option(
            '-l', '--limit',
            dest='limit',
            type='int',
            default=0,
            help="show at most LIMIT commits (0 = no limit) [default: %default]"
        )

    def _process_parser_results(self):
        self.command.limit = self.options.limit

class LastChangedCommandLine(SvnqCommandLine):
    _path_ = True
    _rev_ = True
    _argc_ = 2
    _description_ = textwrap.dedent("""\
        Print the last revision (at or before -r) in which PATH was created
        or had its content or properties changed.
    """)

class LsCommandLine(SvnqCommandLine):
    _path_ = True
    _rev_ = True
    _vargc_ = True
    _usage_ = '%prog [ options ] REPO_PATH [PATH]'
    _description_ = "List the entries of a directory (default: the root)."

    def _pre_process_parser_results(self):
        if len(self.args) == 1:
            self.args.append('')
        elif len(self.args) != 2:
            self.usage_error("invalid number of arguments")

class CatCommandLine(SvnqCommandLine):
    _path_ = True
    _rev_ = True
    _argc_ = 2
    _description_ = "Write the raw bytes of a file to standard output."

class SizeCommandLine(SvnqCommandLine):
    _path_ = True
    _rev_ = True
    _argc_ = 2
    _description_ = "Print the size of a file in bytes."

class MimeTypeCommandLine(SvnqCommandLine):
    _path_ = True
    _rev_ = True
    _argc_ = 2
    _description_ = textwrap.dedent("""\
        Print the MIME type of a file, as set by its svn:mime-type property
        (default: application/octet-stream).
    """)

class PropgetCommandLine(SvnqCommandLine):
    _path_ = True
    _rev_ = True
    _argc_ = 3
    _shortname_ = 'pg'
    _usage_ = '%prog [ options ] REPO_PATH PATH PROPNAME'
    _description_ = "Print the value of a versioned property."

    def _process_parser_results(self):
        self.command.propname = self.args.pop(0)

class ProplistCommandLine(SvnqCommandLine):
    _path_ = True
    _rev_ = True
    _argc_ = 2
    _shortname_ = 'pl'
    _description_ = "List the versioned properties of a path."

class DiffCommandLine(SvnqCommandLine):
    _path_ = True
    _rev_ = True
    _argc_ = 2
    _description_ = textwrap.dedent("""\
        Print the unified diff of a file between the revision before -r and
        -r itself.
    """)

class ChangesetCommandLine(SvnqCommandLine):
    _rev_ = True
    _argc_ = 1
    _shortname_ = 'cs'
    _description_ = textwrap.dedent("""\
        Show a revision's commit metadata, the paths it changed and the
        content diff of each changed text file.
    """)

    def _add_parser_options(self):
        self.parser.add_option(
            '--no-diff',
            dest='no_diff',
            action='store_true',
            default=False,
            help="don't generate content diffs [default: %default]"
        )

    def _process_parser_results(self):
        self.command.no_diff = self.options.no_diff

#=============================================================================#
# Main                                                                        #
#=============================================================================#
def main():
    SvnqCLI(sys.argv[1:])

if __name__ == '__main__':
    main()

# vim:set ts=8 sw=4 sts=4 tw=78 et:
