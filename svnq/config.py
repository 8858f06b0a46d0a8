#===============================================================================
# Imports
#===============================================================================
import os
import sys
import copy
import logging

from os.path import (
    expanduser,
)

from configparser import (
    RawConfigParser,
)

from svnq.util import (
    try_int,
    memoize,
    file_exists_and_not_empty,
)

from svnq.constants import (
    DEFAULT_MIME_TYPE,
)

#===============================================================================
# Globals
#===============================================================================
CONFIG = None

#===============================================================================
# Exceptions
#===============================================================================
class ConfigError(Exception):
    def __init__(self, section, option, msg):
        self.section = section
        self.option = option
        Exception.__init__(self, '[%s] %s: %s' % (section, option, msg))

class NoConfigObjectCreated(Exception):
    pass

#===============================================================================
# Helpers
#===============================================================================
def get_config():
    global CONFIG
    if not CONFIG:
        raise NoConfigObjectCreated()
    return CONFIG

def get_or_create_config():
    global CONFIG
    if not CONFIG:
        CONFIG = Config()
        CONFIG.load()
    return CONFIG

def clear_config_if_already_created():
    global CONFIG
    if CONFIG:
        CONFIG = None

#===============================================================================
# Classes
#===============================================================================
class Config(RawConfigParser):
    def __init__(self):
        RawConfigParser.__init__(self, interpolation=None)
        self.__filename = None
        self.__load_defaults()
        self._default_sections_copy = copy.deepcopy(self._sections)
        self.__validate()

    @property
    @memoize
    def possible_conf_filenames(self):
        return [
            f for f in (
                expanduser('~/.svnqrc'),
                os.path.join(sys.exec_prefix, 'etc', 'svnq.conf'),
                '/etc/svnq.conf',
                '/usr/local/etc/svnq.conf',
                os.environ.get('SVNQ_CONF') or None,
            ) if f
        ]

    @property
    def actual_conf_filenames(self):
        files = list(self.possible_conf_filenames)
        if self.__filename:
            files.append(self.__filename)
        return [ f for f in files if file_exists_and_not_empty(f) ]

    @property
    def filename(self):
        return self.__filename

    def load(self, filename=None):
        self.__filename = filename
        self.read(self.actual_conf_filenames)
        self.__validate()

    @property
    def modifications(self):
        """
        Return a dict of dicts representing the sections/options that have
        been modified from their default value.
        """
        current = self._sections
        default = self._default_sections_copy
        modified = {}
        for (section, options) in current.items():
            if section not in default:
                modified[section] = dict(options)
                continue

            for (option, value) in options.items():
                if value != default[section].get(option):
                    modified.setdefault(section, {})[option] = value

        return modified

    def __validate(self):
        dummy = (
            self.verbose,
            self.context_lines,
            self.chunk_size,
            self.cross_copies,
            self.log_level,
            self.track_resource_usage,
        )

    def __load_defaults(self):
        logfmt = '%(asctime)s %(name)s %(levelname)s %(message)s'

        self.add_section('main')
        self.set('main', 'verbose', '0')

        self.add_section('diff')
        self.set('diff', 'context-lines', '3')

        self.add_section('content')
        self.set('content', 'default-mime-type', DEFAULT_MIME_TYPE)
        self.set('content', 'chunk-size', '8192')

        self.add_section('history')
        self.set('history', 'cross-copies', '1')

        self.add_section('logging')
        self.set('logging', 'level', 'WARNING')
        self.set('logging', 'format', logfmt)

        self.add_section('perfmon')
        self.set('perfmon', 'track-resource-usage', '0')

    def optionxform(self, option):
        # Accept both 'context_lines' and 'context-lines' spellings.
        return option.lower().replace('_', '-')

    def _int(self, section, option, minimum=0):
        value = self.get(section, option)
        i = try_int(value)
        if i is None and value.strip() == '0':
            i = 0
        if i is None or i < minimum:
            raise ConfigError(
                section,
                option,
                "invalid value: '%s' (expected an integer >= %d)" % (
                    value,
                    minimum,
                )
            )
        return i

    def _bool(self, section, option):
        try:
            return self.getboolean(section, option)
        except ValueError:
            raise ConfigError(
                section,
                option,
                "invalid boolean: '%s'" % self.get(section, option)
            )

    @property
    def verbose(self):
        return self._bool('main', 'verbose')

    @property
    def context_lines(self):
        return self._int('diff', 'context-lines')

    def set_context_lines(self, lines):
        self.set('diff', 'context-lines', str(lines))
        self.__validate()

    @property
    def default_mime_type(self):
        return self.get('content', 'default-mime-type') or DEFAULT_MIME_TYPE

    @property
    def chunk_size(self):
        return self._int('content', 'chunk-size', minimum=1)

    def set_chunk_size(self, size):
        self.set('content', 'chunk-size', str(size))
        self.__validate()

    @property
    def cross_copies(self):
        return self._bool('history', 'cross-copies')

    @property
    def log_level(self):
        name = self.get('logging', 'level').upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ConfigError('logging', 'level', "invalid level: '%s'" % name)
        return level

    @property
    def log_format(self):
        return self.get('logging', 'format')

    @property
    def track_resource_usage(self):
        return self._bool('perfmon', 'track-resource-usage')

    def set_track_resource_usage(self, value):
        self.set('perfmon', 'track-resource-usage', '1' if value else '0')

# vim:set ts=8 sw=4 sts=4 tw=78 et:
