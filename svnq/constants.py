#===============================================================================
# Imports
#===============================================================================
from svnq.util import (
    Constant,
)

#===============================================================================
# Globals
#===============================================================================
DEFAULT_MIME_TYPE = 'application/octet-stream'

# Well-known versioned property names.  Property bags are open ended; these
# are only the keys svnq itself interprets.
SVN_PROP_MIME_TYPE = 'svn:mime-type'
SVN_PROP_SPECIAL = 'svn:special'

# Revision properties.
SVN_PROP_REVISION_LOG = 'svn:log'
SVN_PROP_REVISION_DATE = 'svn:date'
SVN_PROP_REVISION_AUTHOR = 'svn:author'

# MIME types the engine treats as text even though they don't start with
# 'text/' (mirrors svn_mime_type_is_binary()).
TEXTUAL_MIME_TYPES = (
    'image/x-xbitmap',
    'image/x-xpixmap',
)

DIFF_INDEX_SEPARATOR = '=' * 67
DIFF_NO_NEWLINE_MARKER = '\\ No newline at end of file'
DIFF_BINARY_SNIFF_BYTES = 1024

#===============================================================================
# Node Kinds
#===============================================================================
class _NodeKind(Constant):
    File        = 'file'
    Directory   = 'directory'
NodeKind = _NodeKind()

#===============================================================================
# Errors
#===============================================================================
class _Errors(Constant):
    OpenFailed = "unable to open repository at '%s': %s"
    CreateFailed = "unable to create repository at '%s': %s"
    HandleClosed = 'repository handle is closed'
    HandleAlreadyClosed = 'repository handle has already been closed'
    HandleAlreadyOpen = 'repository handle is already open'
    NotARepository = 'not a repository'
    RepositoryExists = 'a repository already exists at that location'
    StreamClosed = 'read from a closed content stream'
    NoSuchRevision = 'no such revision %s (latest is %d)'
    InvalidRevisionRange = 'invalid revision range %d:%d'
    PathNotFound = "path '%s' not found in revision %d"
    NotADirectory = "path '%s' is not a directory in revision %d"
    NotAFile = "path '%s' is not a file in revision %d"
    PropertyNotFound = "property '%s' not set on '%s' in revision %d"
    EngineFailure = 'repository engine failure: %s'

e = _Errors()

# vim:set ts=8 sw=4 sts=4 tw=78 et:
