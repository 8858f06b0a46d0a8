#===============================================================================
# Imports
#===============================================================================
import posixpath

#===============================================================================
# Helper Methods
#===============================================================================
def normalize_path(path):
    """
    Turns a caller supplied repository path into the form handed to the
    engine: no leading or trailing slash, no empty or '.' components.  The
    repository root is the empty string.

    >>> normalize_path('/trunk/Makefile')
    'trunk/Makefile'
    >>> normalize_path('trunk/images/')
    'trunk/images'
    >>> normalize_path('//trunk//./TODO')
    'trunk/TODO'
    >>> normalize_path('/')
    ''
    >>> normalize_path(None)
    ''
    """
    if not path:
        return ''
    parts = [ p for p in path.split('/') if p and p != '.' ]
    return '/'.join(parts)

def join_path(*args):
    """
    >>> join_path('trunk', 'images', 'play.png')
    'trunk/images/play.png'
    >>> join_path('', 'trunk')
    'trunk'
    """
    return normalize_path(posixpath.join(*[ a for a in args if a ]))

def format_file(path):
    """
    >>> format_file('trunk/TODO')
    '/trunk/TODO'
    """
    return '/' + normalize_path(path)

# vim:set ts=8 sw=4 sts=4 tw=78 et:
