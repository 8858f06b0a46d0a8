#===============================================================================
# Imports
#===============================================================================
import logging

import svn
import svn.fs
import svn.core

from collections import (
    namedtuple,
)

from datetime import (
    datetime,
    timedelta,
    timezone,
)

from svnq.constants import (
    SVN_PROP_REVISION_LOG,
    SVN_PROP_REVISION_DATE,
    SVN_PROP_REVISION_AUTHOR,
    e,  # Errors
)

from svnq.engine import (
    translate_errors,
)

from svnq.errors import (
    RevisionNotFoundError,
)

from svnq.util import (
    decode_proplist,
)

#===============================================================================
# Globals
#===============================================================================
logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

#===============================================================================
# Named Tuples & Helper Methods
#===============================================================================
Commit = namedtuple(
    'Commit', (
        'revision',
        'author',
        'timestamp',
        'log',
    )
)

def parse_svn_date(value, pool=None):
    if not value:
        return None
    usecs = svn.core.svn_time_from_cstring(value, pool)
    return EPOCH + timedelta(microseconds=usecs)

def commit_from_revprops(rev, revprops, pool=None):
    return Commit(
        rev,
        revprops.get(SVN_PROP_REVISION_AUTHOR) or '',
        parse_svn_date(revprops.get(SVN_PROP_REVISION_DATE), pool),
        revprops.get(SVN_PROP_REVISION_LOG) or '',
    )

#===============================================================================
# Classes
#===============================================================================
class RevisionResolver(object):
    """
    Latest revision number and per-revision commit metadata.
    """
    def __init__(self, repo):
        self.repo = repo

    def latest_revision(self):
        return self.repo.youngest_rev()

    def commit_info(self, rev):
        repo = self.repo
        rev = repo.check_rev(rev)
        with repo.scratch_pool() as pool, translate_errors(rev=rev):
            props = svn.fs.revision_proplist(repo.fs, rev, pool)
            return commit_from_revprops(rev, decode_proplist(props), pool)

    def commits(self, from_rev, to_rev):
        repo = self.repo
        latest = repo.youngest_rev()
        from_rev = repo.check_rev(from_rev, latest)
        to_rev = repo.check_rev(to_rev, latest)
        if from_rev > to_rev:
            msg = e.InvalidRevisionRange % (from_rev, to_rev)
            raise RevisionNotFoundError(from_rev, latest, msg=msg)

        logger.debug("loading commits r%d:%d", from_rev, to_rev)
        commits = list()
        with repo.scratch_pool() as pool:
            for rev in range(from_rev, to_rev+1):
                with translate_errors(rev=rev, latest=latest):
                    props = svn.fs.revision_proplist(repo.fs, rev, pool)
                    commit = commit_from_revprops(
                        rev,
                        decode_proplist(props),
                        pool,
                    )
                commits.append(commit)
        return commits

# vim:set ts=8 sw=4 sts=4 tw=78 et:
