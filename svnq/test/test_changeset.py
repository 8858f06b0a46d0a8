#===============================================================================
# Imports
#===============================================================================
import unittest

from svnq.errors import (
    RevisionNotFoundError,
)

from svnq.test import (
    HAVE_SVN,
    SAMPLE_LOGS,
    requires_svn,
    SvnqTest,
)

from svnq.test.test_diff import (
    R5_MAKEFILE_DIFF,
    R6_TODO_DIFF,
)

if HAVE_SVN:
    from svnq.change import (
        ChangeKind,
        Changeset,
    )
    from svnq.perfmon import (
        ResourceUsageTracker,
    )

#===============================================================================
# Test Classes
#===============================================================================
@requires_svn
class TestChangeset(SvnqTest, unittest.TestCase):
    def test_01_r5_diff(self):
        repo = self.open_sample()
        cs = repo.changeset(5, False)
        self.assertIsInstance(cs, Changeset)
        self.assertEqual(cs.rev, 5)
        self.assertEqual(cs.paths, [ 'trunk/Makefile' ])
        c = cs['trunk/Makefile']
        self.assertEqual(c.change_kind, ChangeKind.Modify)
        self.assertTrue(c.text_modified)
        self.assertFalse(c.props_modified)
        self.assertEqual(c.diff, R5_MAKEFILE_DIFF)

    def test_02_r6_added_file(self):
        repo = self.open_sample()
        cs = repo.changeset(6, False)
        c = cs['trunk/TODO']
        self.assertEqual(c.change_kind, ChangeKind.Add)
        self.assertEqual(c.node_kind, 'file')
        self.assertIsNone(c.copied_from)
        self.assertEqual(c.diff, R6_TODO_DIFF)

    def test_03_r9_suppressed(self):
        repo = self.open_sample()
        cs = repo.changeset(9, True)
        self.assertEqual(cs['trunk/Makefile'].diff, '')
        self.assertEqual(cs.commit.log, 'White space change')
        self.assertEqual(cs.commit.log, SAMPLE_LOGS[9])

    def test_04_r9_not_suppressed(self):
        repo = self.open_sample()
        cs = repo.changeset(9, False)
        self.assertIn('-all:\n+all: \n', cs['trunk/Makefile'].diff)

    def test_05_suppression_covers_every_path(self):
        repo = self.open_sample()
        for rev in range(0, 12):
            for c in repo.changeset(rev, suppress_diff=True):
                self.assertEqual(c.diff, '', (rev, c.path))

    def test_06_r7_binary_and_directories(self):
        repo = self.open_sample()
        cs = repo.changeset(7)
        self.assertEqual(
            sorted(cs.paths),
            [
                'trunk/images',
                'trunk/images/logo.svg',
                'trunk/images/play.png',
            ],
        )
        images = cs['trunk/images']
        self.assertEqual(images.change_kind, ChangeKind.Add)
        self.assertEqual(images.node_kind, 'directory')
        self.assertEqual(images.diff, '')
        self.assertEqual(cs['trunk/images/play.png'].diff, '')
        self.assertEqual(cs['trunk/images/logo.svg'].diff, '')
        self.assertTrue(cs['trunk/images/logo.svg'].props_modified)

    def test_07_r8_rename(self):
        repo = self.open_sample()
        cs = repo.changeset(8)
        self.assertEqual(len(cs), 2)
        app = cs['trunk/src/app.go']
        self.assertEqual(app.change_kind, ChangeKind.Copy)
        self.assertEqual(app.copied_from, ('trunk/src/main.go', 7))
        self.assertFalse(app.text_modified)
        self.assertEqual(app.diff, '')
        main = cs['/trunk/src/main.go']
        self.assertEqual(main.change_kind, ChangeKind.Delete)
        self.assertIsNone(main.copied_from)
        self.assertEqual(main.diff, '')

    def test_08_r11_branch(self):
        repo = self.open_sample()
        cs = repo.changeset(11)
        self.assertEqual(cs.paths, [ 'branches/stable' ])
        c = cs['branches/stable']
        self.assertEqual(c.change_kind, ChangeKind.Copy)
        self.assertEqual(c.node_kind, 'directory')
        self.assertEqual(c.copied_from, ('trunk', 10))

    def test_09_commit_matches_commit_info(self):
        repo = self.open_sample()
        for rev in (1, 5, 11):
            self.assertEqual(repo.changeset(rev).commit, repo.commit_info(rev))

    def test_10_rev_zero_is_empty(self):
        repo = self.open_sample()
        cs = repo.changeset(0)
        self.assertEqual(len(cs), 0)
        self.assertEqual(list(cs), [])

    def test_11_out_of_range(self):
        repo = self.open_sample()
        self.assertRaises(RevisionNotFoundError, repo.changeset, 12)
        self.assertRaises(RevisionNotFoundError, repo.changeset, -1)

    def test_12_copy_and_modify(self):
        repo = self.create_repo()
        with repo.commit('add') as c:
            c.add_file('a.txt', b'one\n')
        with repo.commit('copy and edit') as c:
            c.copy('a.txt', 1, 'b.txt')
            c.put('b.txt', b'one\ntwo\n')
        with repo.open() as handle:
            b = handle.changeset(2)['b.txt']
        self.assertEqual(b.change_kind, ChangeKind.Copy)
        self.assertTrue(b.text_modified)
        self.assertEqual(b.copied_from, ('a.txt', 1))
        # The old side is empty: b.txt didn't exist in r1.
        self.assertIn('@@ -0,0 +1,2 @@\n+one\n+two\n', b.diff)

    def test_13_replace_without_history(self):
        repo = self.create_repo()
        with repo.commit('add') as c:
            c.add_file('a.txt', b'one\n')
        with repo.commit('replace') as c:
            c.delete('a.txt')
            c.add_file('a.txt', b'uno\n')
        with repo.open() as handle:
            a = handle.changeset(2)['a.txt']
            self.assertEqual(a.change_kind, ChangeKind.Add)
            self.assertIn('-one\n+uno\n', a.diff)

    def test_14_property_only_change(self):
        repo = self.create_repo()
        with repo.commit('add') as c:
            c.add_file('a.txt', b'one\n')
        with repo.commit('props') as c:
            c.propset('a.txt', 'svn:eol-style', 'native')
        with repo.open() as handle:
            a = handle.changeset(2)['a.txt']
        self.assertEqual(a.change_kind, ChangeKind.Modify)
        self.assertTrue(a.props_modified)
        self.assertFalse(a.text_modified)
        self.assertEqual(a.diff, '')

    def test_15_usage_off_by_default(self):
        repo = self.open_sample()
        self.assertIsNone(repo.changeset(5).usage)

@requires_svn
class TestChangesetResourceUsage(SvnqTest, unittest.TestCase):
    def test_01_usage_attached(self):
        repo = self.create_repo()
        with repo.commit('add') as c:
            c.add_file('a.txt', b'one\n')
        repo.conf.set_track_resource_usage(True)
        with repo.open() as handle:
            cs = handle.changeset(1)
        self.assertIsInstance(cs.usage, ResourceUsageTracker)
        names = [ name for (name, delta) in cs.usage.deltas ]
        self.assertEqual(
            names,
            [ 'commit_info', 'paths_changed', 'diff a.txt' ],
        )
        rows = cs.usage.get_results()
        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[0][0], 'commit_info')

if __name__ == '__main__':
    unittest.main()

# vim:set ts=8 sw=4 sts=4 tw=78 et:
