#!/usr/bin/env python
import os
import sys

if sys.version_info < (3, 6):
    raise Exception("svnquery requires Python 3.6 or later.")

from setuptools import setup

# The Subversion Python bindings (svn.core, svn.fs, svn.repos) aren't on the
# package index; they ship with Subversion itself (e.g. the Debian/Ubuntu
# 'python3-subversion' package) and must be installed from there.

def find_packages(dir_):
    packages = []
    for pkg in ['svnq']:
        for _dir, subdirectories, files in (
                os.walk(os.path.join(dir_, pkg))
            ):
            if '__init__.py' in files:
                packages.append(os.path.relpath(_dir, dir_ or '.')
                                  .replace(os.sep, '.'))
    return packages

def run_setup():
    setup(
        name='svnquery',
        version='0.1',
        description='Read-only query and diff layer over Subversion repositories',
        packages=find_packages(''),
        package_dir={'svnq': 'svnq'},
        scripts=['scripts/svnq'],
        install_requires=['psutil'],
        python_requires='>=3.6',
    )

if __name__ == '__main__':
    run_setup()

# vim:set ts=8 sw=4 sts=4 tw=78 et:
