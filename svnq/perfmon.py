#===============================================================================
# Imports
#===============================================================================
import os
import sys

import psutil

from itertools import (
    chain,
    repeat,
)

from collections import (
    namedtuple,
)

from svnq.util import (
    bytes_to_mb,
    render_text_table,
    Dict,
)

#===============================================================================
# Named Tuples & Helper Methods
#===============================================================================
ResourceUsageSnapshot = namedtuple(
    'ResourceUsageSnapshot', (
        'rss',
        'vms',
        'open_files',
        'num_threads',
        'cpu_percent',
        'cpu_user_time',
        'cpu_sys_time',
        'memory_percent',
    )
)

ResourceUsageDelta = namedtuple(
    'ResourceUsageDelta', (
        '%s_delta' % s for s in ResourceUsageSnapshot._fields
    ),
)

def create_resource_usage_snapshot(p):
    assert isinstance(p, psutil.Process)
    mem = p.memory_info()
    cpu = p.cpu_times()
    return ResourceUsageSnapshot(
        mem.rss,
        mem.vms,
        len(p.open_files()),
        p.num_threads(),
        p.cpu_percent(),
        cpu.user,
        cpu.system,
        p.memory_percent(),
    )

def create_resource_usage_delta(before, after):
    args = [
        (getattr(after, f) - getattr(before, f))
            for f in ResourceUsageSnapshot._fields
    ]
    return ResourceUsageDelta(*args)

#===============================================================================
# Classes
#===============================================================================
class ResourceUsageContext(object):
    def __init__(self, tracker, msg):
        self.msg     = msg
        self.after   = None
        self.depth   = None
        self.delta   = None
        self.before  = None
        self.tracker = tracker

    def __enter__(self):
        self.before = create_resource_usage_snapshot(self.tracker.proc)
        self.depth = self.tracker._enter(self)
        return self

    def __exit__(self, *exc_info):
        self.after = create_resource_usage_snapshot(self.tracker.proc)
        self.delta = create_resource_usage_delta(self.before, self.after)
        self.tracker._exit(self)

class ResourceUsageResultsFormatter(object):
    def format(self, name, value, context):
        formatter = getattr(self, name, None)
        if formatter is None:
            formatter = getattr(self, type(value).__name__, None)
        if formatter is None:
            return str(value)
        return formatter(value, context)

    def rss_delta(self, value, context):
        return bytes_to_mb(value)

    def vms_delta(self, value, context):
        return bytes_to_mb(value)

    def float(self, value, context):
        return '%0.3f' % value

    def name(self, value, context):
        prefix = '' if context.depth == 1 else ' ' * ((context.depth-1) * 2)
        return prefix + value

class ResourceUsageTracker(object):
    """
    Records psutil snapshots around each `track()` block and keeps the
    before/after deltas, in entry order, for later reporting.
    """
    def __init__(self, msg):
        self.msg = msg
        self.proc = psutil.Process(os.getpid())
        self.current_depth = 0
        self.contexts = list()

    @property
    def deltas(self):
        return [ (c.msg, c.delta) for c in self.contexts ]

    def __iter__(self):
        return iter(self.contexts)

    def _enter(self, ctx):
        'Called by ResourceUsageContext.__enter__.  Returns current depth.'
        self.current_depth += 1
        self.contexts.append(ctx)
        return self.current_depth

    def _exit(self, ctx):
        """Called by ResourceUsageContext.__exit__."""
        self.current_depth -= 1

    def track(self, msg):
        return ResourceUsageContext(self, msg)

    def get_results_header(self):
        return ('name', ) + ResourceUsageDelta._fields

    def get_results(self, formatter=None):
        if not formatter:
            formatter = ResourceUsageResultsFormatter()

        return [
            [
                formatter.format(name, value, context)
                    for (name, value) in chain(
                        (('name', context.msg),),
                        zip(ResourceUsageDelta._fields, context.delta),
                    )
            ] for context in self.contexts if context.delta is not None
        ]

    def results_to_table(self, output=None, formatter=None):
        if not output:
            output = sys.stdout

        k = Dict()
        k.output  = output
        k.banner  = "%s: Resource Usage Deltas" % self.msg
        k.formats = lambda: chain((str.ljust,), repeat(str.rjust))

        results = chain(
            (self.get_results_header(),),
            self.get_results(formatter=formatter),
        )
        render_text_table(results, **k)

class DummyResourceUsageTracker(object):
    msg = None
    deltas = ()

    def track(self, *args):
        return self

    def __enter__(self):
        return self

    def __exit__(self, *args):
        pass

# vim:set ts=8 sw=4 sts=4 tw=78 et:
