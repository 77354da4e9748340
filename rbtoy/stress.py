"""Randomised insert/delete workloads with periodic invariant checks."""

import random
import time

from . import log
from . import statusline
from .exception import DuplicateKeyError, InvariantError
from .tree.rbtree import RBTree
from .tree.invariants import TreeChecker

KEY_TYPES = ('float', 'int')
ORDERS = ('random', 'ascending', 'descending')
DELETE_MODES = ('none', 'all', 'alternate', 'mixed')

class StressRun(object):
    def __init__(self,
                 keys,
                 key_type='float',
                 order='random',
                 seed=None,
                 delete='none',
                 check_every=0,
                 stats=None):
        if keys < 0:
            raise ValueError("negative number of keys")
        if key_type not in KEY_TYPES:
            raise ValueError("unknown key type: " + str(key_type))
        if order not in ORDERS:
            raise ValueError("unknown key order: " + str(order))
        if delete not in DELETE_MODES:
            raise ValueError("unknown delete mode: " + str(delete))
        if check_every < 0:
            raise ValueError("negative check interval")

        self.keys = keys
        self.key_type = key_type
        self.order = order
        self.delete = delete
        self.check_every = check_every
        self.rng = random.Random(seed)
        self.tree = RBTree()
        self.result = None
        self.violation = None

        self.stats = stats if stats is not None else {}
        for name in ('inserted', 'duplicates', 'deleted', 'checks', 'ops'):
            self.stats[name] = 0

        self._phase = 'idle'
        self._done = 0
        self._total = 0
        self._starttime = None

    def keygen(self):
        """Generates the keys to insert, self.keys of them."""
        conv = float if self.key_type == 'float' else int
        if self.order == 'ascending':
            for i in range(1, self.keys + 1):
                yield conv(i)
        elif self.order == 'descending':
            for i in range(self.keys, 0, -1):
                yield conv(i)
        elif self.key_type == 'float':
            for _ in range(self.keys):
                yield self.rng.random()
        else:
            for _ in range(self.keys):
                yield self.rng.getrandbits(64)

    def _status(self):
        elapsed = time.monotonic() - self._starttime
        oprate = self.stats['ops'] / elapsed if elapsed > 0 else 0.0
        return (self._phase,
                self._done,
                self._total,
                len(self.tree),
                self.stats['inserted'],
                self.stats['duplicates'],
                self.stats['deleted'],
                self.stats['checks'],
                oprate)

    def _start_phase(self, phase, total):
        log.info(phase, " ", total, " keys")
        self._phase = phase
        self._done = 0
        self._total = total

    def _check(self):
        checker = TreeChecker(self.tree)
        result = checker.run()
        self.stats['checks'] += 1
        if not result.valid:
            raise InvariantError("after operation ", self.stats['ops'], ": ",
                                 checker.violation)
        log.debug1("invariants hold after ", self.stats['ops'],
                   " operations, black height ", result.black_height)
        return result

    def _mutated(self):
        self.stats['ops'] += 1
        if self.check_every and self.stats['ops'] % self.check_every == 0:
            self._check()
        log.update()

    def _insert(self, k):
        try:
            self.tree.insert(k)
        except DuplicateKeyError:
            log.debug2("skipping duplicate key ", repr(k))
            self.stats['duplicates'] += 1
            inserted = False
        else:
            log.debug3("inserted ", repr(k))
            self.stats['inserted'] += 1
            inserted = True
        self._mutated()
        return inserted

    def _delete(self, k):
        self.tree.delete(k)
        log.debug3("deleted ", repr(k))
        self.stats['deleted'] += 1
        self._mutated()

    def run(self):
        """Runs the workload and a final check.

        Returns the tree; the final CheckResult is kept in self.result.
        Raises InvariantError if a periodic check fails."""
        self._starttime = time.monotonic()
        log.logger.set_status_generator(self._status,
                statusline.format_statusline_stress)
        try:
            self._start_phase('inserting', self.keys)
            backup = []
            for k in self.keygen():
                if self._insert(k):
                    backup.append(k)
                if self.delete == 'mixed' and backup and \
                        self.rng.random() < 0.5:
                    self._delete(backup.pop())
                self._done += 1

            if self.delete == 'all':
                self.rng.shuffle(backup)
                victims = backup
            elif self.delete == 'alternate':
                victims = backup[1::2]
            else:
                victims = []
            if victims:
                self._start_phase('deleting', len(victims))
                for k in victims:
                    self._delete(k)
                    self._done += 1

            self._phase = 'checking'
            checker = TreeChecker(self.tree)
            self.result = checker.run()
            self.violation = checker.violation
            self.stats['checks'] += 1
        finally:
            log.logger.set_status_generator(None, None)

        log.info("finished {0:d} operations in {1:.3f}s".format(
            self.stats['ops'], time.monotonic() - self._starttime))
        return self.tree
