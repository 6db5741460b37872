# Copyright (c) 2009-2010 Six Apart Ltd.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice,
#   this list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of Six Apart Ltd. nor the names of its contributors may
#   be used to endorse or promote products derived from this software without
#   specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""

The multiplexed transfer set: a `Multi` drives several `Easy` transfers at
once and reports what they do as one stream of events.

Attach transfers with `Multi.add_handle()`, then iterate over
`Multi.perform()`::

    >>> for payload, kind, easy in multi.perform():
    ...     if kind == DATA:
    ...         bodies[easy].append(payload)
    ...     elif kind == ERROR:
    ...         log.error('%r failed: %s', easy, payload)

Starting a `perform()` sequence replaces the body and header callbacks of every
attached transfer, so their chunks arrive as events. Set the callbacks again
before performing such a transfer on its own.

"""

from collections import OrderedDict, deque, namedtuple
import logging

from curlobj.errors import TransferError
from curlobj.proxy import HandleWrapper, forwarder

log = logging.getLogger(__name__)

DATA = 'data'
HEADER = 'header'
DONE = 'done'
ERROR = 'error'

DEFAULT_WAIT_TIMEOUT = 1.0

Event = namedtuple('Event', ['payload', 'kind', 'transfer'])

_perform = forwarder('perform')
_wait = forwarder('wait')
_add_handle = forwarder('add_handle')
_remove_handle = forwarder('remove_handle')


class EventBuffer(object):

    """Events waiting to be yielded, queued per transfer.

    Each transfer's events come out in the order they went in. Across
    transfers the queues are taken in turn, so one busy transfer does not
    hold back the others.

    """

    def __init__(self):
        self._queues = OrderedDict()

    def append(self, transfer, kind, payload):
        queue = self._queues.get(transfer)
        if queue is None:
            queue = self._queues[transfer] = deque()
        queue.append(Event(payload, kind, transfer))

    def pop(self):
        for transfer, queue in self._queues.items():
            if queue:
                event = queue.popleft()
                self._queues.move_to_end(transfer)
                return event
        return None


class TransferEvents(object):

    """A single pass over the events of a `Multi`'s transfers.

    Creating the sequence installs buffering body and header callbacks on
    every attached transfer and drives the engine once. Each pull then
    returns a buffered event if there is one; otherwise, while transfers are
    still running, it waits for activity, drives the engine again, and
    collects finished transfers as `DONE` or `ERROR` events.

    The sequence is in one of four states: ``initializing`` while it is set
    up, ``draining`` while buffered events are handed out, ``awaiting``
    while it blocks on the engine, and ``exhausted`` once every transfer has
    finished or a drive step failed. An exhausted sequence stays exhausted.

    """

    INITIALIZING = 'initializing'
    DRAINING = 'draining'
    AWAITING = 'awaiting'
    EXHAUSTED = 'exhausted'

    def __init__(self, multi):
        self.multi = multi
        self.buffer = EventBuffer()
        self.state = self.INITIALIZING

        transfers = multi.handles()
        for transfer in transfers:
            transfer.setopt_writefunction(self._collector(transfer, DATA))
            transfer.setopt_headerfunction(self._collector(transfer, HEADER))

        # Approximates the engine's running count until it reports its own.
        self.remain = len(transfers)
        self._guard(_perform, multi)
        self.state = self.DRAINING
        log.debug('Started event sequence over %d transfers', self.remain)

    def _collector(self, transfer, kind):
        buffer = self.buffer

        def collect(chunk):
            buffer.append(transfer, kind, chunk)
        return collect

    def _guard(self, func, *args):
        try:
            return func(*args)
        except Exception:
            self.state = self.EXHAUSTED
            raise

    def __iter__(self):
        return self

    def __next__(self):
        while self.state != self.EXHAUSTED:
            event = self.buffer.pop()
            if event is not None:
                self.state = self.DRAINING
                return event
            if self.remain == 0:
                log.debug('Event sequence exhausted')
                self.state = self.EXHAUSTED
                break
            self.state = self.AWAITING
            self._guard(self._drive)
        raise StopIteration

    def _drive(self):
        multi = self.multi
        multi.wait()
        running = _perform(multi)
        log.debug('Drove transfers: %d running, %d before', running, self.remain)

        # A rising count means a transfer was attached, not that one finished.
        if running <= self.remain:
            while True:
                native, ok, err = multi.info_read()
                if native is None:
                    break
                transfer = multi.transfer_for(native)
                if transfer is None:
                    log.warning('Completion reported for untracked handle %r', native)
                    continue
                if ok:
                    self.buffer.append(transfer, DONE, ok)
                else:
                    self.buffer.append(transfer, ERROR, _as_transfer_error(err))
            self.remain = running


def _as_transfer_error(err):
    if isinstance(err, TransferError):
        return err
    return TransferError(err)


class Multi(HandleWrapper):

    """A set of transfers performed together."""

    kind = 'multi'

    def __init__(self, engine=None, wait_timeout=DEFAULT_WAIT_TIMEOUT):
        """Creates a `Multi` over a new native multi handle.

        Parameter `wait_timeout` is the longest time, in seconds, a
        `perform()` sequence blocks waiting for transfer activity before
        driving the engine again.

        """
        self._easy = []
        self.wait_timeout = wait_timeout
        super(Multi, self).__init__(engine)

    def _create(self):
        return self.engine.multi()

    def handles(self):
        """Returns the attached transfers, in the order they were added."""
        return tuple(self._easy)

    def transfer_for(self, native):
        """Returns the attached `Easy` wrapping the native handle `native`,
        or `None`."""
        for easy in self._easy:
            if easy._handle is native:
                return easy
        return None

    def add_handle(self, easy):
        """Attaches the `Easy` transfer `easy`."""
        result = _add_handle(self, easy.handle())
        self._easy.append(easy)
        return result

    def remove_handle(self, easy):
        """Detaches the `Easy` transfer `easy`. The transfer is not closed."""
        result = _remove_handle(self, easy.handle())
        try:
            self._easy.remove(easy)
        except ValueError:
            log.debug('Removed transfer %r was not tracked', easy)
        return result

    add = add_handle
    remove = remove_handle

    def wait(self, timeout=None):
        """Blocks until an attached transfer has activity or `timeout`
        seconds (by default, `wait_timeout`) pass."""
        if timeout is None:
            timeout = self.wait_timeout
        return _wait(self, timeout)

    def perform(self):
        """Returns a new `TransferEvents` sequence over the attached
        transfers.

        Each event is an `Event` triple of ``(payload, kind, transfer)``,
        where `kind` is one of `DATA`, `HEADER`, `DONE` or `ERROR`. Engine
        failures while driving the transfers raise `TransferError` and end
        the sequence.

        """
        return TransferEvents(self)
