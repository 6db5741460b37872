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

The attribute proxy shared by the `curlobj` handle wrappers.

A wrapper defines only the handful of methods that add behavior of their own.
Every other method name is looked up on the wrapped native handle; if the
native handle's type offers a public callable of that name, the wrapper
synthesizes a forwarding method for it, caches it on the instance, and returns
it. Native setters return the native handle when they succeed, and the
forwarder turns that into the wrapper itself, so calls chain::

    >>> easy.setopt_url(url).setopt_followlocation(True).perform()

"""

import logging
import types

from curlobj.engine import default_engine
from curlobj.errors import (HandleClosedError, InitError, TransferError,
    UnsupportedValueError)

log = logging.getLogger(__name__)

_capabilities = {}


def capabilities(native_type):
    """Returns the names of the public callables offered by the native
    handle type `native_type`.

    The table for each type is built once and reused for the life of the
    process.

    """
    try:
        return _capabilities[native_type]
    except KeyError:
        pass
    names = frozenset(
        name for name in dir(native_type)
        if not name.startswith('_') and callable(getattr(native_type, name, None))
    )
    _capabilities[native_type] = names
    return names


def forwarder(name):
    """Makes a method that calls the native handle's `name` operation.

    The wrapper's native handle is passed implicitly. If the operation
    returns the native handle, the method returns the wrapper; otherwise the
    operation's result is returned as is. Engine errors are raised as
    `TransferError`.

    """
    def forward(self, *args, **kwargs):
        handle = self.handle()
        try:
            result = getattr(handle, name)(*args, **kwargs)
        except self.engine.error as exc:
            raise TransferError(exc) from exc
        if result is handle:
            return self
        return result
    forward.__name__ = name
    return forward


def flag_setter(option, flags):
    """Makes a ``setopt_<option>`` method accepting only the symbolic names
    in `flags`.

    `flags` maps each accepted name to the name of the engine constant to
    pass on to the native setter. Any other value raises
    `UnsupportedValueError`.

    """
    forward = forwarder('setopt_' + option)

    def setopt(self, value):
        try:
            constant = flags[value]
        except (KeyError, TypeError):
            raise UnsupportedValueError(value, flags) from None
        return forward(self, getattr(self.engine, constant))
    setopt.__name__ = 'setopt_' + option
    return setopt


class HandleWrapper(object):

    """The base of the wrapper types: owns one native handle and forwards
    unknown methods to it."""

    kind = 'native'

    def __init__(self, engine=None):
        if engine is None:
            engine = default_engine()
        self.engine = engine
        self._forwarders = {}
        self._handle = None
        try:
            self._handle = self._create()
        except engine.error as exc:
            raise InitError(exc, self.kind) from exc
        log.debug('Created %s handle %r', self.kind, self._handle)

    def _create(self):
        raise NotImplementedError()

    def handle(self):
        """Returns the native handle this wrapper owns.

        If the wrapper has been closed, a `HandleClosedError` is raised.

        """
        if self._handle is None:
            raise HandleClosedError('%s handle is closed' % self.kind)
        return self._handle

    @property
    def closed(self):
        return self._handle is None

    def close(self):
        """Releases the native handle. Closing twice does nothing."""
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        log.debug('Closing %s handle %r', self.kind, handle)
        try:
            handle.close()
        except self.engine.error as exc:
            raise TransferError(exc) from exc

    def __getattr__(self, name):
        # Only reached when ordinary lookup fails.
        if name.startswith('_'):
            raise AttributeError(name)
        handle = self.handle()
        function = self._forwarders.get(name)
        if function is None:
            if name not in capabilities(type(handle)):
                raise AttributeError('%r object has no attribute %r'
                    % (type(self).__name__, name))
            function = self._forwarders[name] = forwarder(name)
        return types.MethodType(function, self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self):
        state = 'closed' if self._handle is None else 'open'
        return '<%s %s>' % (type(self).__name__, state)
