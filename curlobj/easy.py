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

The transfer handle: one `Easy` wraps one native transfer.

Options are set through the forwarded native setters (``setopt_url``,
``setopt_timeout`` and so on). `Easy` adds a `perform()` that registers the
caller's callbacks and offers failures to an error hook, a form-posting
convenience, and the setters whose values need translating before they reach
the engine.

"""

from collections.abc import Mapping
import logging

from curlobj.errors import (FormBuildError, TransferError,
    UnsupportedFeatureError)
from curlobj.proxy import HandleWrapper, flag_setter, forwarder

log = logging.getLogger(__name__)

CALLBACK_OPTIONS = ('readfunction', 'writefunction', 'headerfunction')

_setopt_share = forwarder('setopt_share')


def raise_error(error):
    """The default error hook: re-raises `error`."""
    raise error


def recover(errorfunction, exc):
    """Hands the engine error `exc` to `errorfunction` as a `TransferError`
    and returns what it returns."""
    try:
        raise TransferError(exc) from exc
    except TransferError as error:
        return errorfunction(error)


class Easy(HandleWrapper):

    """A single transfer."""

    kind = 'transfer'

    def __init__(self, engine=None):
        self._form = None
        super(Easy, self).__init__(engine)

    def _create(self):
        return self.engine.easy()

    def perform(self, options=None, **kwargs):
        """Performs the transfer.

        Options may be given as a mapping, as keyword arguments, or both:

        * ``readfunction``, ``writefunction``, ``headerfunction``: callbacks
          the engine calls during the transfer to supply or consume a chunk
          of bytes
        * ``errorfunction``: a hook called with a `TransferError` when
          registering a callback or performing the transfer fails; whatever
          it returns is returned from `perform()`. The default hook
          re-raises the error.

        Callbacks are registered in the order above. The first registration
        that fails is handed to the error hook and nothing further happens;
        callbacks registered before it stay registered. On success the
        `Easy` instance itself is returned.

        """
        opts = dict(options or {})
        opts.update(kwargs)
        unknown = set(opts) - set(CALLBACK_OPTIONS) - set(['errorfunction'])
        if unknown:
            raise TypeError('Unknown perform options: %s'
                % ', '.join(sorted(unknown)))

        errorfunction = opts.get('errorfunction') or raise_error
        handle = self.handle()

        for option in CALLBACK_OPTIONS:
            callback = opts.get(option)
            if callback is None:
                continue
            try:
                getattr(handle, 'setopt_' + option)(callback)
            except self.engine.error as exc:
                log.debug('Could not register %s: %s', option, exc)
                return recover(errorfunction, exc)

        req_log = logging.getLogger('.'.join((__name__, 'request')))
        try:
            handle.perform()
        except self.engine.error as exc:
            if req_log.isEnabledFor(logging.DEBUG):
                req_log.debug('Transfer failed: %s', exc)
            return recover(errorfunction, exc)

        if req_log.isEnabledFor(logging.DEBUG):
            req_log.debug('Transfer finished: %s', self._describe(handle))
        return self

    def _describe(self, handle):
        try:
            return '%s %s' % (handle.getinfo_response_code(),
                              handle.getinfo_effective_url())
        except (AttributeError, self.engine.error):
            return repr(handle)

    def post(self, fields):
        """Attaches a multipart form built from `fields` to this transfer.

        Parameter `fields` maps each field name to either a string value, or
        a mapping describing an upload:

        * ``file``: the path of the file to upload, or the file name to
          report for a buffer upload
        * ``data``: the content to upload instead of reading ``file``
        * ``type``: the part's content type
        * ``filename``: the file name to report, for file uploads
        * ``headers``: extra headers for the part

        Streamed uploads (``stream_length``) are not supported and raise
        `UnsupportedFeatureError`. If any part cannot be built, or the
        finished form cannot be attached, the form is released, a
        `FormBuildError` is raised, and the transfer's options are left as
        they were. On success the `Easy` instance itself is returned.

        """
        handle = self.handle()
        form = self.engine.form()
        try:
            for name, value in fields.items():
                if isinstance(value, (str, bytes)):
                    form.add_content(name, value)
                    continue
                if not isinstance(value, Mapping):
                    raise TypeError('Form field %r must be a string or a mapping, not %s'
                        % (name, type(value).__name__))
                if 'stream_length' in value:
                    raise UnsupportedFeatureError(
                        'Streamed form uploads are not supported (field %r)' % name)
                if value.get('data') is not None:
                    form.add_buffer(name, value.get('file'), value['data'],
                        value.get('type'), value.get('headers'))
                else:
                    form.add_file(name, value.get('file'), value.get('type'),
                        value.get('filename'), value.get('headers'))
        except self.engine.error as exc:
            form.free()
            raise FormBuildError(exc) from exc
        except (TypeError, UnsupportedFeatureError):
            form.free()
            raise

        try:
            handle.setopt_httppost(form)
        except self.engine.error as exc:
            form.free()
            raise FormBuildError(exc) from exc

        previous, self._form = self._form, form
        if previous is not None:
            previous.free()
        return self

    def setopt_share(self, share):
        """Shares the state cached by the `Share` instance `share` with this
        transfer.

        The `Share` must stay open for as long as this transfer uses it.

        """
        return _setopt_share(self, share.handle())

    setopt_proxytype = flag_setter('proxytype', {
        'HTTP':            'PROXY_HTTP',
        'HTTP_1_0':        'PROXY_HTTP_1_0',
        'SOCKS4':          'PROXY_SOCKS4',
        'SOCKS5':          'PROXY_SOCKS5',
        'SOCKS4A':         'PROXY_SOCKS4A',
        'SOCKS5_HOSTNAME': 'PROXY_SOCKS5_HOSTNAME',
    })

    def close(self):
        if self._form is not None:
            self._form.free()
            self._form = None
        super(Easy, self).close()
