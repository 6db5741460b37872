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

The exceptions raised by `curlobj` wrappers.

Every failure reported by the wrapped engine arrives as the engine's own
error type (`pycurl.error` for the default engine); the wrappers translate
those into the classes here, keeping the engine error on the `error`
attribute.

"""


class CurlObjError(Exception):
    """The base class of all errors raised by `curlobj`."""
    pass


class EngineError(CurlObjError):
    """An error carrying an engine-native failure value."""

    def __init__(self, error, message=None):
        self.error = error
        args = getattr(error, 'args', ())
        if len(args) >= 2:
            self.code, self.message = args[0], args[1]
        elif len(args) == 1:
            self.code, self.message = None, args[0]
        else:
            self.code, self.message = None, str(error)
        if message is None:
            message = self.message
        super(EngineError, self).__init__(message)


class InitError(EngineError):
    """An Exception raised when the engine cannot allocate a handle."""

    def __init__(self, error, kind='transfer'):
        self.kind = kind
        super(InitError, self).__init__(error,
            'Could not create %s handle: %s' % (kind, error))


class TransferError(EngineError):
    """An Exception raised when a native perform, option registration,
    forwarded call or info read fails."""
    pass


class FormBuildError(EngineError):
    """An Exception raised when a multipart form entry cannot be built or
    the finished form cannot be attached to a transfer."""
    pass


class UnsupportedValueError(CurlObjError, ValueError):
    """An Exception raised when a symbolic option value is not one of the
    names a setter accepts."""

    def __init__(self, value, choices):
        self.value = value
        self.choices = tuple(sorted(choices))
        super(UnsupportedValueError, self).__init__(
            'Unsupported value %r (expected one of: %s)' %
            (value, ', '.join(self.choices))
        )


class UnsupportedFeatureError(CurlObjError):
    """An Exception raised when a caller asks for something this layer
    deliberately does not do, such as streamed form uploads."""
    pass


class HandleClosedError(CurlObjError):
    """An Exception raised when a wrapper is used after it was closed."""
    pass
