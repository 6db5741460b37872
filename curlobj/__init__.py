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

curlobj provides an object interface to libcurl transfers through pycurl.

This package's `Easy`, `Multi` and `Share` classes wrap the engine's transfer,
multi and share handles. Options are set through chainable methods named after
the engine's own setters, and any engine operation without a method of its own
is forwarded to the wrapped handle.

To fetch several resources at once, create an `Easy` per request, attach them
all to a `Multi`, and iterate over the `Multi`'s `perform()` sequence; each
body chunk, header chunk, completion and failure arrives as an event naming
the transfer it belongs to.

"""

from curlobj.easy import Easy
from curlobj.engine import Engine, default_engine
from curlobj.errors import (CurlObjError, FormBuildError, HandleClosedError,
    InitError, TransferError, UnsupportedFeatureError, UnsupportedValueError)
from curlobj.multi import DATA, DONE, ERROR, HEADER, Event, Multi
from curlobj.share import Share

__version__ = '1.0'
__date__ = '19 October 2026'
__author__ = 'Six Apart Ltd.'
__credits__ = """Brad Choate
Mike Malone
Mark Paschal"""


def version(engine=None):
    """Returns the engine's version string."""
    if engine is None:
        engine = default_engine()
    return engine.version()


def easy_init(engine=None):
    """Returns a new `Easy` transfer."""
    return Easy(engine)


def multi_init(engine=None, **kwargs):
    """Returns a new `Multi` transfer set."""
    return Multi(engine, **kwargs)


def share_init(engine=None):
    """Returns a new `Share` handle."""
    return Share(engine)
