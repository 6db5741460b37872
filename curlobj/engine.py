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

The engine binding the `curlobj` wrappers drive.

An `Engine` hands out native handles built over `pycurl`. Every native handle
speaks the same dialect: setters return the native handle itself when they
succeed, queries return their value, and failures raise the engine's `error`
class (`pycurl.error`). The wrappers in `curlobj` rely on nothing else, so an
object with the same surface can stand in for `Engine` (tests do exactly
that).

"""

from collections import deque
import logging
import warnings

import pycurl

log = logging.getLogger(__name__)

# Named setters generated on `NativeEasy`, as `setopt_<name>`.
EASY_OPTIONS = {
    'url':            'URL',
    'verbose':        'VERBOSE',
    'followlocation': 'FOLLOWLOCATION',
    'maxredirs':      'MAXREDIRS',
    'timeout':        'TIMEOUT',
    'connecttimeout': 'CONNECTTIMEOUT',
    'httpheader':     'HTTPHEADER',
    'useragent':      'USERAGENT',
    'referer':        'REFERER',
    'userpwd':        'USERPWD',
    'post':           'POST',
    'postfields':     'POSTFIELDS',
    'customrequest':  'CUSTOMREQUEST',
    'nobody':         'NOBODY',
    'upload':         'UPLOAD',
    'infilesize':     'INFILESIZE',
    'proxy':          'PROXY',
    'proxyport':      'PROXYPORT',
    'cookiefile':     'COOKIEFILE',
    'cookiejar':      'COOKIEJAR',
    'cookie':         'COOKIE',
    'range':          'RANGE',
    'ssl_verifypeer': 'SSL_VERIFYPEER',
    'ssl_verifyhost': 'SSL_VERIFYHOST',
    'cainfo':         'CAINFO',
    'accept_encoding': 'ENCODING',
    'noprogress':     'NOPROGRESS',
    'readfunction':   'READFUNCTION',
    'writefunction':  'WRITEFUNCTION',
    'headerfunction': 'HEADERFUNCTION',
}

# Named queries generated on `NativeEasy`, as `getinfo_<name>`.
EASY_INFO = {
    'response_code':  'RESPONSE_CODE',
    'effective_url':  'EFFECTIVE_URL',
    'content_type':   'CONTENT_TYPE',
    'total_time':     'TOTAL_TIME',
    'size_download':  'SIZE_DOWNLOAD',
    'size_upload':    'SIZE_UPLOAD',
    'redirect_count': 'REDIRECT_COUNT',
    'primary_ip':     'PRIMARY_IP',
}

# libcurl's CURLE_BAD_FUNCTION_ARGUMENT
E_BAD_FUNCTION_ARGUMENT = 43


def _option_setter(name, option):
    def setopt(self, value):
        return self.setopt(option, value)
    setopt.__name__ = 'setopt_' + name
    setopt.__doc__ = 'Sets the ``pycurl.%s`` option.' % name.upper()
    return setopt


def _info_getter(name, info):
    def getinfo(self):
        return self.getinfo(info)
    getinfo.__name__ = 'getinfo_' + name
    return getinfo


class NativeEasy(object):

    """A single pycurl transfer handle."""

    def __init__(self, curl):
        self.curl = curl

    def setopt(self, option, value):
        try:
            self.curl.setopt(option, value)
        except TypeError as exc:
            raise pycurl.error(E_BAD_FUNCTION_ARGUMENT, str(exc)) from exc
        return self

    def unsetopt(self, option):
        self.curl.unsetopt(option)
        return self

    def getinfo(self, info):
        return self.curl.getinfo(info)

    def setopt_httppost(self, form):
        # pycurl 7.48 deprecates HTTPPOST in favor of MIMEPOST, which does not
        # take the same part tuples.
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', DeprecationWarning)
            return self.setopt(pycurl.HTTPPOST, form.fields)

    def setopt_share(self, share):
        self.curl.setopt(pycurl.SHARE, share.share)
        return self

    def setopt_proxytype(self, proxytype):
        self.curl.setopt(pycurl.PROXYTYPE, proxytype)
        return self

    def perform(self):
        self.curl.perform()
        return self

    def reset(self):
        self.curl.reset()
        return self

    def pause(self, bitmask):
        self.curl.pause(bitmask)
        return self

    def errstr(self):
        return self.curl.errstr()

    def close(self):
        self.curl.close()


for _name, _const in EASY_OPTIONS.items():
    if hasattr(pycurl, _const):
        setattr(NativeEasy, 'setopt_' + _name,
                _option_setter(_name, getattr(pycurl, _const)))
for _name, _const in EASY_INFO.items():
    if hasattr(pycurl, _const):
        setattr(NativeEasy, 'getinfo_' + _name,
                _info_getter(_name, getattr(pycurl, _const)))
del _name, _const


class NativeMulti(object):

    """A pycurl multi handle.

    pycurl reports finished transfers in batches of raw ``pycurl.Curl``
    objects; `info_read()` hands them back one at a time as the `NativeEasy`
    instances that were added.

    """

    def __init__(self, multi):
        self.multi = multi
        self._handles = {}
        self._finished = deque()

    def add_handle(self, easy):
        self.multi.add_handle(easy.curl)
        self._handles[easy.curl] = easy
        return self

    def remove_handle(self, easy):
        self.multi.remove_handle(easy.curl)
        self._handles.pop(easy.curl, None)
        return self

    def perform(self):
        """Drives every attached transfer as far as it can go without
        blocking, returning the number of transfers still running."""
        while True:
            ret, running = self.multi.perform()
            if ret != pycurl.E_CALL_MULTI_PERFORM:
                return running

    def wait(self, timeout=1.0):
        """Blocks until a transfer has activity or `timeout` seconds pass."""
        return self.multi.select(timeout)

    def info_read(self):
        if not self._finished:
            while True:
                queued, ok_list, err_list = self.multi.info_read()
                for curl in ok_list:
                    self._finished.append((curl, True, None))
                for curl, errno, errmsg in err_list:
                    self._finished.append((curl, None, pycurl.error(errno, errmsg)))
                if not queued:
                    break
        while self._finished:
            curl, ok, err = self._finished.popleft()
            easy = self._handles.get(curl)
            if easy is not None:
                return easy, ok, err
            log.warning('Skipping completion of unknown transfer %r', curl)
        return None, None, None

    def setopt_maxconnects(self, value):
        self.multi.setopt(pycurl.M_MAXCONNECTS, value)
        return self

    def setopt_pipelining(self, value):
        self.multi.setopt(pycurl.M_PIPELINING, value)
        return self

    def close(self):
        self.multi.close()
        self._handles.clear()
        self._finished.clear()


class NativeShare(object):

    """A pycurl share handle."""

    def __init__(self, share):
        self.share = share

    def setopt_share(self, lock_data):
        self.share.setopt(pycurl.SH_SHARE, lock_data)
        return self

    def setopt_unshare(self, lock_data):
        self.share.setopt(pycurl.SH_UNSHARE, lock_data)
        return self

    def close(self):
        self.share.close()


class NativeForm(object):

    """A multipart form in the shape pycurl's ``HTTPPOST`` option takes."""

    def __init__(self):
        self.fields = []

    def _check(self, name, headers, **values):
        if not name or not isinstance(name, str):
            raise pycurl.error(E_BAD_FUNCTION_ARGUMENT, 'form field has no name')
        for key, value in values.items():
            if not isinstance(value, (str, bytes)):
                raise pycurl.error(E_BAD_FUNCTION_ARGUMENT,
                    'form field %r needs a string %s, not %s'
                    % (name, key, type(value).__name__))
        if headers:
            raise pycurl.error(E_BAD_FUNCTION_ARGUMENT,
                'per-part headers are not supported (field %r)' % name)

    def add_content(self, name, value, headers=None):
        self._check(name, headers, value=value)
        self.fields.append((name, value))
        return self

    def add_buffer(self, name, filename, data, content_type=None, headers=None):
        self._check(name, headers, filename=filename, data=data)
        if content_type is not None:
            self._check(name, None, content_type=content_type)
        if isinstance(data, str):
            data = data.encode('utf-8')
        part = [pycurl.FORM_BUFFER, filename, pycurl.FORM_BUFFERPTR, data]
        if content_type:
            part += [pycurl.FORM_CONTENTTYPE, content_type]
        self.fields.append((name, tuple(part)))
        return self

    def add_file(self, name, path, content_type=None, filename=None, headers=None):
        self._check(name, headers, path=path)
        for key, value in (('content_type', content_type), ('filename', filename)):
            if value is not None:
                self._check(name, None, **{key: value})
        part = [pycurl.FORM_FILE, path]
        if content_type:
            part += [pycurl.FORM_CONTENTTYPE, content_type]
        if filename:
            part += [pycurl.FORM_FILENAME, filename]
        self.fields.append((name, tuple(part)))
        return self

    def free(self):
        del self.fields[:]


class Engine(object):

    """Allocates native handles over `pycurl`."""

    error = pycurl.error

    PROXY_HTTP            = pycurl.PROXYTYPE_HTTP
    PROXY_HTTP_1_0        = pycurl.PROXYTYPE_HTTP_1_0
    PROXY_SOCKS4          = pycurl.PROXYTYPE_SOCKS4
    PROXY_SOCKS5          = pycurl.PROXYTYPE_SOCKS5
    PROXY_SOCKS4A         = pycurl.PROXYTYPE_SOCKS4A
    PROXY_SOCKS5_HOSTNAME = pycurl.PROXYTYPE_SOCKS5_HOSTNAME

    LOCK_DATA_COOKIE      = pycurl.LOCK_DATA_COOKIE
    LOCK_DATA_DNS         = pycurl.LOCK_DATA_DNS
    LOCK_DATA_SSL_SESSION = pycurl.LOCK_DATA_SSL_SESSION

    def easy(self):
        return NativeEasy(pycurl.Curl())

    def multi(self):
        return NativeMulti(pycurl.CurlMulti())

    def share(self):
        return NativeShare(pycurl.CurlShare())

    def form(self):
        return NativeForm()

    def version(self):
        return pycurl.version


_default_engine = None


def default_engine():
    """Returns the process-wide `Engine`, creating it on first use."""
    global _default_engine
    if _default_engine is None:
        log.debug('Using %s', pycurl.version)
        _default_engine = Engine()
    return _default_engine
