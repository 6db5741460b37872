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

import unittest
import warnings

from mox3 import mox
import pycurl

import curlobj
from curlobj.engine import (E_BAD_FUNCTION_ARGUMENT, Engine, NativeEasy,
    NativeForm, NativeMulti, default_engine)
from tests import utils
from tests.fakes import FakeEngine


class TestEngine(unittest.TestCase):

    def test_default(self):
        self.assertTrue(default_engine() is default_engine())
        self.assertEqual(curlobj.version(), pycurl.version)

    def test_constants(self):
        engine = Engine()
        self.assertEqual(engine.PROXY_SOCKS5_HOSTNAME, pycurl.PROXYTYPE_SOCKS5_HOSTNAME)
        self.assertEqual(engine.LOCK_DATA_DNS, pycurl.LOCK_DATA_DNS)
        self.assertTrue(engine.error is pycurl.error)

    def test_generated_setters(self):
        self.assertTrue(hasattr(NativeEasy, 'setopt_url'))
        self.assertTrue(hasattr(NativeEasy, 'setopt_writefunction'))
        self.assertTrue(hasattr(NativeEasy, 'getinfo_response_code'))
        self.assertEqual(NativeEasy.setopt_url.__name__, 'setopt_url')

    def test_easy(self):
        with curlobj.easy_init() as easy:
            result = (easy.setopt_url('http://example.com/moose')
                          .setopt_followlocation(True)
                          .setopt_proxytype('SOCKS5')
                          .setopt_timeout(10))
            self.assertTrue(result is easy)
            self.assertTrue(isinstance(easy.handle(), NativeEasy))
            self.assertRaises(curlobj.UnsupportedValueError, easy.setopt_proxytype, 'SOCKS6')
            self.assertEqual(easy.getinfo_response_code(), 0)

    def test_share(self):
        with curlobj.share_init() as share:
            share.setopt_share('COOKIE').setopt_share('DNS')
            with curlobj.easy_init() as easy:
                self.assertTrue(easy.setopt_share(share) is easy)

    def test_multi(self):
        with curlobj.multi_init(wait_timeout=0.1) as multi:
            self.assertEqual(multi.wait_timeout, 0.1)
            self.assertEqual(multi.info_read(), (None, None, None))
            self.assertEqual(list(multi.perform()), [])

    def test_post(self):
        with curlobj.easy_init() as easy:
            result = easy.post({
                'name': 'Potatoshop',
                'notes': {'file': 'notes.txt', 'data': 'hello', 'type': 'text/plain'},
            })
            self.assertTrue(result is easy)
            self.assertRaises(curlobj.FormBuildError, easy.post,
                {'name': {'file': 'notes.txt', 'data': 'x', 'headers': ['X-Moose: 1']}})

    def test_post_bad_fields(self):
        with curlobj.easy_init() as easy:
            for fields in ({'avatar': {'type': 'text/plain'}},
                           {'avatar': {'file': 7}},
                           {'notes': {'file': 'notes.txt', 'data': 5}},
                           {'notes': {'file': 'notes.txt', 'data': 'x', 'type': 3}}):
                self.assertRaises(curlobj.FormBuildError, easy.post, fields)

    def test_post_quiet(self):
        with curlobj.easy_init() as easy:
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter('always')
                easy.post({'name': 'Potatoshop'})
            self.assertEqual([w for w in caught if issubclass(w.category, DeprecationWarning)], [])

    def test_bad_callback(self):
        with curlobj.easy_init() as easy:
            errors = []

            def errorfunction(err):
                errors.append(err)
                return 'recovered'

            result = easy.perform(writefunction=5, errorfunction=errorfunction)

            self.assertEqual(result, 'recovered')
            self.assertEqual(len(errors), 1)
            self.assertTrue(isinstance(errors[0], curlobj.TransferError))
            self.assertEqual(errors[0].code, E_BAD_FUNCTION_ARGUMENT)
            self.assertRaises(curlobj.TransferError, easy.setopt_headerfunction, 'moose')

    def test_info_read_skips_unknown(self):
        stray, known = object(), object()

        m = mox.Mox()
        curl_multi = m.CreateMockAnything()
        curl_multi.add_handle(known)
        curl_multi.info_read().AndReturn((0, [stray, known], []))
        curl_multi.info_read().AndReturn((0, [], []))
        m.ReplayAll()

        native = NativeMulti(curl_multi)
        easy = NativeEasy(known)
        native.add_handle(easy)
        with self.assertLogs('curlobj.engine', level='WARNING'):
            self.assertEqual(native.info_read(), (easy, True, None))
        self.assertEqual(native.info_read(), (None, None, None))

        m.VerifyAll()

    def test_form(self):
        form = NativeForm()
        form.add_content('name', 'Potatoshop')
        form.add_buffer('notes', 'notes.txt', 'hello', 'text/plain')
        form.add_file('avatar', '/tmp/moose.png', filename='moose.png')
        self.assertEqual(form.fields, [
            ('name', 'Potatoshop'),
            ('notes', (pycurl.FORM_BUFFER, 'notes.txt', pycurl.FORM_BUFFERPTR, b'hello',
                       pycurl.FORM_CONTENTTYPE, 'text/plain')),
            ('avatar', (pycurl.FORM_FILE, '/tmp/moose.png', pycurl.FORM_FILENAME, 'moose.png')),
        ])

        try:
            form.add_content('', 'nameless')
        except pycurl.error as exc:
            self.assertEqual(exc.args[0], E_BAD_FUNCTION_ARGUMENT)
        else:
            self.fail('pycurl.error not raised')

        form.free()
        self.assertEqual(form.fields, [])


class TestConstructors(unittest.TestCase):

    def test_injected(self):
        engine = FakeEngine()
        self.assertEqual(curlobj.version(engine), 'libcurl/8.0.0-fake')
        self.assertTrue(isinstance(curlobj.easy_init(engine), curlobj.Easy))
        self.assertTrue(isinstance(curlobj.share_init(engine), curlobj.Share))
        multi = curlobj.multi_init(engine, wait_timeout=2)
        self.assertTrue(isinstance(multi, curlobj.Multi))
        self.assertEqual(multi.wait_timeout, 2)

    def test_init_error(self):
        engine = FakeEngine(fail=['easy', 'multi', 'share'])
        self.assertRaises(curlobj.InitError, curlobj.easy_init, engine)
        self.assertRaises(curlobj.InitError, curlobj.multi_init, engine)
        self.assertRaises(curlobj.InitError, curlobj.share_init, engine)


if __name__ == '__main__':
    utils.log()
    unittest.main()
