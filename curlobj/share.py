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

The shared-state handle: a `Share` lets several transfers use one cache of
cookies, DNS lookups or TLS sessions.

"""

from curlobj.proxy import HandleWrapper, flag_setter

LOCK_DATA = {
    'COOKIE':      'LOCK_DATA_COOKIE',
    'DNS':         'LOCK_DATA_DNS',
    'SSL_SESSION': 'LOCK_DATA_SSL_SESSION',
}


class Share(HandleWrapper):

    """State shared between transfers.

    Attach a `Share` to a transfer with ``easy.setopt_share(share)``. The
    `Share` must outlive every transfer it is attached to. No locking is done
    here, so using one `Share` from several threads is only as safe as the
    engine makes it.

    """

    kind = 'share'

    def _create(self):
        return self.engine.share()

    setopt_share = flag_setter('share', LOCK_DATA)
    setopt_unshare = flag_setter('unshare', LOCK_DATA)
