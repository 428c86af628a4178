# Copyright 2021 Cortex Labs, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from collections import deque
from typing import Optional


class MetadataException(Exception):
    def __init__(self, *messages):
        super().__init__(": ".join(messages))
        self.errors = deque(messages)

    def wrap(self, *messages):
        self.errors.extendleft(reversed(messages))

    def __str__(self):
        return self.stringify()

    def __repr__(self):
        return self.stringify()

    def stringify(self):
        return "error: " + ": ".join(self.errors)


class TransportError(MetadataException):
    """
    The metadata service could not be reached or answered with an unusable response.
    """

    def __init__(self, url: str, *messages, cause: Optional[BaseException] = None):
        msg_list = [url] + list(messages)
        if cause is not None:
            msg_list.append(str(cause))
        super().__init__(*msg_list)
        self.url = url
        self.cause = cause


class UnexpectedStatus(TransportError):
    def __init__(self, url: str, status_code: int):
        super().__init__(url, f"received {status_code} status code")
        self.status_code = status_code
