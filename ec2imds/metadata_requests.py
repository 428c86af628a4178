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

import json
import logging
from typing import Optional

import requests

from . import paths
from .exceptions import TransportError, UnexpectedStatus
from .metadata_types import Dynamic, Metadata, NodeMetadata

logger = logging.getLogger(__name__)

#  LATEST is the base url of the instance metadata service (IMDSv1)
LATEST = "http://169.254.169.254/latest/"

#  INSTANCE_DATA is the host discovery url used to probe for EC2
INSTANCE_DATA = "http://instance-data/latest"


def _request(session: requests.Session, url: str) -> requests.Response:
    try:
        response = session.get(url)
    except requests.RequestException as e:
        logger.debug("request to %s failed", url, extra={"url": url})
        raise TransportError(url, cause=e) from e

    logger.debug(
        "request to %s completed",
        url,
        extra={"url": url, "status_code": response.status_code},
    )
    if not 200 <= response.status_code < 300:
        raise UnexpectedStatus(url, response.status_code)
    return response


def _get(session: requests.Session, url: str) -> bytes:
    body = _request(session, url).content
    if body.endswith(b"\n"):
        return body[:-1]
    return body


def is_ec2(session: requests.Session, url: str = INSTANCE_DATA) -> bool:
    """
    Test whether the underlying host is running on EC2 by making a request to the host discovery url.

    A 2xx or 3xx answer counts as being on EC2, whatever its body. A transport failure (connection refused,
    dns, timeout) or any other status means the host isn't on EC2.
    """
    try:
        response = session.get(url)
    except requests.RequestException:
        logger.debug("%s is unreachable, not running on ec2", url, extra={"url": url})
        return False

    logger.debug(
        "%s answered the ec2 probe",
        url,
        extra={"url": url, "status_code": response.status_code},
    )
    return 200 <= response.status_code < 400


def dynamic(session: requests.Session, data: Dynamic, endpoint: str = LATEST) -> bytes:
    """
    Retrieve the specified dynamic data.

    Raises:
        TransportError: when the request fails or doesn't return a 2xx status code.
    """
    return _get(session, endpoint + paths.render_dynamic(data))


def metadata(session: requests.Session, data: paths.MetadataVariant, endpoint: str = LATEST) -> bytes:
    """
    Retrieve the specified metadata category.

    Raises:
        TransportError: when the request fails or doesn't return a 2xx status code.
    """
    return _get(session, endpoint + paths.render_metadata(data))


def userdata(session: requests.Session, endpoint: str = LATEST) -> Optional[bytes]:
    """
    Retrieve the user data. Returns None if no user data is assigned to the instance.

    Raises:
        TransportError: when the request fails or returns a non-2xx status code other than 404.
    """
    try:
        return _get(session, endpoint + paths.UserDataPath)
    except UnexpectedStatus as e:
        if e.status_code == 404:
            return None
        raise


def get_identity_document(session: requests.Session, endpoint: str = LATEST) -> dict:
    return json.loads(dynamic(session, Dynamic.DOCUMENT, endpoint))


#  NodeMetadataLabels maps NodeMetadata fields to their category, and whether a 404 is tolerated
NodeMetadataLabels = [
    ("instanceId", Metadata.INSTANCE_ID, False),
    ("instanceType", Metadata.INSTANCE_TYPE, False),
    ("publicHostname", Metadata.PUBLIC_HOSTNAME, True),
    ("publicIp", Metadata.PUBLIC_IPV4, True),
    ("localHostname", Metadata.LOCAL_HOSTNAME, False),
    ("localIp", Metadata.LOCAL_IPV4, False),
    ("availabilityZone", Metadata.AVAILABILITY_ZONE, False),
]


def get_metadata_info(session: requests.Session, endpoint: str = LATEST) -> NodeMetadata:
    expandableDct = {}

    for label, category, optional in NodeMetadataLabels:
        try:
            expandableDct[label] = metadata(session, category, endpoint).decode("utf-8")
        except UnexpectedStatus as e:
            # public fields are missing on instances without a public address
            if not optional or e.status_code != 404:
                raise
            expandableDct[label] = ""

    if len(expandableDct["availabilityZone"]) > 0:
        expandableDct["region"] = expandableDct["availabilityZone"][:-1]
    else:
        expandableDct["region"] = ""

    return NodeMetadata(**expandableDct)
