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

import pytest
import requests
from mock import MagicMock

from ec2imds import metadata_requests
from ec2imds.exceptions import TransportError, UnexpectedStatus
from ec2imds.metadata_types import (
    BlockDevice,
    Dynamic,
    EBS,
    IAM,
    Metadata,
    NodeMetadata,
    SecurityCredentials,
)


def response(status_code: int = 200, content: bytes = b""):
    resp = MagicMock(spec=requests.Response)
    resp.status_code = status_code
    resp.content = content
    return resp


def session_returning(*responses):
    session = MagicMock(spec=requests.Session)
    session.get.side_effect = list(responses)
    return session


def session_routing(routes: dict):
    """
    Session answering each url from routes, and 404 for anything else.
    """
    session = MagicMock(spec=requests.Session)
    session.get.side_effect = lambda url: routes.get(url, response(404))
    return session


def test_metadata_strips_one_trailing_newline():
    session = session_returning(response(content=b"i-1234\n"))
    assert metadata_requests.metadata(session, Metadata.INSTANCE_ID) == b"i-1234"
    session.get.assert_called_once_with("http://169.254.169.254/latest/meta-data/instance-id")


@pytest.mark.parametrize(
    "body,expected",
    [
        (b"i-1234", b"i-1234"),
        (b"i-1234\n\n", b"i-1234\n"),
        (b"\n", b""),
        (b"", b""),
        (b"i-1234\r\n", b"i-1234\r"),
    ],
)
def test_body_normalization(body, expected):
    session = session_returning(response(content=body))
    assert metadata_requests.metadata(session, Metadata.INSTANCE_ID) == expected


def test_parameterized_metadata_url():
    session = session_returning(response(content=b"sdb"), response(content=b"{}"))
    metadata_requests.metadata(session, BlockDevice(EBS(1)))
    metadata_requests.metadata(session, IAM(SecurityCredentials("my-role")))
    assert [c.args[0] for c in session.get.call_args_list] == [
        "http://169.254.169.254/latest/meta-data/block-device-mapping/ebs1",
        "http://169.254.169.254/latest/meta-data/iam/security-credentials/my-role",
    ]


def test_dynamic_with_custom_endpoint():
    session = session_returning(response(content=b"enabled\n"))
    assert metadata_requests.dynamic(session, Dynamic.FWS, "http://localhost:1338/latest/") == b"enabled"
    session.get.assert_called_once_with("http://localhost:1338/latest/dynamic/fws/instance-monitoring")


def test_userdata():
    session = session_returning(response(content=b"#!/bin/bash\necho hi\n"))
    assert metadata_requests.userdata(session) == b"#!/bin/bash\necho hi"
    session.get.assert_called_once_with("http://169.254.169.254/latest/user-data")


def test_missing_userdata_is_absent():
    session = session_returning(response(404))
    assert metadata_requests.userdata(session) is None


def test_empty_userdata_is_not_absent():
    session = session_returning(response(content=b""))
    assert metadata_requests.userdata(session) == b""


def test_userdata_other_failures_are_raised():
    session = session_returning(response(500))
    with pytest.raises(UnexpectedStatus) as excinfo:
        metadata_requests.userdata(session)
    assert excinfo.value.status_code == 500


def test_not_found_metadata_is_raised():
    session = session_returning(response(404))
    with pytest.raises(UnexpectedStatus) as excinfo:
        metadata_requests.metadata(session, Metadata.KERNEL_ID)
    assert excinfo.value.status_code == 404
    assert excinfo.value.url == "http://169.254.169.254/latest/meta-data/kernel-id"
    assert isinstance(excinfo.value, TransportError)


def test_transport_failures_are_wrapped():
    cause = requests.ConnectionError("connection refused")
    session = MagicMock(spec=requests.Session)
    session.get.side_effect = cause

    with pytest.raises(TransportError) as excinfo:
        metadata_requests.dynamic(session, Dynamic.DOCUMENT)
    assert excinfo.value.cause is cause
    assert excinfo.value.__cause__ is cause
    assert "connection refused" in str(excinfo.value)

    session.get.side_effect = requests.ConnectionError("refused")
    with pytest.raises(TransportError):
        metadata_requests.userdata(session)


def test_is_ec2():
    assert metadata_requests.is_ec2(session_returning(response(content=b"meta-data")))
    assert metadata_requests.is_ec2(session_returning(response(301)))

    session = MagicMock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("name or service not known")
    assert not metadata_requests.is_ec2(session)
    session.get.assert_called_once_with("http://instance-data/latest")

    session.get.side_effect = requests.Timeout()
    assert not metadata_requests.is_ec2(session)


@pytest.mark.parametrize("status_code", [404, 500, 503])
def test_is_ec2_rejects_error_statuses(status_code):
    # e.g. a resolver answering instance-data with its own error page
    page = response(status_code, b"<html><body>not found</body></html>")
    assert not metadata_requests.is_ec2(session_returning(page))


def test_session_is_not_closed():
    session = session_returning(response(content=b"ami-1"))
    metadata_requests.metadata(session, Metadata.AMI_ID)
    session.close.assert_not_called()


def test_get_identity_document():
    document = {"instanceId": "i-1234", "region": "us-west-2"}
    session = session_returning(response(content=json.dumps(document).encode() + b"\n"))
    assert metadata_requests.get_identity_document(session) == document


def test_get_metadata_info():
    base = metadata_requests.LATEST + "meta-data/"
    session = session_routing(
        {
            base + "instance-id": response(content=b"i-1234\n"),
            base + "instance-type": response(content=b"m5.large"),
            base + "local-hostname": response(content=b"ip-10-0-0-1.ec2.internal"),
            base + "local-ipv4": response(content=b"10.0.0.1"),
            base + "placement/availability-zone": response(content=b"us-east-1a"),
        }
    )
    assert metadata_requests.get_metadata_info(session) == NodeMetadata(
        instanceId="i-1234",
        instanceType="m5.large",
        publicHostname="",
        publicIp="",
        localHostname="ip-10-0-0-1.ec2.internal",
        localIp="10.0.0.1",
        availabilityZone="us-east-1a",
        region="us-east-1",
    )


def test_get_metadata_info_requires_instance_id():
    session = session_routing({})
    with pytest.raises(UnexpectedStatus):
        metadata_requests.get_metadata_info(session)
