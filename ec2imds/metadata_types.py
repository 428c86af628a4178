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

from collections import namedtuple
from enum import Enum


class Dynamic(Enum):
    FWS = "fws"  # whether detailed one-minute CloudWatch monitoring is enabled
    DOCUMENT = "document"  # JSON with instance attributes (instance-id, private ip, ...)
    PKCS7 = "pkcs7"  # verifies the document's authenticity against the signature
    SIGNATURE = "signature"


class Metadata(Enum):
    AMI_ID = "ami-id"
    AMI_LAUNCH_INDEX = "ami-launch-index"  # order in which the instance was launched, from 0
    AMI_MANIFEST_PATH = "ami-manifest-path"
    ANCESTOR_AMI_IDS = "ancestor-ami-ids"
    HOSTNAME = "hostname"  # private hostname of eth0
    INSTANCE_ACTION = "instance-action"  # none | shutdown | bundle-pending
    INSTANCE_ID = "instance-id"
    INSTANCE_TYPE = "instance-type"
    KERNEL_ID = "kernel-id"
    LOCAL_HOSTNAME = "local-hostname"
    LOCAL_IPV4 = "local-ipv4"
    MAC = "mac"
    AVAILABILITY_ZONE = "availability-zone"
    PRODUCT_CODES = "product-codes"
    PUBLIC_HOSTNAME = "public-hostname"
    PUBLIC_IPV4 = "public-ipv4"  # the elastic ip when one is associated
    OPENSSH_KEY = "openssh-key"  # only available if supplied at launch time
    RAMDISK_ID = "ramdisk-id"
    RESERVATION_ID = "reservation-id"
    SECURITY_GROUPS = "security-groups"


class Mapping(Enum):
    AMI = "ami"  # device holding the root/boot file system
    ROOT = "root"
    SWAP = "swap"  # not always present


class Info(Enum):
    INFO = "info"  # LastUpdated, InstanceProfileArn and InstanceProfileId


class Interface(Enum):
    DEVICE_NUMBER = "device-number"
    LOCAL_HOSTNAME = "local-hostname"
    LOCAL_IPV4S = "local-ipv4s"
    MAC = "mac"
    OWNER_ID = "owner-id"
    PUBLIC_HOSTNAME = "public-hostname"
    PUBLIC_IPV4S = "public-ipv4s"
    SECURITY_GROUPS = "security-groups"
    SECURITY_GROUP_IDS = "security-group-ids"
    SUBNET_ID = "subnet-id"
    SUBNET_IPV4_CIDR_BLOCK = "subnet-ipv4-cidr-block"
    VPC_ID = "vpc-id"
    VPC_IPV4_CIDR_BLOCK = "vpc-ipv4-cidr-block"


class _Variant:
    """
    Parameterized variants are tuples, but only compare equal to the same variant (EBS(1) != Ephemeral(1)).
    """

    __slots__ = ()

    def __eq__(self, other):
        return type(self) is type(other) and tuple.__eq__(self, other)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash((type(self).__name__,) + tuple(self))


def _validate_index(kind: str, index) -> None:
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise ValueError(f"{kind} index must be a non-negative integer, got {index!r}")


class EBS(_Variant, namedtuple("EBS", ["index"])):
    """
    The N-th Amazon EBS volume attached at launch time (ebs1, ebs2, ...).
    """

    __slots__ = ()

    def __new__(cls, index: int):
        _validate_index("ebs", index)
        return super().__new__(cls, index)


class Ephemeral(_Variant, namedtuple("Ephemeral", ["index"])):
    """
    The N-th ephemeral (instance store) volume.
    """

    __slots__ = ()

    def __new__(cls, index: int):
        _validate_index("ephemeral", index)
        return super().__new__(cls, index)


class SecurityCredentials(
    _Variant,
    namedtuple(
        "SecurityCredentials",
        [
            "role_name",  # None lists the available roles instead of one role's credentials
        ],
        defaults=[None],
    ),
):
    __slots__ = ()


class IPV4Associations(
    _Variant,
    namedtuple(
        "IPV4Associations",
        [
            "public_ip",  # private addresses associated with this public ip
        ],
    ),
):
    __slots__ = ()


class BlockDevice(_Variant, namedtuple("BlockDevice", ["mapping"])):
    __slots__ = ()


class IAM(_Variant, namedtuple("IAM", ["info"])):
    __slots__ = ()


class Network(
    _Variant,
    namedtuple(
        "Network",
        [
            "mac",  # mac address of the network interface
            "interface",
        ],
    ),
):
    __slots__ = ()


NodeMetadata = namedtuple(
    "NodeMetadata",
    [
        "instanceId",
        "instanceType",
        "publicHostname",
        "publicIp",
        "localHostname",
        "localIp",
        "availabilityZone",
        "region",
    ],
)
