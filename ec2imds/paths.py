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

from typing import Union

from .metadata_types import (
    BlockDevice,
    Dynamic,
    EBS,
    Ephemeral,
    IAM,
    Info,
    Interface,
    IPV4Associations,
    Mapping,
    Metadata,
    Network,
    SecurityCredentials,
)

#  UserDataPath is the context path to the user data supplied at launch time
UserDataPath = "user-data"

#  BlockDeviceMappingPath is the prefix of every block device mapping path
BlockDeviceMappingPath = "meta-data/block-device-mapping/"

#  IAMPath is the prefix of the instance profile paths
IAMPath = "meta-data/iam/"

#  NetworkInterfacesPath is the prefix of the per-mac network interface paths
NetworkInterfacesPath = "meta-data/network/interfaces/macs/"

#  SecurityCredentialsPath is the prefix of the IAM role credentials path, relative to IAMPath
SecurityCredentialsPath = "security-credentials/"

#  IPV4AssociationsPath is the prefix of a public ip's associations, relative to an interface
IPV4AssociationsPath = "ipv4-associations/"

DynamicPaths = {
    Dynamic.FWS: "dynamic/fws/instance-monitoring",
    Dynamic.DOCUMENT: "dynamic/instance-identity/document",
    Dynamic.PKCS7: "dynamic/instance-identity/pkcs7",
    Dynamic.SIGNATURE: "dynamic/instance-identity/signature",
}

MetadataPaths = {
    Metadata.AMI_ID: "meta-data/ami-id",
    Metadata.AMI_LAUNCH_INDEX: "meta-data/ami-launch-index",
    Metadata.AMI_MANIFEST_PATH: "meta-data/ami-manifest-path",
    Metadata.ANCESTOR_AMI_IDS: "meta-data/ancestor-ami-ids",
    Metadata.HOSTNAME: "meta-data/hostname",
    Metadata.INSTANCE_ACTION: "meta-data/instance-action",
    Metadata.INSTANCE_ID: "meta-data/instance-id",
    Metadata.INSTANCE_TYPE: "meta-data/instance-type",
    Metadata.KERNEL_ID: "meta-data/kernel-id",
    Metadata.LOCAL_HOSTNAME: "meta-data/local-hostname",
    Metadata.LOCAL_IPV4: "meta-data/local-ipv4",
    Metadata.MAC: "meta-data/mac",
    Metadata.AVAILABILITY_ZONE: "meta-data/placement/availability-zone",
    Metadata.PRODUCT_CODES: "meta-data/product-codes",
    Metadata.PUBLIC_HOSTNAME: "meta-data/public-hostname",
    Metadata.PUBLIC_IPV4: "meta-data/public-ipv4",
    Metadata.OPENSSH_KEY: "meta-data/public-keys/0/openssh-key",
    Metadata.RAMDISK_ID: "meta-data/ramdisk-id",
    Metadata.RESERVATION_ID: "meta-data/reservation-id",
    Metadata.SECURITY_GROUPS: "meta-data/security-groups",
}

MappingPaths = {
    Mapping.AMI: "ami",
    Mapping.ROOT: "root",
    # swap resolves to the root device path, kept as the historical rendering
    Mapping.SWAP: "root",
}

InterfacePaths = {
    Interface.DEVICE_NUMBER: "device-number",
    Interface.LOCAL_HOSTNAME: "local-hostname",
    Interface.LOCAL_IPV4S: "local-ipv4s",
    Interface.MAC: "mac",
    Interface.OWNER_ID: "owner-id",
    Interface.PUBLIC_HOSTNAME: "public-hostname",
    Interface.PUBLIC_IPV4S: "public-ipv4s",
    Interface.SECURITY_GROUPS: "security-groups",
    Interface.SECURITY_GROUP_IDS: "security-group-ids",
    Interface.SUBNET_ID: "subnet-id",
    Interface.SUBNET_IPV4_CIDR_BLOCK: "subnet-ipv4-cidr-block",
    Interface.VPC_ID: "vpc-id",
    Interface.VPC_IPV4_CIDR_BLOCK: "vpc-ipv4-cidr-block",
}

MetadataVariant = Union[Metadata, BlockDevice, IAM, Network]
MappingVariant = Union[Mapping, EBS, Ephemeral]
InfoVariant = Union[Info, SecurityCredentials]
InterfaceVariant = Union[Interface, IPV4Associations]


def _unhandled(kind: str, value) -> TypeError:
    return TypeError(f"{value!r} is not a {kind} value")


def render_dynamic(dynamic: Dynamic) -> str:
    if isinstance(dynamic, Dynamic):
        return DynamicPaths[dynamic]
    raise _unhandled("dynamic", dynamic)


def render_mapping(mapping: MappingVariant) -> str:
    if isinstance(mapping, Mapping):
        return MappingPaths[mapping]
    if isinstance(mapping, EBS):
        return f"ebs{mapping.index:d}"
    if isinstance(mapping, Ephemeral):
        return f"ephemeral{mapping.index:d}"
    raise _unhandled("block device mapping", mapping)


def render_info(info: InfoVariant) -> str:
    if info is Info.INFO:
        return "info"
    if isinstance(info, SecurityCredentials):
        if info.role_name is None:
            return SecurityCredentialsPath
        return SecurityCredentialsPath + info.role_name
    raise _unhandled("iam info", info)


def render_interface(interface: InterfaceVariant) -> str:
    if isinstance(interface, Interface):
        return InterfacePaths[interface]
    if isinstance(interface, IPV4Associations):
        return IPV4AssociationsPath + interface.public_ip
    raise _unhandled("network interface", interface)


def render_metadata(metadata: MetadataVariant) -> str:
    if isinstance(metadata, Metadata):
        return MetadataPaths[metadata]
    if isinstance(metadata, BlockDevice):
        return BlockDeviceMappingPath + render_mapping(metadata.mapping)
    if isinstance(metadata, IAM):
        return IAMPath + render_info(metadata.info)
    if isinstance(metadata, Network):
        return NetworkInterfacesPath + metadata.mac + "/" + render_interface(metadata.interface)
    raise _unhandled("metadata", metadata)


def render(variant) -> str:
    """
    Render any taxonomy value to its path, relative to the versioned base url (e.g. http://169.254.169.254/latest/).

    Args:
        variant: A value of Dynamic, Metadata (or one of its parameterized variants), Mapping, Info or Interface.

    Returns:
        The relative path, never starting with a slash. Parameters are inserted verbatim.
    """
    if isinstance(variant, Dynamic):
        return render_dynamic(variant)
    if isinstance(variant, (Metadata, BlockDevice, IAM, Network)):
        return render_metadata(variant)
    if isinstance(variant, (Mapping, EBS, Ephemeral)):
        return render_mapping(variant)
    if isinstance(variant, (Info, SecurityCredentials)):
        return render_info(variant)
    if isinstance(variant, (Interface, IPV4Associations)):
        return render_interface(variant)
    raise _unhandled("metadata path", variant)
