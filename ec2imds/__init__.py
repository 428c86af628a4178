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

from .metadata_requests import (
    LATEST,
    INSTANCE_DATA,
    is_ec2,
    dynamic,
    metadata,
    userdata,
    get_identity_document,
    get_metadata_info,
)

from .metadata_types import (
    Dynamic,
    Metadata,
    BlockDevice,
    IAM,
    Network,
    Mapping,
    EBS,
    Ephemeral,
    Info,
    SecurityCredentials,
    Interface,
    IPV4Associations,
    NodeMetadata,
)

from .paths import render

from .exceptions import MetadataException, TransportError, UnexpectedStatus

__version__ = "0.1.0"
