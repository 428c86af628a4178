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

from setuptools import setup, find_packages

with open("README.md") as f:
    long_description = f.read()

setup(
    name="ec2imds",
    version="0.1.0",
    description="Client for the AWS EC2 instance metadata service",
    author="Cortex Labs",
    author_email="dev@cortex.dev",
    license="Apache License 2.0",
    long_description_content_type="text/markdown",
    long_description=long_description,
    packages=find_packages(include=["ec2imds", "ec2imds.*"], exclude=["ec2imds.test"]),
    package_data={"ec2imds": ["log_config.yaml"]},
    entry_points={
        "console_scripts": [
            "ec2imds = ec2imds.cli:main",
        ],
    },
    install_requires=[
        "requests>=2.24.0",
        "click>=7.1.2",
        "pyyaml>=5.3.1",
        "python-json-logger>=2.0.0,<4",
    ],
    extras_require={
        "test": [
            "pytest>=6.1",
            "mock>=4.0.0",
        ],
    },
    python_requires=">=3.7",
    classifiers=[
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Intended Audience :: Developers",
    ],
)
