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
import re
from typing import Callable, Optional

import click
import requests

from ec2imds import metadata_requests, paths
from ec2imds.exceptions import MetadataException
from ec2imds.log import configure_logger
from ec2imds.metadata_types import (
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

_indexed_mapping_regex = re.compile(r"^(ebs|ephemeral)(\d+)$")


def parse_mapping(value: str):
    match = _indexed_mapping_regex.match(value)
    if match is not None:
        kind, index = match.groups()
        return EBS(int(index)) if kind == "ebs" else Ephemeral(int(index))
    try:
        return Mapping(value)
    except ValueError:
        raise click.BadParameter(
            f"{value} is not one of ami, root, swap, ebs<N> or ephemeral<N>"
        ) from None


def _failure(ctx: click.Context, e: MetadataException) -> click.ClickException:
    e.wrap(ctx.info_name)
    return click.ClickException(str(e))


def _fetch(ctx: click.Context, path: str, fetch: Callable[[requests.Session, str], bytes]):
    endpoint = ctx.obj["endpoint"]
    if ctx.obj["path_only"]:
        click.echo(endpoint + path)
        return

    try:
        body = fetch(ctx.obj["session"], endpoint)
    except MetadataException as e:
        raise _failure(ctx, e) from e
    click.echo(body)


@click.group(help="AWS EC2 instance metadata client")
@click.option(
    "--endpoint",
    "-e",
    type=str,
    envvar="EC2IMDS_ENDPOINT",
    default=metadata_requests.LATEST,
    show_default=True,
    help="Base url of the instance metadata service, including the trailing slash",
)
@click.option(
    "--log-config",
    type=click.Path(exists=True, dir_okay=False),
    envvar="EC2IMDS_LOG_CONFIG_FILE",
    default=None,
    help="YAML logging configuration (defaults to the packaged one)",
)
@click.option(
    "--path-only",
    is_flag=True,
    help="Print the resolved url(s) instead of fetching them",
)
@click.pass_context
def cli(ctx: click.Context, endpoint: str, log_config: Optional[str], path_only: bool):
    configure_logger("ec2imds", log_config)

    session = requests.Session()
    ctx.call_on_close(session.close)
    ctx.obj = {"endpoint": endpoint, "session": session, "path_only": path_only}


@cli.command("is-ec2", help="Exit with 0 if running on EC2, 1 otherwise")
@click.pass_context
def is_ec2(ctx: click.Context):
    if ctx.obj["path_only"]:
        click.echo(metadata_requests.INSTANCE_DATA)
        return

    on_ec2 = metadata_requests.is_ec2(ctx.obj["session"])
    click.echo("true" if on_ec2 else "false")
    ctx.exit(0 if on_ec2 else 1)


@cli.command(help="Retrieve dynamic data")
@click.argument("name", type=click.Choice([d.value for d in Dynamic]))
@click.pass_context
def dynamic(ctx: click.Context, name: str):
    data = Dynamic(name)
    _fetch(
        ctx,
        paths.render_dynamic(data),
        lambda session, endpoint: metadata_requests.dynamic(session, data, endpoint),
    )


def _fetch_metadata(ctx: click.Context, data):
    _fetch(
        ctx,
        paths.render_metadata(data),
        lambda session, endpoint: metadata_requests.metadata(session, data, endpoint),
    )


@cli.command(help="Retrieve a metadata category")
@click.argument("name", type=click.Choice([m.value for m in Metadata]))
@click.pass_context
def metadata(ctx: click.Context, name: str):
    _fetch_metadata(ctx, Metadata(name))


@cli.command("block-device", help="Retrieve a block device mapping (ami, root, swap, ebsN, ephemeralN)")
@click.argument("mapping")
@click.pass_context
def block_device(ctx: click.Context, mapping: str):
    _fetch_metadata(ctx, BlockDevice(parse_mapping(mapping)))


@cli.command(help="Retrieve the instance profile info, or the credentials of ROLE")
@click.argument("role", required=False)
@click.option("--credentials", is_flag=True, help="List roles, or fetch ROLE's credentials")
@click.pass_context
def iam(ctx: click.Context, role: Optional[str], credentials: bool):
    if role is not None and not credentials:
        raise click.UsageError("ROLE requires --credentials")
    info = SecurityCredentials(role) if credentials else Info.INFO
    _fetch_metadata(ctx, IAM(info))


@cli.command(help="Retrieve a field of the network interface with the given MAC address")
@click.argument("mac")
@click.argument("field", type=click.Choice([i.value for i in Interface] + ["ipv4-associations"]))
@click.option("--public-ip", type=str, default=None, help="Public ip, for ipv4-associations")
@click.pass_context
def interface(ctx: click.Context, mac: str, field: str, public_ip: Optional[str]):
    if field == "ipv4-associations":
        if public_ip is None:
            raise click.UsageError("ipv4-associations requires --public-ip")
        iface = IPV4Associations(public_ip)
    else:
        iface = Interface(field)
    _fetch_metadata(ctx, Network(mac, iface))


@cli.command("user-data", help="Retrieve the user data; exits with 1 when none is assigned")
@click.pass_context
def user_data(ctx: click.Context):
    if ctx.obj["path_only"]:
        click.echo(ctx.obj["endpoint"] + paths.UserDataPath)
        return

    try:
        body = metadata_requests.userdata(ctx.obj["session"], ctx.obj["endpoint"])
    except MetadataException as e:
        raise _failure(ctx, e) from e
    if body is None:
        click.echo("no user data assigned to this instance", err=True)
        ctx.exit(1)
    click.echo(body)


@cli.command(help="Print a JSON summary of the instance")
@click.pass_context
def info(ctx: click.Context):
    if ctx.obj["path_only"]:
        for _, category, _ in metadata_requests.NodeMetadataLabels:
            click.echo(ctx.obj["endpoint"] + paths.render_metadata(category))
        return

    try:
        node = metadata_requests.get_metadata_info(ctx.obj["session"], ctx.obj["endpoint"])
    except MetadataException as e:
        raise _failure(ctx, e) from e
    click.echo(json.dumps(node._asdict(), indent=2))


def main():
    cli(prog_name="ec2imds")


if __name__ == "__main__":
    main()
