# SPDX-License-Identifier: MPL-2.0
# Copyright 2024 John Mille <john@ews-network.net>

import faulthandler
import signal
import sys
from argparse import ArgumentParser
from dataclasses import asdict

import yaml
from jsonschema.exceptions import ValidationError
from prometheus_client import write_to_textfile

from confluentcloud_acl.common import handle_signals
from confluentcloud_acl.config import load_config_file
from confluentcloud_acl.config.config import AclProviderConfig
from confluentcloud_acl.config.logging import ACL_LOG, set_verbose
from confluentcloud_acl.errors import AclResourceError
from confluentcloud_acl.provider import Action, AclProvider
from confluentcloud_acl.provider.state import StateFile
from confluentcloud_acl.resources.acl import AclResource
from confluentcloud_acl.resources.diagnostics import Severity, has_errors


def set_parser():
    parser = ArgumentParser("confluentcloud-acl")
    parser.add_argument(
        "-c",
        "--config-file",
        required=True,
        dest="config_file",
        help="Path to the ACLs config file",
    )
    parser.add_argument(
        "--state",
        default=None,
        dest="state_file",
        help="Path to the state file. Overrides provider.state_file",
    )
    parser.add_argument(
        "--metrics-file",
        default=None,
        dest="metrics_file",
        help="Write the prometheus metrics to this file when done",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("plan", help="Shows the changes apply would make")
    subparsers.add_parser("apply", help="Creates, replaces and deletes ACLs")
    subparsers.add_parser("destroy", help="Deletes all the ACLs in state")
    subparsers.add_parser("refresh", help="Updates the state from the clusters")
    import_parser = subparsers.add_parser(
        "import", help="Adopts an existing ACL into the state"
    )
    import_parser.add_argument("address", help="Resource address in the config file")
    import_parser.add_argument("resource_id", help="ACL ID, its name")
    return parser


def report_diagnostics(diagnostics: dict) -> bool:
    """Logs all diagnostics. Returns True if any is an error"""
    failed: bool = False
    for address, _diags in diagnostics.items():
        for _diag in _diags:
            message = f"{address}: {_diag.summary}"
            if _diag.attribute:
                message = f"{message} [{_diag.attribute}]"
            if _diag.severity is Severity.ERROR:
                ACL_LOG.error(message)
            else:
                ACL_LOG.warning(message)
        failed = failed or has_errors(_diags)
    return failed


def run_command(provider: AclProvider, args) -> int:
    if args.command == "import":
        failed = report_diagnostics(
            {args.address: provider.import_resource(args.address, args.resource_id)}
        )
        return 1 if failed else 0

    if report_diagnostics(provider.refresh()):
        return 1
    if args.command == "refresh":
        provider.state.save()
        return 0
    if args.command == "destroy":
        return 1 if report_diagnostics(provider.destroy()) else 0

    changes = provider.plan()
    for change in changes:
        if change.action is not Action.NOOP:
            ACL_LOG.info(f"Plan: {change}")
    if args.command == "plan":
        return 0
    return 1 if report_diagnostics(provider.apply(changes)) else 0


def main(argv: list = None) -> int:
    """
    Main entrypoint
    """
    faulthandler.enable()
    _parser = set_parser()
    _args = _parser.parse_args(argv)
    if _args.verbose:
        set_verbose(ACL_LOG)
    try:
        _config = load_config_file(_args.config_file)
    except (OSError, ValidationError, yaml.YAMLError) as error:
        ACL_LOG.error(f"Invalid configuration file {_args.config_file}: {error}")
        return 1

    provider_config = AclProviderConfig(_config)
    previous_handlers = {
        _signal: signal.signal(_signal, handle_signals)
        for _signal in (signal.SIGTERM, signal.SIGINT)
    }
    try:
        provider = AclProvider(
            AclResource(provider_config.legacy_id_format),
            provider_config.get_acl_client(),
            StateFile(_args.state_file or provider_config.state_file).load(),
            {
                address: asdict(resource)
                for address, resource in _config.resources.items()
            },
            provider_config.parallelism,
        )
        return run_command(provider, _args)
    except (AclResourceError, ValueError, OSError) as error:
        ACL_LOG.exception(error)
        return 1
    finally:
        for _signal, _handler in previous_handlers.items():
            signal.signal(_signal, _handler)
        if _args.metrics_file:
            write_to_textfile(_args.metrics_file, provider_config.prometheus_registry)


if __name__ == "__main__":
    sys.exit(main())
