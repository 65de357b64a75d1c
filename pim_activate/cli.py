"""
PIM Activate - Command line
----------------------------
    pim-activate -u john.doe@contoso.com -t managementgroup -n P-C00 \
        -r Contributor --reason "change work" [-l 4] [--skip-login]

Prints the submitted request as JSON on stdout; logs go to stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .activation import ActivationRequest, run_activation
from .config import (
    DEFAULT_REQUEST_HOURS,
    MAX_REQUEST_HOURS,
    MIN_REQUEST_HOURS,
    RESOURCE_TYPES,
    ROLE_NAMES,
    get_optional_env,
)
from .errors import PimActivationError

logger = logging.getLogger("pim-activate.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pim-activate",
        description="Activate an eligible Azure PIM role on a management group or subscription.",
    )
    parser.add_argument("-u", "--username", required=True,
                        help="Principal name to sign in as and activate the role for")
    parser.add_argument("-t", "--type", required=True, dest="resource_type",
                        help=f"Resource type: {', '.join(RESOURCE_TYPES)}")
    parser.add_argument("-n", "--name", required=True, dest="resource_name",
                        help="Display name of the management group or subscription")
    parser.add_argument("-r", "--role", required=True,
                        help=f"Role to activate: {', '.join(ROLE_NAMES)}")
    parser.add_argument("--reason", required=True, help="Justification for the activation")
    parser.add_argument("-l", "--request-length", type=int, default=DEFAULT_REQUEST_HOURS,
                        help=f"Hours, {MIN_REQUEST_HOURS}-{MAX_REQUEST_HOURS} "
                             f"(default {DEFAULT_REQUEST_HOURS})")
    parser.add_argument("--skip-login", action="store_true",
                        help="Reuse the existing Azure credential instead of signing in")
    parser.add_argument("--tenant-id", default=get_optional_env("PIM_TENANT_ID") or None,
                        help="Tenant to sign in to (default: $PIM_TENANT_ID)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if not args.verbose:
        # azure-identity and httpx are chatty at INFO
        logging.getLogger("azure").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)

    request = ActivationRequest(
        username=args.username,
        resource_type=args.resource_type,
        resource_name=args.resource_name,
        role=args.role,
        reason=args.reason,
        request_length=args.request_length,
    )

    try:
        result = run_activation(
            request, skip_login=args.skip_login, tenant_id=args.tenant_id
        )
    except PimActivationError as exc:
        logger.error("Activation aborted at step '%s': %s", exc.step, exc)
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
