"""Operator CLI for exercising a FusionAuth instance through AuthClient.

Configuration comes from FUSION_AUTH_* variables (see fusionauth_wrapper.config).
"""
from __future__ import annotations
import argparse
import getpass
import json
import logging
import os
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fusionauth_wrapper.config import load_settings
from fusionauth_wrapper.core.fusionauth import (
    AuthClient,
    AuthResult,
    ClientError,
    RegistrationRequest,
    ValidationError,
)


def _result_to_dict(result: AuthResult) -> dict:
    return {
        "user_id": result.user_id,
        "token": result.token,
        "refresh_token": result.refresh_token,
        "expiry": result.expiry.isoformat() if result.expiry else None,
    }


def _password(args) -> str:
    if args.password:
        return args.password
    from_env = os.environ.get("FUSION_AUTH_PASSWORD")
    if from_env:
        return from_env
    return getpass.getpass("Password: ")


def _report_error(cmd: str, err: ClientError) -> None:
    status = err.status_code if err.status_code is not None else "-"
    print(f"[{cmd}] Error: kind={err.kind.value} status={status} {err.message}", file=sys.stderr)
    if isinstance(err, ValidationError):
        for field, messages in err.field_errors.items():
            for message in messages:
                print(f"[{cmd}]   {field}: {message}", file=sys.stderr)
    elif err.body:
        print(f"[{cmd}]   provider body: {err.body}", file=sys.stderr)


def main(argv=None) -> None:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="FusionAuth client helper")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="cmd")

    sr = sub.add_parser("register")
    sr.add_argument("--email", required=True)
    sr.add_argument("--first", required=True)
    sr.add_argument("--last", required=True)
    sr.add_argument("--password", help="Defaults to FUSION_AUTH_PASSWORD or a prompt")
    sr.add_argument("--tenant-specific-username", action="store_true")

    sl = sub.add_parser("login")
    sl.add_argument("--email", required=True)
    sl.add_argument("--password", help="Defaults to FUSION_AUTH_PASSWORD or a prompt")

    sv = sub.add_parser("validate")
    sv.add_argument("--token", required=True)

    sf = sub.add_parser("refresh")
    sf.add_argument("--token", required=True, help="Refresh token")

    so = sub.add_parser("logout")
    so.add_argument("--token", required=True, help="Refresh token")
    so.add_argument("--global", dest="global_logout", action="store_true")

    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_settings()
    except ClientError as e:
        parser.error(str(e))

    with AuthClient(config) as client:
        try:
            if args.cmd == "register":
                req = RegistrationRequest(
                    email=args.email,
                    first_name=args.first,
                    last_name=args.last,
                    password=_password(args),
                    tenant_specific_username=args.tenant_specific_username,
                )
                output = _result_to_dict(client.register_user(req))
            elif args.cmd == "login":
                output = _result_to_dict(client.auth_user(args.email, _password(args)))
            elif args.cmd == "validate":
                result = client.validate_token(args.token)
                output = {"valid": result.valid, "claims": result.claims}
            elif args.cmd == "refresh":
                output = _result_to_dict(client.refresh_token(args.token))
            else:
                client.logout(args.token, global_logout=args.global_logout)
                output = {"logged_out": True}
        except ClientError as e:
            _report_error(args.cmd, e)
            sys.exit(1)

    print(json.dumps(output, indent=2, default=str))


if __name__ == "__main__":
    main()
