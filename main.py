#!/usr/bin/env python3
"""
authflow -- username/password registration and login with signed tokens.

Usage:
  python main.py serve
  python main.py serve --reload
  python main.py register alice --firstname Alice --lastname Liddell
  python main.py login alice
  python main.py login alice --password pw123 --json

Environment variables:
  JWTKEY        Token signing key (32+ chars). Required by `serve` unless DEBUG=true.
  DEBUG         true to auto-generate a signing key for local development.
  DATABASE_URL  SQLAlchemy URL for the user store (default: SQLite next to auth/).
  API_BASE_URL  Server the register/login commands talk to (default: http://localhost:8000).
"""

import argparse
import getpass
import json
import sys

from client.actions import AuthActions
from client.api import AuthApi
from client.state import AuthState
from core.config import get_client_settings, get_settings


def _print_navigation(path: str, replace: bool = False) -> None:
    print(f"  -> {path}{' (replace)' if replace else ''}")


def _print_state(state: AuthState, as_json: bool) -> None:
    if as_json:
        print(
            json.dumps(
                {
                    "status": state.status.value,
                    "user": state.user,
                    "token": state.token,
                    "error": None if state.error is None else {
                        "kind": state.error.kind,
                        "message": state.error.message,
                        "status_code": state.error.status_code,
                    },
                },
                indent=2,
            )
        )
        return

    print(f"  Status: {state.status.value}")
    if state.user:
        print(f"  User:   {state.user.get('username')} (id={state.user.get('id')})")
    if state.token:
        print(f"  Token:  {state.token}")
    if state.error:
        code = f" [{state.error.status_code}]" if state.error.status_code else ""
        print(f"  [!] {state.error.message} ({state.error.kind}){code}")


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "asgi:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_level="debug" if settings.debug else "info",
    )
    return 0


def _run_client(args: argparse.Namespace) -> int:
    client_settings = get_client_settings()
    api = AuthApi(args.api_url or client_settings.api_base_url, timeout=client_settings.request_timeout)
    actions = AuthActions(api, landing_route=client_settings.landing_route)

    password = args.password if args.password is not None else getpass.getpass("Password: ")
    try:
        if args.command == "register":
            form = {
                "username": args.username,
                "password": password,
                "firstname": args.firstname,
                "lastname": args.lastname,
            }
            state = actions.sign_up(form, _print_navigation)
        else:
            state = actions.log_in({"username": args.username, "password": password}, _print_navigation)
    finally:
        api.close()

    _print_state(state, args.json)
    return 0 if state.is_authenticated else 1


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="authflow",
        description="Username/password registration and login with signed, expiring tokens.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py serve --port 8000
  python main.py register alice --firstname Alice --lastname Liddell
  python main.py login alice --password pw123
  API_BASE_URL=http://auth.internal:8000 python main.py login alice
        """,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    serve = sub.add_parser("serve", help="Run the API server with uvicorn")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST setting)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: PORT setting)")
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development)")

    for name, help_text in (("register", "Create an account"), ("login", "Log in to an existing account")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("username", help="Account username")
        cmd.add_argument("--password", default=None, help="Password (prompted for if omitted)")
        cmd.add_argument("--api-url", default=None, metavar="URL", help="Server base URL (default: API_BASE_URL)")
        cmd.add_argument("--json", action="store_true", help="Print the resulting state as JSON")
        if name == "register":
            cmd.add_argument("--firstname", required=True, help="First name")
            cmd.add_argument("--lastname", required=True, help="Last name")

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        return

    if args.command == "serve":
        sys.exit(_serve(args))
    sys.exit(_run_client(args))


if __name__ == "__main__":
    main()
