"""nmreg: register names and keep the registration state in a file."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from nmcrpc.cli.common import create_rpc, read_name_list, read_passphrase, report_error
from nmcrpc.features.coin.service import CoinService, WalletUnlocker
from nmcrpc.features.names.service import NameService
from nmcrpc.features.names.validators import NameValidator
from nmcrpc.features.registration.manager import RegistrationManager
from nmcrpc.features.registration.process import NameRegistration, RegistrationState
from nmcrpc.shared.logging import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nmreg",
        description="Register names in two steps, keeping the state in FILE.",
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    commands.add_parser("help", help="Display this message.")

    info = commands.add_parser("info", help="Show information about the state in FILE.")
    info.add_argument("file", metavar="FILE")

    update = commands.add_parser("update", help="Update all processes in FILE if possible.")
    update.add_argument("file", metavar="FILE")

    clear = commands.add_parser("clear", help="Remove already finished processes from FILE.")
    clear.add_argument("file", metavar="FILE")

    register = commands.add_parser(
        "register", help="Register the given name with the given value."
    )
    register.add_argument("file", metavar="FILE")
    register.add_argument("name", metavar="NAME")
    register.add_argument("value", metavar="VALUE")

    multi = commands.add_parser(
        "multi", help="Register all names in LIST-FILE with the given value."
    )
    multi.add_argument("file", metavar="FILE")
    multi.add_argument("list_file", metavar="LIST-FILE")
    multi.add_argument("value", metavar="VALUE")

    return parser


def describe(reg: NameRegistration) -> str:
    if reg.state is RegistrationState.RESERVED:
        if reg.can_activate():
            return "registered, can activate"
        return "registered, can not activate"
    if reg.is_finished():
        return "activated and finished"
    return "activated"


def do_info(manager: RegistrationManager) -> None:
    print("Names in registration:")
    print()
    for reg in manager:
        print(f"{reg.name}: {describe(reg)}")


def do_register(
    manager: RegistrationManager, names: NameService, name: str, value: str
) -> None:
    name_result = NameValidator.validate_name(name)
    if not name_result.is_valid:
        raise ValueError(f"{name}: {name_result.error_message}")
    value_result = NameValidator.validate_value(value)
    if not value_result.is_valid:
        raise ValueError(value_result.error_message)

    info = names.query_name(name_result.normalized_value)
    reg = manager.register_name(info)
    reg.set_value(value)

    print(f"Started registration of {info.name}.")


def run(args: argparse.Namespace) -> None:
    rpc = create_rpc()
    coin = CoinService(rpc)
    names = NameService(rpc, coin)
    manager = RegistrationManager(rpc)

    state_file = Path(args.file)
    if state_file.exists():
        print("Reading old state.")
        manager.load(state_file)
    else:
        print("No old state to read, initialising empty.")

    # Transactions that went out must never be forgotten, so the state is
    # written even if a later step fails.
    try:
        if args.command == "info":
            do_info(manager)
        elif args.command == "clear":
            cleaned = manager.clean_up()
            print(f"Removed {cleaned} finished names.")
        else:
            with WalletUnlocker(coin) as unlocker:
                unlocker.unlock(read_passphrase(coin))

                if args.command == "update":
                    manager.update()
                    print("Updated all processes.")
                elif args.command == "register":
                    do_register(manager, names, args.name, args.value)
                elif args.command == "multi":
                    for name in read_name_list(args.list_file):
                        do_register(manager, names, name, args.value)
                        manager.save(state_file)
    finally:
        manager.save(state_file)
        print("Wrote new state.")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1
    if args.command == "help":
        parser.print_help()
        return 0

    setup_logging()
    try:
        run(args)
    except Exception as exc:
        return report_error("nmreg", exc)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
