"""nmupdate: list, update and send names owned by the wallet."""

from __future__ import annotations

import argparse

from nmcrpc.cli.common import create_rpc, read_name_list, read_passphrase, report_error
from nmcrpc.features.coin.service import CoinService, WalletUnlocker
from nmcrpc.features.names.service import NameInfo, NameService
from nmcrpc.shared.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nmupdate",
        description="Update names owned by the wallet or send them to others.",
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")

    commands.add_parser("help", help="Display this message.")
    commands.add_parser("list", help="List owned names and their expiry counter.")

    update = commands.add_parser("update", help="Update NAME to VAL (or existing value).")
    update.add_argument("name", metavar="NAME")
    update.add_argument("value", metavar="VAL", nargs="?")

    send = commands.add_parser("send", help="Update NAME and send to ADDR.")
    send.add_argument("name", metavar="NAME")
    send.add_argument("address", metavar="ADDR")
    send.add_argument("value", metavar="VAL", nargs="?")

    update_multi = commands.add_parser(
        "update-multi",
        help="Update all names in FILE to VAL or their current value.",
    )
    update_multi.add_argument("list_file", metavar="FILE")
    update_multi.add_argument("value", metavar="VAL", nargs="?")

    send_multi = commands.add_parser("send-multi", help="Send all names in FILE to ADDR.")
    send_multi.add_argument("list_file", metavar="FILE")
    send_multi.add_argument("address", metavar="ADDR")
    send_multi.add_argument("value", metavar="VAL", nargs="?")

    return parser


def sort_by_expiry(names: list[NameInfo]) -> list[NameInfo]:
    return sorted(names, key=lambda info: (-info.expires_in, info.name))


def perform_update(
    service: NameService,
    names: list[str],
    value: str | None,
    address: str | None = None,
) -> None:
    for name in names:
        print(f"Updating {name}: ", end="", flush=True)
        info = service.query_name(name)
        txid = service.update_name(info, value=value, address=address)
        print(txid)


def run(args: argparse.Namespace) -> None:
    rpc = create_rpc()
    coin = CoinService(rpc)
    service = NameService(rpc, coin)

    if args.command == "list":
        for info in sort_by_expiry(service.for_my_names()):
            print(f"{info.name:>30}: {info.expires_in}")
        return

    if args.command in ("update", "send"):
        names = [args.name]
    else:
        names = read_name_list(args.list_file)
    address = getattr(args, "address", None)

    with WalletUnlocker(coin) as unlocker:
        unlocker.unlock(read_passphrase(coin))
        perform_update(service, names, args.value, address)


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
        return report_error("nmupdate", exc)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
