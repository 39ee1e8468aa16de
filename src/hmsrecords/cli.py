#!/usr/bin/env python3
"""CLI entry point for hmsrecords package.

Usage:
    python -m hmsrecords summary [--config hmsrecords.toml]
    python -m hmsrecords list
    python -m hmsrecords show <patient_id>
    python -m hmsrecords users [--role Doctor]
    python -m hmsrecords validate
    python -m hmsrecords export [--output hmsrecords_export.md]
    python -m hmsrecords init-config [--output hmsrecords.toml]
    python -m hmsrecords serve-mcp
"""

import argparse
import logging
import sys

from hmsrecords.config import DEFAULT_CONFIG_PATH


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="hmsrecords",
        description="Inspect and export the hospital record store.",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to hmsrecords.toml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("summary", help="Show record and user counts")
    sub.add_parser("list", help="List all medical records")

    show_parser = sub.add_parser("show", help="Show one patient's medical record")
    show_parser.add_argument("patient_id", help="Patient ID")

    users_parser = sub.add_parser("users", help="List staff members")
    users_parser.add_argument("--role", default="", help="Doctor, Pharmacist or Administrator")

    sub.add_parser("validate", help="Strictly parse both backing files and report problems")

    export_parser = sub.add_parser("export", help="Export all records as markdown")
    export_parser.add_argument("--output", default="hmsrecords_export.md", help="Output file path")

    config_parser = sub.add_parser("init-config", help="Generate a default hmsrecords.toml")
    config_parser.add_argument("--output", default=DEFAULT_CONFIG_PATH, help="Config file output path")
    config_parser.add_argument("--records", default="", help="Medical record file path")
    config_parser.add_argument("--users", default="", help="User list file path")

    sub.add_parser("serve-mcp", help="Start MCP server")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "init-config":
        _handle_init_config(args)
        return
    if args.command == "serve-mcp":
        _handle_serve_mcp(args)
        return

    from hmsrecords.config import load_config, log_level

    config = load_config(args.config)
    logging.basicConfig(
        level=logging.INFO if args.verbose else log_level(config),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "validate":
        _handle_validate(config)
        return

    store = _open_store(config)
    if args.command == "summary":
        _print_summary(store)
    elif args.command == "list":
        _handle_list(store)
    elif args.command == "show":
        _handle_show(store, args.patient_id)
    elif args.command == "users":
        _handle_users(store, args.role)
    elif args.command == "export":
        _handle_export(store, args.output)


def _open_store(config):
    from hmsrecords.config import store_config
    from hmsrecords.exceptions import RecordStoreError
    from hmsrecords.store import RecordStore

    store = RecordStore(store_config(config))
    try:
        store.load_all()
    except RecordStoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    return store


def _print_summary(store):
    counts = store.summary()

    print(f"\n{'='*50}")
    print("Record Store Summary")
    print(f"{'='*50}")
    for key, count in counts.items():
        print(f"  {key:<25} {count:>6}")
    print(f"{'='*50}")


def _handle_list(store):
    records = store.all()
    if not records:
        print("(no records)")
        return

    headers = ["patient_id", "name", "date_of_birth", "blood_type", "dx", "tx", "rx"]
    rows = [
        [r.patient_id, r.name, r.date_of_birth, r.blood_type,
         str(len(r.diagnoses)), str(len(r.treatments)), str(len(r.prescriptions))]
        for r in records
    ]
    col_widths = [max(len(h), max(len(row[i][:40]) for row in rows)) for i, h in enumerate(headers)]
    fmt = " | ".join(f"{{:<{w}}}" for w in col_widths)
    print(fmt.format(*headers))
    print("-+-".join("-" * w for w in col_widths))
    for row in rows:
        print(fmt.format(*(v[:40] for v in row)))

    print(f"\n({len(rows)} records)")


def _handle_show(store, patient_id: str):
    from hmsrecords.formatters.text import describe_record

    record = store.find_by_id(patient_id)
    if record is None:
        print(f"Patient {patient_id} not found.")
        sys.exit(1)
    print(describe_record(record))


def _handle_users(store, role: str):
    from hmsrecords.formatters.text import describe_user

    try:
        staff = store.staff(role or None)
    except ValueError:
        print(f"Error: unknown role {role!r}", file=sys.stderr)
        sys.exit(1)

    print("\n=== Hospital Staff ===")
    if not staff:
        print("No staff members found.")
        return
    for user in staff:
        print(describe_user(user))


def _handle_validate(config):
    from hmsrecords.config import store_config
    from hmsrecords.exceptions import RecordStoreError
    from hmsrecords.store import RecordStore

    store = RecordStore(store_config(config))
    failed = False

    try:
        users = store.load_users()
        print(f"Users: {users.loaded} loaded, {len(users.warnings)} skipped")
        for warning in users.warnings:
            print(f"  skipped: {warning}")
    except RecordStoreError as e:
        print(f"Users: {e}", file=sys.stderr)
        failed = True

    try:
        records = store.load_records()
        print(f"Medical records: {records.loaded} loaded")
    except RecordStoreError as e:
        print(f"Medical records: {e}", file=sys.stderr)
        failed = True

    if failed:
        sys.exit(1)


def _handle_export(store, output: str):
    from hmsrecords.formatters.markdown import export_markdown

    path = export_markdown(store, output_path=output)
    print(f"Exported to {path}")


def _handle_init_config(args):
    from hmsrecords.config import DEFAULT_RECORDS_PATH, DEFAULT_USERS_PATH, generate_config

    path = generate_config(
        config_path=args.output,
        records_path=args.records or DEFAULT_RECORDS_PATH,
        users_path=args.users or DEFAULT_USERS_PATH,
    )
    print(f"Config generated at {path}")


def _handle_serve_mcp(args):
    import os

    os.environ["HMSRECORDS_CONFIG"] = args.config

    from hmsrecords.mcp.server import mcp

    mcp.run()


if __name__ == "__main__":
    main()
