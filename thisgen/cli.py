"""Command-line entry point: ``thisgen <command>``."""

from __future__ import annotations

import argparse
import sys

from . import __version__
from .client import SUPPORTED_LANGUAGES
from .commands import add_entity, add_link, doctor, generate_client, info, init_project
from .errors import ThisgenError
from .utils import console


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="thisgen",
        description="Scaffold and introspect `this` API projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  thisgen init --root ./api\n"
            "  thisgen add-entity product --fields \"sku:String,price:f64\" --root ./api\n"
            "  thisgen add-link order product --root ./api\n"
            "  thisgen generate-client --root ./api -o ./web/src/api-client.ts\n"
            "  thisgen doctor --root ./api\n"
            "  thisgen info --root ./api\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # Shared by every subcommand so flags may follow the command name.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--root",
        default=".",
        help="API project root (default: current directory)",
    )
    common.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be written without touching the filesystem",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init", parents=[common], help="Create the anchored project skeleton")
    init.add_argument("--name", default=None, help="Project name (default: root directory name)")

    entity = sub.add_parser("add-entity", parents=[common], help="Scaffold and register an entity")
    entity.add_argument("name", help="Entity name, singular (e.g. product)")
    entity.add_argument(
        "--fields",
        default=None,
        help='Comma-separated name:Type pairs, e.g. "sku:String,price:f64,note:Option<String>"',
    )
    entity.add_argument(
        "--indexed",
        default="name",
        help="Comma-separated indexed fields (default: name)",
    )
    entity.add_argument(
        "--validated",
        action="store_true",
        help="Use the validated entity macro",
    )

    link = sub.add_parser("add-link", parents=[common], help="Declare a link in config/links.yaml")
    link.add_argument("source", help="Source entity")
    link.add_argument("target", help="Target entity")
    link.add_argument("--link-type", default=None, help="Link type (default: has_<target>)")
    link.add_argument("--forward", default=None, help="Forward route name (default: target plural)")
    link.add_argument("--reverse", default=None, help="Reverse route name (default: source)")
    link.add_argument("--description", default=None, help="Link description")
    link.add_argument(
        "--no-validation-rule",
        action="store_true",
        help="Do not add a validation rule for the link",
    )

    generate = sub.add_parser(
        "generate-client", parents=[common], help="Emit a typed API client"
    )
    generate.add_argument(
        "--lang",
        default="typescript",
        choices=SUPPORTED_LANGUAGES,
        help="Client language (default: typescript)",
    )
    generate.add_argument("--output", "-o", default=None, help="Output file")

    sub.add_parser("doctor", parents=[common], help="Check project coherence")
    sub.add_parser("info", parents=[common], help="Summarise entities, links and registration")

    return parser


def run(args: argparse.Namespace) -> int:
    """Dispatch parsed *args*; return the process exit code."""
    if args.command == "init":
        init_project(args.root, args.name, dry_run=args.dry_run)
    elif args.command == "add-entity":
        add_entity(
            args.root,
            args.name,
            fields=args.fields,
            indexed=args.indexed,
            validated=args.validated,
            dry_run=args.dry_run,
        )
    elif args.command == "add-link":
        add_link(
            args.root,
            args.source,
            args.target,
            link_type=args.link_type,
            forward=args.forward,
            reverse=args.reverse,
            description=args.description,
            validation_rule=not args.no_validation_rule,
            dry_run=args.dry_run,
        )
    elif args.command == "generate-client":
        generate_client(args.root, args.output, args.lang, dry_run=args.dry_run)
    elif args.command == "doctor":
        report = doctor(args.root)
        return 1 if report.has_errors else 0
    elif args.command == "info":
        info(args.root)
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``thisgen`` and ``python -m thisgen``."""
    args = build_parser().parse_args(argv)
    try:
        code = run(args)
    except ThisgenError as exc:
        console.print("[bold red]Error:[/bold red] ", end="")
        console.print(str(exc), markup=False, highlight=False)
        sys.exit(1)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
