"""Command-line entry point.

Subcommands:
- plan:        show what apply would change
- apply:       converge remote streams on a declaration file
- refresh:     re-read tracked streams, forgetting deleted ones
- destroy:     delete tracked streams
- import:      start tracking an existing stream by identity
- signing-key: print an enterprise's stream signing key
"""

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from auditstream.common.config import Config, get_config
from auditstream.common.exceptions import AuditStreamException
from auditstream.common.logging import get_logger
from auditstream.declarations import load_declarations
from auditstream.orchestration import StreamResource
from auditstream.remote.base import RemoteStreamClient
from auditstream.remote.github import GitHubAuditStreamClient
from auditstream.state import StateStore, create_state_store
from auditstream.streams import (
    ReconciledStreamState,
    StreamDeclaration,
    StreamLifecycleController,
    lookup_signing_key,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="auditstream",
        description="Manage enterprise audit log streams declaratively",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    
    for command, help_text in (
        ("plan", "Show changes required by the declaration file"),
        ("apply", "Create, update or delete streams to match the declaration file"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument(
            "--file", "-f",
            required=True,
            help="YAML declaration file"
        )
        if command == "plan":
            sub.add_argument(
                "--no-refresh",
                action="store_true",
                help="Plan against stored state without reading the remote service"
            )
    
    refresh = subparsers.add_parser("refresh", help="Re-read tracked streams")
    refresh.add_argument("names", nargs="*", help="Resource names (default: all tracked)")
    
    destroy = subparsers.add_parser("destroy", help="Delete tracked streams")
    destroy.add_argument("names", nargs="*", help="Resource names (default: all tracked)")
    
    import_cmd = subparsers.add_parser("import", help="Track an existing stream")
    import_cmd.add_argument("name", help="Resource name to record the stream under")
    import_cmd.add_argument("identity", help="Stream identity as <enterprise>:<stream_id>")
    
    key = subparsers.add_parser("signing-key", help="Show the stream signing key")
    key.add_argument("scope", help="Enterprise slug")
    
    return parser


def describe(name: str, state: Optional[ReconciledStreamState]) -> str:
    if state is None:
        return f"{name}: absent"
    vendor = state.vendor_config.vendor if state.vendor_config else "unknown"
    return (
        f"{name}: {state.identity} enabled={str(state.enabled).lower()} "
        f"vendor={vendor} details={state.summary!r}"
    )


def _resources(
    names: List[str],
    controller: StreamLifecycleController,
    store: StateStore,
) -> List[StreamResource]:
    return [StreamResource(name, controller, store) for name in names]


def _declared_and_tracked(
    declarations: Dict[str, StreamDeclaration], store: StateStore
) -> List[str]:
    tracked = store.list_names()
    return list(declarations) + [name for name in tracked if name not in declarations]


def run(
    args: argparse.Namespace,
    client: RemoteStreamClient,
    store: StateStore,
    out=None,
) -> int:
    """Execute a parsed command against the given client and store."""
    out = out or sys.stdout
    controller = StreamLifecycleController(client)
    
    if args.command == "signing-key":
        key = lookup_signing_key(client, args.scope)
        print(json.dumps({"key_id": key.key_id, "key": key.key}), file=out)
        return 0
    
    if args.command == "import":
        resource = StreamResource(args.name, controller, store)
        state = resource.import_stream(args.identity)
        print(describe(resource.name, state), file=out)
        return 0
    
    if args.command in ("refresh", "destroy"):
        names = args.names or store.list_names()
        for resource in _resources(names, controller, store):
            if args.command == "refresh":
                print(describe(resource.name, resource.refresh()), file=out)
            else:
                resource.destroy()
                print(f"{resource.name}: destroyed", file=out)
        return 0
    
    declarations = load_declarations(args.file)
    names = _declared_and_tracked(declarations, store)
    for resource in _resources(names, controller, store):
        declaration = declarations.get(resource.name)
        if args.command == "plan":
            if not args.no_refresh:
                resource.refresh()
            for line in resource.plan(declaration).render():
                print(line, file=out)
        else:
            print(describe(resource.name, resource.apply(declaration)), file=out)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    
    try:
        config: Config = get_config()
        get_logger("auditstream", config.log_level)
        store = create_state_store(config)
        with GitHubAuditStreamClient.from_config(config) as client:
            return run(args, client, store)
    except AuditStreamException as e:
        logger.error(f"{args.command} failed: {e.message}")
        print(json.dumps(e.to_dict(), default=str), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
