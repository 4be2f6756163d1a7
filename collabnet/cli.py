"""collabnet CLI: explore a collaboration network from the command line.

Usage:
    collabnet search "mi"
    collabnet egonet "Miles Davis" --mode both --min-weight 2
    collabnet path "Miles Davis" "Bill Evans" --hop-penalty 0.5
    collabnet summary
    collabnet export egonet "Miles Davis" --format graphml -o miles.graphml
    collabnet verify <mbid-a> <mbid-b> --limit 5
    collabnet releases <recording-mbid>
    collabnet serve --port 8000

Every graph command reads the snapshot from ``--graphml`` (default:
``GRAPHML_PATH``) and accepts a person's id or name.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from collabnet.config.settings import settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="collabnet",
        description="collabnet: artist collaboration network explorer",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )
    parser.add_argument(
        "--graphml", default=settings.GRAPHML_PATH, help="GraphML snapshot to load"
    )

    subparsers = parser.add_subparsers(dest="command")

    def add_filters(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--mode", default=settings.DEFAULT_EVIDENCE_MODE,
            help="Evidence mode (instr, credit, both)",
        )
        sub.add_argument(
            "--min-weight", type=float, default=settings.DEFAULT_MIN_WEIGHT,
            help="Minimum display strength for an edge",
        )

    # search
    srch = subparsers.add_parser("search", help="Search people by name")
    srch.add_argument("query", help="Name query")
    srch.add_argument("--limit", type=int, default=settings.SEARCH_LIMIT)

    # egonet
    ego = subparsers.add_parser("egonet", help="Show a person's egonet")
    ego.add_argument("focus", nargs="?", default="", help="Focus id or name")
    add_filters(ego)

    # path
    pth = subparsers.add_parser("path", help="Strongest-evidence path between two people")
    pth.add_argument("start", nargs="?", default="", help="Start id or name")
    pth.add_argument("end", nargs="?", default="", help="End id or name")
    pth.add_argument("--hop-penalty", type=float, default=settings.HOP_PENALTY)
    add_filters(pth)

    # summary
    summ = subparsers.add_parser("summary", help="Snapshot statistics")
    add_filters(summ)

    # export
    exp = subparsers.add_parser("export", help="Export an egonet or path view")
    exp.add_argument("view", choices=["egonet", "path"])
    exp.add_argument("people", nargs="*", help="Focus, or start and end")
    exp.add_argument(
        "--format", default="d3", choices=["d3", "cytoscape", "graphml", "csv"],
    )
    exp.add_argument("--output", "-o", help="Output file (directory for csv)")
    exp.add_argument("--hop-penalty", type=float, default=settings.HOP_PENALTY)
    add_filters(exp)

    # verify
    ver = subparsers.add_parser("verify", help="Verify an edge against MusicBrainz")
    ver.add_argument("artist_a", help="MusicBrainz artist id")
    ver.add_argument("artist_b", help="MusicBrainz artist id")
    ver.add_argument("--limit", type=int, default=6)

    # releases
    rel = subparsers.add_parser("releases", help="Release titles for a recording")
    rel.add_argument("rid", help="MusicBrainz recording id")
    rel.add_argument("--max", type=int, default=12, dest="max_releases")

    # serve
    srv = subparsers.add_parser("serve", help="Start the HTTP API")
    srv.add_argument("--host", default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    # Logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Dispatch
    try:
        if args.command == "search":
            _cmd_search(args)
        elif args.command == "egonet":
            _cmd_egonet(args)
        elif args.command == "path":
            _cmd_path(args)
        elif args.command == "summary":
            _cmd_summary(args)
        elif args.command == "export":
            _cmd_export(args)
        elif args.command == "verify":
            asyncio.run(_cmd_verify(args))
        elif args.command == "releases":
            asyncio.run(_cmd_releases(args))
        elif args.command == "serve":
            _cmd_serve(args)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(130)
    except Exception as exc:
        logger.error("Error: %s", exc)
        if args.verbose:
            raise
        sys.exit(1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _load(args: argparse.Namespace) -> Any:
    from collabnet.graph.engine import GraphEngine

    engine = GraphEngine(
        max_nodes=settings.MAX_NODES,
        strict=settings.STRICT_INGESTION,
        hop_penalty=getattr(args, "hop_penalty", settings.HOP_PENALTY),
        search_limit=settings.SEARCH_LIMIT,
    )
    return engine.build_from_graphml(args.graphml)


def _resolve(explorer: Any, value: str, fallback: str) -> str:
    if not value:
        return fallback
    node = explorer.resolve(value)
    if node is None:
        logger.warning("No person matches %r", value)
        return value
    return node.id


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _cmd_search(args: argparse.Namespace) -> None:
    explorer = _load(args).explorer
    matches = explorer.search_names(args.query, args.limit)
    if not matches:
        print("No matches.")
        return
    for node in matches:
        suffix = f"  [{node.instruments}]" if node.instruments else ""
        print(f"{node.id}\t{node.name}{suffix}")


def _cmd_egonet(args: argparse.Namespace) -> None:
    from collabnet.graph.exporters import SubgraphExporter

    explorer = _load(args).explorer
    focus, _, _ = explorer.default_endpoints()
    focus = _resolve(explorer, args.focus, focus)

    view = explorer.compute_egonet(focus, args.mode, args.min_weight)
    print(
        f"Egonet of {explorer.name_of(focus)}: "
        f"{len(view.nodes)} people, {len(view.edges)} links",
        file=sys.stderr,
    )
    _print_json(SubgraphExporter(view, args.mode, highlight_id=focus).to_d3_json())


def _cmd_path(args: argparse.Namespace) -> None:
    explorer = _load(args).explorer
    _, start, end = explorer.default_endpoints()
    start = _resolve(explorer, args.start, start)
    end = _resolve(explorer, args.end, end)

    result = explorer.compute_path_view(
        start, end, args.mode, args.min_weight, args.hop_penalty
    )
    print(explorer.describe_path(result.path))
    if result.found:
        cost = explorer.path_cost(result.path, args.mode, args.min_weight, args.hop_penalty)
        print(f"   {result.hops} hop(s), cost {cost:.3f}, "
              f"{len(result.subgraph.edges)} supporting link(s)")


def _cmd_summary(args: argparse.Namespace) -> None:
    _print_json(_load(args).summary(args.mode, args.min_weight))


def _cmd_export(args: argparse.Namespace) -> None:
    from collabnet.graph.exporters import SubgraphExporter

    explorer = _load(args).explorer
    focus, start, end = explorer.default_endpoints()
    people = list(args.people)

    if args.view == "egonet":
        focus = _resolve(explorer, people[0] if people else "", focus)
        view = explorer.compute_egonet(focus, args.mode, args.min_weight)
        exporter = SubgraphExporter(view, args.mode, highlight_id=focus)
    else:
        start = _resolve(explorer, people[0] if people else "", start)
        end = _resolve(explorer, people[1] if len(people) > 1 else "", end)
        result = explorer.compute_path_view(
            start, end, args.mode, args.min_weight, args.hop_penalty
        )
        exporter = SubgraphExporter(
            result.subgraph, args.mode, highlight_id=start, path=result.path
        )

    if args.format == "graphml":
        if not args.output:
            raise ValueError("--output is required for graphml export")
        exporter.to_graphml(args.output)
    elif args.format == "csv":
        nodes_path, edges_path = exporter.to_csv_files(args.output or ".")
        print(f"Wrote {nodes_path} and {edges_path}")
    else:
        data = exporter.to_d3_json() if args.format == "d3" else exporter.to_cytoscape_json()
        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            print(f"Wrote {args.output}")
        else:
            _print_json(data)


async def _cmd_verify(args: argparse.Namespace) -> None:
    from collabnet.musicbrainz.verification import MusicBrainzConfig, MusicBrainzVerifier

    verifier = MusicBrainzVerifier(MusicBrainzConfig.from_settings(settings))
    result = await verifier.verify_edge(args.artist_a, args.artist_b, args.limit)

    if not result.confirmed:
        print("No shared performer credits found.")
        return
    source = " (cached)" if result.cached else ""
    print(f"{len(result.matches)} shared recording(s){source}:")
    for match in result.matches:
        print(f"  {match.title}  [{match.recording_id}]")
        for title in match.releases:
            print(f"      {title}")


async def _cmd_releases(args: argparse.Namespace) -> None:
    from collabnet.musicbrainz.verification import MusicBrainzConfig, MusicBrainzVerifier

    verifier = MusicBrainzVerifier(MusicBrainzConfig.from_settings(settings))
    for title in await verifier.releases_for_recording(args.rid, args.max_releases):
        print(title)


def _cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from collabnet.api.app import create_app

    result = _load(args)
    print(
        f"Serving {args.graphml} ({result.node_count} people, "
        f"{result.edge_count} links) on http://{args.host}:{args.port}",
        file=sys.stderr,
    )
    uvicorn.run(create_app(result=result), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
