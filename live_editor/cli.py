"""
CLI entry point — run the edit server, or replay a saved model response
against the project offline.
"""

import argparse
import sys

from .config import Config
from .editing import ActionApplier, ApplyStatus, PathNormalizer, parse_actions, sanitize
from .errors import ParseError
from .log_utils import log, setup_logger


def _load_config(args) -> Config:
    cfg = Config.load(args.config)
    return cfg.override(project_root=args.root)


def _cmd_serve(args) -> int:
    import uvicorn

    from .server import create_app

    cfg = _load_config(args).override(host=args.host, port=args.port)
    setup_logger(cfg.LOG_DIR)
    log.info(f"Project root: {cfg.project_root}")
    log.info(f"Backend running at http://{cfg.HOST}:{cfg.PORT}")
    uvicorn.run(create_app(cfg), host=cfg.HOST, port=cfg.PORT, log_level="info")
    return 0


def _cmd_apply(args) -> int:
    cfg = _load_config(args)
    setup_logger(cfg.LOG_DIR)

    with open(args.response_file, "r", encoding="utf-8") as f:
        raw = f.read()

    try:
        batch = parse_actions(sanitize(raw), max_actions=cfg.MAX_ACTIONS,
                              review_threshold=cfg.REVIEW_THRESHOLD, raw=raw)
    except ParseError as e:
        print(f"\n  [ERROR] {e}\n", file=sys.stderr)
        return 1

    applier = ActionApplier(PathNormalizer(cfg.project_root, cfg.PROTECTED_FILES))
    results = applier.apply(batch)
    for r in results:
        reason = f"  ({r.reason})" if r.reason else ""
        print(f"  {r.status.value:<8} {r.action.kind:<7} {r.action.path}{reason}")
    if batch.truncated_from:
        print(f"\n  [WARN] {batch.truncated_from} actions returned, "
              f"only the first {len(batch)} were applied")
    return 0 if all(r.status != ApplyStatus.FAILED for r in results) else 2


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="live_editor — apply LLM-proposed edits to a project")
    parser.add_argument("--config", default=None,
                        help="Path to .live_editor.yaml config file")
    parser.add_argument("--root", default=None,
                        help="Project root to edit (default: from config)")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP edit server")
    serve.add_argument("--host", default=None, help="Bind address")
    serve.add_argument("--port", type=int, default=None, help="Port to listen on")
    serve.set_defaults(func=_cmd_serve)

    apply_cmd = sub.add_parser("apply", help="Apply a saved model response to the project")
    apply_cmd.add_argument("response_file", help="File holding raw model output")
    apply_cmd.set_defaults(func=_cmd_apply)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
