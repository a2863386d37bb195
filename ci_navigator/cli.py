"""CLI entry point for the interactive pipeline navigator."""

import argparse
import asyncio
import logging
import sys

from ci_navigator.navigator import Navigator
from ci_navigator.prompts import TerminalPrompter
from ci_navigator.providers.loading import DEFAULT_PROVIDER, load_provider_manifest
from ci_navigator.terminal import TerminalContext

LOG_FORMAT = "%(levelname)s: %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def report_error(log: logging.Logger, error: Exception, *, debug: bool) -> None:
    """Report a session-ending error; the traceback only in debug mode."""
    if debug:
        log.exception("An error occurred:", exc_info=error)
    else:
        log.error("%s (run with --debug for details)", error)


async def run(
    provider_key: str = DEFAULT_PROVIDER,
    provider_config_json: str = "{}",
    debug: bool = False,
    terminal: TerminalContext | None = None,
) -> int:
    """Run an interactive session and return the exit code."""
    log = logging.getLogger("ci_navigator")

    try:
        manifest = load_provider_manifest(provider_key)
        config = manifest.config_cls.model_validate_json(provider_config_json)
        terminal = terminal or TerminalContext.from_environment()

        async with manifest.provider_factory(config) as provider:
            navigator = Navigator(
                provider=provider,
                prompter=TerminalPrompter(terminal=terminal),
                terminal=terminal,
            )
            return await navigator.run()
    except Exception as e:
        report_error(log, e, debug=debug)
        return EXIT_FAILURE if debug else EXIT_SUCCESS


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Browse CI pipelines and trigger jobs interactively"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every command run and print full error details",
    )
    parser.add_argument(
        "--provider",
        default=DEFAULT_PROVIDER,
        help=f"Provider key (default: {DEFAULT_PROVIDER})",
    )
    parser.add_argument(
        "--provider-config",
        default="{}",
        help='JSON configuration for the provider (e.g. \'{"repo": "group/project"}\')',
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format=DEBUG_LOG_FORMAT if args.debug else LOG_FORMAT,
        stream=sys.stderr,
    )

    try:
        exit_code = asyncio.run(
            run(
                provider_key=args.provider,
                provider_config_json=args.provider_config,
                debug=args.debug,
            )
        )
    except KeyboardInterrupt:
        exit_code = EXIT_INTERRUPTED
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
