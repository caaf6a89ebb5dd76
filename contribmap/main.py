import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import sentry_sdk

from contribmap.core.errors import ContribMapError
from contribmap.core.observability import configure_logging
from contribmap.core.observability import init_sentry
from contribmap.render.cross import render_cross
from contribmap.render.heatmap import render_heatmap
from contribmap.schemas.contributions import Platform
from contribmap.services.colors import colorize_weeks
from contribmap.services.contribution_service import fetch_contributions
from contribmap.settings import Settings


logger = logging.getLogger(__name__)

MAP_FILENAME = "contributions.svg"
CROSS_FILENAME = "contributions_cross.svg"
OUTPUT_FORMATS = ("svg",)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contribmap",
        description=(
            "Generate a contribution map (heatmap) and a cross diagram showing "
            "contribution breakdowns for GitHub or Gitea users."
        ),
    )
    parser.add_argument(
        "--platform",
        default=Platform.GITHUB.value,
        type=str.lower,
        choices=[platform.value for platform in Platform],
        help="Platform to use: github or gitea",
    )
    parser.add_argument("--user", default="", help="Username on the chosen platform")
    parser.add_argument(
        "--token",
        default=None,
        help="Access token (required for GitHub; falls back to GITHUB_TOKEN)",
    )
    parser.add_argument(
        "--gitea-url",
        default=settings.gitea_url,
        help="Base URL for Gitea instance (used if platform is gitea)",
    )
    parser.add_argument(
        "--light-mode",
        action="store_true",
        help="Use the light color scheme for both images (default is dark mode)",
    )
    parser.add_argument("--output", default="svg", help="Output format (only 'svg')")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def run(
    platform: Platform,
    user: str,
    settings: Settings,
    token: str | None,
    gitea_url: str,
    light_mode: bool,
    output_dir: Path = Path("."),
) -> None:
    """Fetch, colorize, render and write both images."""

    if platform is Platform.GITHUB:
        print(f"Fetching contributions for GitHub user {user}...")
    else:
        print(f"Fetching contributions for Gitea user {user} from {gitea_url}...")

    weeks, totals = fetch_contributions(
        platform,
        user,
        settings,
        token=token,
        gitea_url=gitea_url,
    )
    logger.info("Fetched %d weeks, %d categorized events", len(weeks), totals.total)

    colorize_weeks(weeks, light_mode)

    map_path = output_dir / MAP_FILENAME
    map_path.write_bytes(render_heatmap(weeks, light_mode))
    print(f"Contribution map generated and saved to {map_path.name}")

    cross_path = output_dir / CROSS_FILENAME
    cross_path.write_bytes(render_cross(totals, light_mode))
    print(f"Cross diagram generated and saved to {cross_path.name}")


def main(argv: Sequence[str] | None = None) -> int:
    settings = Settings()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if not args.user.strip():
        parser.error("Please provide a username using the --user option.")
    if args.output not in OUTPUT_FORMATS:
        parser.error(
            f"Unknown output format: {args.output}. Currently only 'svg' is supported."
        )

    platform = Platform(args.platform)
    token = args.token or (settings.github_token if platform is Platform.GITHUB else None)
    if platform is Platform.GITHUB and not token:
        parser.error(
            "A GitHub token is required when using the GitHub platform. "
            "Provide it using the --token option."
        )

    configure_logging("DEBUG" if args.verbose else settings.log_level)
    init_sentry(settings)

    try:
        run(
            platform=platform,
            user=args.user.strip(),
            settings=settings,
            token=token,
            gitea_url=args.gitea_url,
            light_mode=args.light_mode,
        )
    except (ContribMapError, OSError) as exc:
        sentry_sdk.capture_exception(exc)
        logger.debug("Run failed", exc_info=exc)
        print(f"Error generating contributions for {args.user}: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
