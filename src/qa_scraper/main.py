import argparse
import asyncio
import logging
import os
import sys
from typing import Any, Callable, Dict, List, Optional, Sequence

from dotenv import load_dotenv  # type: ignore

from .constants import DEFAULT_PATHS, PROMPT_DEFAULTS, SUPPORTED_DRIVERS, SUPPORTED_SITES
from .exceptions import ConfigError, ScraperError
from .scraper.browser import BrowserSession, build_proxy
from .scraper.config import DEFAULT_SETTINGS, load_settings
from .scraper.registry import get_adapter
from .scraper.runner import run_workflow
from .utils.csv_handler import CSVHandler
from .utils.drafter import add_draft_answers
from .utils.logging_setup import setup_logging
from .utils.text_processor import TextProcessor


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Q&A topic scraper: collect questions for a topic and draft answers')
    parser.add_argument('--driver', choices=SUPPORTED_DRIVERS, help='Browser driver: local fixtures or a hosted Hyperbrowser session')
    parser.add_argument('--site', choices=SUPPORTED_SITES, help='Site adapter to run')
    parser.add_argument('--topic', type=str, help='Topic to search for (default: $DEFAULT_TOPIC)')
    parser.add_argument('--limit', type=int, help='Maximum number of questions to collect')
    parser.add_argument('--outdir', type=str, help='Output directory for JSON and CSV files')
    parser.add_argument('--proxy-host', type=str, help='Proxy host (default: $PROXY_HOST)')
    parser.add_argument('--proxy-port', type=int, help='Proxy port (default: $PROXY_PORT)')
    parser.add_argument('--proxy-user', type=str, help='Proxy username (default: $PROXY_USER)')
    parser.add_argument('--proxy-pass', type=str, help='Proxy password (default: $PROXY_PASS)')
    parser.add_argument('--headless', action='store_true', help='Run the browser headless')
    parser.add_argument('--config', type=str, default=DEFAULT_PATHS['config_file'], help='Path to configuration file')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Override the configured log level')
    return parser


def _ask(prompt: str, input_fn: Callable[[str], str]) -> str:
    try:
        return input_fn(prompt).strip()
    except EOFError:
        return ''


def prompt_choice(label: str, choices: Sequence[str], default: str,
                  input_fn: Callable[[str], str] = input) -> str:
    """Ask until the answer is one of ``choices``; blank means the default."""
    while True:
        answer = _ask(f"{label} ({'/'.join(choices)}) [{default}]: ", input_fn).lower()
        if not answer:
            return default
        if answer in choices:
            return answer
        print(f"Please choose one of: {', '.join(choices)}")


def prompt_text(label: str, default: str, input_fn: Callable[[str], str] = input) -> str:
    return _ask(f"{label} [{default}]: ", input_fn) or default


def prompt_int(label: str, default: int, input_fn: Callable[[str], str] = input) -> int:
    while True:
        answer = _ask(f"{label} [{default}]: ", input_fn)
        if not answer:
            return default
        try:
            value = int(answer)
        except ValueError:
            print("Please enter a whole number")
            continue
        if value > 0:
            return value
        print("Please enter a positive number")


def resolve_options(args: argparse.Namespace, settings: Dict[str, Any],
                    input_fn: Callable[[str], str] = input) -> Dict[str, Any]:
    """
    Merge command line, environment and interactive answers into run options.

    Command line values win, then environment variables, then prompts
    (for driver, site, topic and limit only).
    """
    driver = args.driver or prompt_choice('Driver', SUPPORTED_DRIVERS, PROMPT_DEFAULTS['driver'], input_fn)
    site = args.site or prompt_choice('Site', SUPPORTED_SITES, PROMPT_DEFAULTS['site'], input_fn)
    topic = args.topic or os.getenv('DEFAULT_TOPIC') or prompt_text('Topic', PROMPT_DEFAULTS['topic'], input_fn)
    limit = args.limit if args.limit is not None else prompt_int('Limit', PROMPT_DEFAULTS['limit'], input_fn)

    proxy = build_proxy(
        args.proxy_host or os.getenv('PROXY_HOST'),
        args.proxy_port or os.getenv('PROXY_PORT'),
        args.proxy_user or os.getenv('PROXY_USER'),
        args.proxy_pass or os.getenv('PROXY_PASS')
    )

    return {
        'driver': driver,
        'site': site,
        'topic': topic,
        'limit': limit,
        'outdir': args.outdir or settings['storage']['output_dir'],
        'headless': args.headless or bool(settings['browser'].get('headless', False)),
        'proxy': proxy
    }


async def run_scrape(options: Dict[str, Any], settings: Dict[str, Any],
                     logger: logging.Logger) -> Optional[List[Dict[str, Any]]]:
    """
    Run one scrape end to end and persist the annotated results.

    Returns:
        The persisted rows, or None when the adapter produced no result
    """
    site = options['site']
    topic = options['topic']
    adapter = get_adapter(site, options['driver'], settings, logger=logging.getLogger(f"qa_scraper.{site}"))

    if options['proxy']:
        logger.info(f"Using proxy {options['proxy']['host']}:{options['proxy']['port']}")

    async with BrowserSession(options['driver'], headless=options['headless'], proxy=options['proxy'],
                              logger=logging.getLogger('qa_scraper.browser')) as session:
        page = await session.page()
        results = await run_workflow(adapter, page, topic, options['limit'], logger=logger)

    if results is None:
        logger.info("No result produced")
        return None

    rows = add_draft_answers(results)
    handler = CSVHandler(options['outdir'], logger=logging.getLogger('qa_scraper.storage'))
    base_name = TextProcessor.output_base_name(site, topic)
    handler.save_json(base_name, rows)
    handler.save_csv(base_name, rows)
    logger.info(f"Done: {len(rows)} question(s) saved under {options['outdir']}")
    return rows


def main(argv: Optional[Sequence[str]] = None, input_fn: Callable[[str], str] = input) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        settings = DEFAULT_SETTINGS
        setup_logging(settings)
        logging.getLogger('qa_scraper').error(f"Error: {e}")
        return 1

    if args.log_level:
        settings['logging']['level'] = args.log_level

    try:
        options = resolve_options(args, settings, input_fn)
    except ConfigError as e:
        setup_logging(settings)
        logging.getLogger('qa_scraper').error(f"Error: {e}")
        return 1

    setup_logging(settings, scope=f"{options['site']}-{options['topic']}")
    logger = logging.getLogger('qa_scraper')
    logger.info(f"Starting: site={options['site']} driver={options['driver']} "
                f"topic=\"{options['topic']}\" limit={options['limit']}")

    try:
        asyncio.run(run_scrape(options, settings, logger))
    except ScraperError as e:
        logger.error(f"Error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Error: {type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
