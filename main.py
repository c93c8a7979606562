import os
import sys
import logging
import argparse
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Dict, List, Optional

from presse.aggregate import aggregate, sorted_weeks
from presse.config import (
    COMBINED_FILE, DATA_DIR, LOG_LEVEL, OUTPUT_DIR, SENTIMENT_FILE, SW_TEMPLATE_FILE,
    TEMPLATE_FILE, TEXT_TRUNCATE_AT, TOP_THEMES_PER_WEEK, TOPICS_FILE, TZ, URL_CACHE_FILE,
    load_sentiment, load_theme_config, load_url_cache,
)
from presse.corpus import CorpusError, build_corpus, load_corpus, sort_raw_records
from presse.monitoring import BuildMonitor
from presse.storage import (
    log_size_reduction, shard_by_month, write_combined, write_json,
    write_month_shards, write_text,
)
from renderers.base import RenderContext, make_environment
from renderers.noscript import NoscriptRenderer
from renderers.page import assemble_page
from renderers.service_worker import cache_name, render_service_worker
from renderers.zen import ZenRenderer

log = logging.getLogger("presse-build")


@dataclass
class BuildResult:
    articles: int = 0
    months: List[str] = field(default_factory=list)
    weeks: List[str] = field(default_factory=list)
    skipped_files: int = 0
    build_hash: Optional[str] = None
    fallbacks: Dict[str, int] = field(default_factory=dict)


def _read_optional(path: str) -> Optional[str]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        log.warning("Fichier %s introuvable.", path)
        return None


def run_build(data_dir: str = DATA_DIR, output_dir: str = OUTPUT_DIR,
              url_cache_file: str = URL_CACHE_FILE, topics_file: str = TOPICS_FILE,
              sentiment_file: str = SENTIMENT_FILE, template_file: str = TEMPLATE_FILE,
              sw_template_file: str = SW_TEMPLATE_FILE, tz: tzinfo = TZ) -> BuildResult:
    monitor = BuildMonitor()
    os.makedirs(output_dir, exist_ok=True)
    url_cache = load_url_cache(url_cache_file)

    log.info("1. Chargement des JSON...")
    records, report = load_corpus(data_dir, monitor)

    log.info("2. Nettoyage et optimisation...")
    articles = build_corpus(records, tz, url_cache, TEXT_TRUNCATE_AT, monitor)
    log_size_reduction(records, articles)

    log.info("3. Decoupage par mois...")
    shards = shard_by_month(articles)
    months = list(shards)
    log.info("   %d mois: %s", len(months), ", ".join(months))

    log.info("4. Ecriture des fichiers mensuels...")
    write_month_shards(output_dir, shards)
    log.info("5. Ecriture de data.json...")
    write_combined(output_dir, articles)

    log.info("6. Resumes hebdomadaires...")
    themes = load_theme_config(topics_file)
    sentiment = load_sentiment(sentiment_file)
    weeks = sorted_weeks(aggregate(articles, themes, monitor))
    log.info("   %d semaines generees", len(weeks))

    ctx = RenderContext(weeks=weeks, themes=themes, sentiment=sentiment, top_themes=TOP_THEMES_PER_WEEK)
    env = make_environment()
    zen_html = ZenRenderer(env).render(ctx)
    noscript_html = NoscriptRenderer(env).render(ctx)

    result = BuildResult(
        articles=len(articles),
        months=months,
        weeks=[w.key for w in weeks],
        skipped_files=report.skipped_files,
    )

    log.info("7. Assemblage de index.html...")
    template = _read_optional(template_file)
    if template is None:
        write_text(os.path.join(output_dir, "semainier.html"), zen_html)
        write_text(os.path.join(output_dir, "noscript.html"), noscript_html)
        log.warning("   Pas de template: fragments ecrits separement.")
    else:
        html, build_hash = assemble_page(template, zen_html, noscript_html, months)
        size = write_text(os.path.join(output_dir, "index.html"), html)
        result.build_hash = build_hash
        log.info("   index.html: %.1f KB (build %s)", size / 1024, build_hash)

        log.info("8. Service worker...")
        sw_template = _read_optional(sw_template_file)
        if sw_template is not None:
            write_text(os.path.join(output_dir, "sw.js"), render_service_worker(sw_template, build_hash, months))
            log.info("   sw.js genere avec le cache %s", cache_name(build_hash))

    monitor.log_summary()
    result.fallbacks = monitor.get_status()
    log.info("BUILD TERMINE: %d articles, %d mois, %d semaines.", result.articles, len(months), len(weeks))
    return result


def run_combine(data_dir: str = DATA_DIR, output_file: str = COMBINED_FILE, tz: tzinfo = TZ) -> int:
    """Pool every daily file into one pretty-printed, date-sorted JSON array."""
    monitor = BuildMonitor()
    records, _ = load_corpus(data_dir, monitor)
    ordered = sort_raw_records(records, tz, monitor)
    size = write_json(output_file, ordered, minify=False)
    log.info("Fichier cree: %s (%.2f Mo, %d articles)", output_file, size / 1024 / 1024, len(ordered))
    monitor.log_summary()
    return len(ordered)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build statique de la Revue de Presse")
    sub = parser.add_subparsers(dest="command")

    build = sub.add_parser("build", help="donnees mensuelles, semainier, index.html, sw.js")
    build.add_argument("--data-dir", default=DATA_DIR)
    build.add_argument("--output-dir", default=OUTPUT_DIR)
    build.add_argument("--url-cache", default=URL_CACHE_FILE)
    build.add_argument("--topics", default=TOPICS_FILE)
    build.add_argument("--sentiment", default=SENTIMENT_FILE)
    build.add_argument("--template", default=TEMPLATE_FILE)
    build.add_argument("--sw-template", default=SW_TEMPLATE_FILE)

    combine = sub.add_parser("combine", help="fusionne les fichiers journaliers")
    combine.add_argument("--data-dir", default=DATA_DIR)
    combine.add_argument("--output", default=COMBINED_FILE)

    argv = list(sys.argv[1:] if argv is None else argv)
    # "build" par defaut, options comprises
    if not argv or argv[0] not in ("build", "combine", "-h", "--help"):
        argv.insert(0, "build")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=LOG_LEVEL.upper(), format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)
    try:
        if args.command == "combine":
            run_combine(args.data_dir, args.output)
        else:
            run_build(
                data_dir=args.data_dir,
                output_dir=args.output_dir,
                url_cache_file=args.url_cache,
                topics_file=args.topics,
                sentiment_file=args.sentiment,
                template_file=args.template,
                sw_template_file=args.sw_template,
            )
    except CorpusError as e:
        log.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
