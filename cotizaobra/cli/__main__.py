# cotizaobra/cli/__main__.py
import asyncio
import json
import logging
import sys
from pathlib import Path

from cotizaobra.core.currency import format_totals
from cotizaobra.core.quote import Language, quote_from_dict, quote_to_dict
from cotizaobra.core.render import render_quote
from cotizaobra.core.strings import strings_for
from cotizaobra.core.totals import compute_totals
from cotizaobra.server.logging_setup import configure_logging
from cotizaobra.server.settings.config import settings
from cotizaobra.services.description_client import DescriptionClient
from cotizaobra.services.description_flow import DescriptionDraft, GenerationStatus, apply_draft, run_generation

logger = logging.getLogger("cotizaobra.cli")

USAGE = """Usage:
  python -m cotizaobra.cli totals <quote.json> [--lang=es|en]
  python -m cotizaobra.cli render <quote.json> [--lang=es|en] [--out=out.html]
  python -m cotizaobra.cli describe <key points...> [--lang=es|en] [--quote=quote.json] [--out=out.json]

Examples:
  python -m cotizaobra.cli totals examples/quote.json --lang=en
  python -m cotizaobra.cli render examples/quote.json --out=cotizacion.html
  python -m cotizaobra.cli describe "Piso para 2000 pies², 15 escalones" --lang=es
  python -m cotizaobra.cli describe "Baño completo" --quote=examples/quote.json --out=quote_out.json
"""


def _load_quote(p: str):
    try:
        data = json.loads(Path(p).read_text(encoding="utf-8"))
        return quote_from_dict(data)
    except Exception as e:
        print(f"Error reading quote JSON '{p}': {e}", file=sys.stderr)
        sys.exit(2)


async def _describe(draft: DescriptionDraft) -> DescriptionDraft:
    client = DescriptionClient()
    try:
        return await run_generation(draft, client)
    finally:
        await client.aclose()


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)

    if len(argv) < 2:
        print(USAGE, file=sys.stderr); sys.exit(1)

    cmd = argv[0].lower()

    # parse optional args (order-agnostic)
    language = settings.default_language
    out_path = None
    quote_path = None
    positional = []
    for arg in argv[1:]:
        if arg.startswith("--lang="):
            language = arg.split("=", 1)[1]
        elif arg.startswith("--out="):
            out_path = arg.split("=", 1)[1]
        elif arg.startswith("--quote="):
            quote_path = arg.split("=", 1)[1]
        elif arg.startswith("--"):
            continue
        else:
            positional.append(arg)

    try:
        language = Language(language)
    except ValueError:
        print(f"Unsupported language: {language!r}", file=sys.stderr)
        print(USAGE, file=sys.stderr); sys.exit(1)

    if not positional:
        print(USAGE, file=sys.stderr); sys.exit(1)

    if cmd == "totals":
        quote = _load_quote(positional[0])
        s = strings_for(language)
        money = format_totals(compute_totals(quote), quote.currency, language)
        print(f"{s['subtotal']}: {money['subtotal']}")
        print(f"{s['tax']}: {money['tax_amount']}")
        print(f"{s['grand_total']}: {money['grand_total']}")
        return

    if cmd == "render":
        quote = _load_quote(positional[0])
        html = render_quote(quote, language)
        if out_path:
            Path(out_path).write_text(html, encoding="utf-8")
            logger.info("Offert skriven till %s", out_path)
        else:
            sys.stdout.write(html)
        return

    if cmd == "describe":
        draft = DescriptionDraft(prompt=" ".join(positional), language=language)
        if not draft.can_generate:
            print(USAGE, file=sys.stderr); sys.exit(1)
        quote = _load_quote(quote_path) if quote_path else None

        done = asyncio.run(_describe(draft))

        if quote is None:
            print(done.text)
            return

        # misslyckad generering -> offerten skrivs ut oförändrad
        if done.status is GenerationStatus.FAILED:
            print(done.text, file=sys.stderr)
        out = json.dumps(quote_to_dict(apply_draft(quote, done)), ensure_ascii=False, indent=2)
        if out_path:
            Path(out_path).write_text(out, encoding="utf-8")
            logger.info("Offert med beskrivning skriven till %s", out_path)
        else:
            print(out)
        return

    print(USAGE, file=sys.stderr); sys.exit(1)


if __name__ == "__main__":
    configure_logging(settings.log_level)
    main()
