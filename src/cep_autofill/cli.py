"""cep-autofill CLI: lookup and one-shot page fill commands."""

import asyncio
import json
import sys
from pathlib import Path

from cep_autofill.config import settings
from cep_autofill.observability.logging import session_scope, setup_logging
from cep_autofill.observability.tracing import configure_tracing


def main() -> None:
    """Fill an address form in a saved page: cep-autofill <page.html> <cep> [-o out.html]"""
    setup_logging(json_format=settings.log_json, level=settings.log_level)
    configure_tracing(settings)

    args = sys.argv[1:]
    if len(args) < 2 or args[0] == "--help":
        print("Usage: cep-autofill <page.html> <cep> [-o out.html]")
        print("  Example: cep-autofill checkin.html 01310-930 -o filled.html")
        print(f"  Labels: {settings.labels_url}")
        sys.exit(0 if args[:1] == ["--help"] else 1)

    page = Path(args[0])
    cep = args[1]
    output = None
    if "-o" in args[2:]:
        idx = args.index("-o", 2)
        if idx + 1 >= len(args):
            print("Error: -o needs a file name")
            sys.exit(1)
        output = Path(args[idx + 1])

    if not page.is_file():
        print(f"Error: {page} not found")
        sys.exit(1)

    from cep_autofill.pipeline.headless import autofill_html

    with session_scope():
        filled, html = asyncio.run(
            autofill_html(page.read_text(encoding="utf-8"), cep, base_path=page.parent)
        )

    if output:
        output.write_text(html, encoding="utf-8")
        print(f"Wrote {output}")
    else:
        print(html)

    if not filled:
        print(f"No address filled for CEP {cep}", file=sys.stderr)
        sys.exit(2)


def lookup_main() -> None:
    """Query the provider chain: cep-lookup <cep>"""
    setup_logging(json_format=settings.log_json, level=settings.log_level)
    configure_tracing(settings)

    if len(sys.argv) < 2:
        print("Usage: cep-lookup <cep>")
        print("  Example: cep-lookup 01310-930")
        sys.exit(1)

    from cep_autofill.retrieval.gateway import AddressGateway, clean_cep

    code = clean_cep(sys.argv[1])
    if code is None:
        print(f"Error: {sys.argv[1]!r} is not an 8-digit CEP")
        sys.exit(1)

    gateway = AddressGateway.from_settings(settings)
    with session_scope():
        record = asyncio.run(gateway.lookup(code))
    if record is None:
        print(f"CEP {code} not found by any provider ({', '.join(p.name for p in gateway.providers)})")
        sys.exit(2)

    print(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
