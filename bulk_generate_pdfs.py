# bulk_generate_pdfs.py
import argparse
import json
import os
from pathlib import Path

from config import Config
from pdf_service import EXPORT_SUBDIRS, export_dir, generate_pdf, parse_document, pdf_filename, store_pdf


def _guess_kind(doc: dict) -> str | None:
    if "poNumber" in doc or "vendorId" in doc:
        return "purchase_order"
    if "quoteNo" in doc or ("forCompany" in doc and "invoiceNo" not in doc and "billNo" not in doc):
        return "quotation"
    if "invoiceNo" in doc or "billNo" in doc:
        return "invoice"
    return None


def _label(doc: dict) -> str:
    for key in ("invoiceNo", "billNo", "poNumber", "quoteNo", "_id"):
        if doc.get(key):
            return str(doc[key])
    return "(no number)"


def _load_documents(paths: list[str]):
    """Yield (source, document) for every JSON object found; a file may hold one object or a list."""
    files = []
    for p in paths:
        path = Path(p)
        if path.is_dir():
            files.extend(sorted(path.glob("*.json")))
        else:
            files.append(path)

    for f in files:
        with open(f, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        docs = data if isinstance(data, list) else [data]
        for doc in docs:
            yield f.name, doc


def main(argv=None):
    parser = argparse.ArgumentParser(description="Bulk generate document PDFs from exported JSON.")
    parser.add_argument("paths", nargs="+", help="JSON files or directories of JSON files.")
    parser.add_argument("--kind", choices=sorted(EXPORT_SUBDIRS), default=None,
                        help="Document kind. Guessed from each record when omitted.")
    parser.add_argument("--type", dest="document_type", default=None,
                        help="Invoice print type: Invoice, Bill or Delivery Chalan.")
    parser.add_argument("--exports-dir", default=Config.EXPORTS_DIR, help="Where PDFs are written.")
    parser.add_argument("--assets-dir", default=Config.ASSETS_DIR, help="Logos, letterheads and signature images.")
    parser.add_argument("--all", action="store_true", help="Regenerate PDFs even if one already exists.")
    args = parser.parse_args(argv)

    Path(args.exports_dir).mkdir(parents=True, exist_ok=True)

    try:
        documents = list(_load_documents(args.paths))
    except (OSError, json.JSONDecodeError) as e:
        raise SystemExit(f"Could not read input: {e}")

    if not documents:
        print("No documents found in the given paths.")
        return 0

    total = len(documents)
    generated = 0
    skipped = 0
    failed = 0

    for i, (source, doc) in enumerate(documents, start=1):
        label = f"{source}:{_label(doc) if isinstance(doc, dict) else '?'}"
        try:
            if not isinstance(doc, dict):
                raise ValueError("record is not a JSON object")
            kind = args.kind or _guess_kind(doc)
            if not kind:
                raise ValueError("cannot tell the document kind; pass --kind")

            document = parse_document(kind, doc)
            target = export_dir(kind, args.exports_dir) / pdf_filename(kind, document, args.document_type)
            if target.exists() and not args.all:
                skipped += 1
                print(f"[{i}/{total}] SKIP  {label} (already has PDF)")
                continue

            filename, data = generate_pdf(kind, document, args.document_type, assets_dir=args.assets_dir)
            path = store_pdf(kind, filename, data, args.exports_dir)
            generated += 1
            print(f"[{i}/{total}] DONE  {label} -> {path}")

        except Exception as e:
            failed += 1
            print(f"[{i}/{total}] FAIL  {label}  ({e})")

    print("\nBulk PDF generation complete.")
    print(f"Generated: {generated}")
    print(f"Skipped:   {skipped}")
    print(f"Failed:    {failed}")
    print(f"Exports:   {os.path.abspath(args.exports_dir)}")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
