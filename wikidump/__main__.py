from wikidump.cli import main

# python -m wikidump [OPTIONS] DUMP-XML
if __name__ == "__main__":
    raise SystemExit(main())
