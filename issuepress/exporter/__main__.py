"""Run the exporter with ``python -m issuepress.exporter``."""

from .cli import main

raise SystemExit(main())
