"""Allow ``python -m field_subscriptions_generator``."""

from __future__ import annotations

from .cli import main

raise SystemExit(main())
