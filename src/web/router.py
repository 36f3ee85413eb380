"""HTTP route composition."""

from __future__ import annotations

from src.web.handlers import handle_reqline
from src.web.server import Router

router = Router(name="root")
router.register("POST", "/", handle_reqline)
