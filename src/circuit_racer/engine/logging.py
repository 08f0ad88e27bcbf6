from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, override

from rich.highlighter import Highlighter
from rich.logging import RichHandler

from circuit_racer.core import LOGGER_NAME
from circuit_racer.core.labels import SPEED_LABELS, TURN_LABELS

if TYPE_CHECKING:
    from collections.abc import MutableMapping

    from rich.text import Text

    from circuit_racer.engine.race_engine import RaceEngine

SPEED_PATTERN = re.compile(
    rf"'({'|'.join(map(re.escape, SPEED_LABELS.values()))})'",
)
TURN_PATTERN = re.compile(
    rf"\bthe ({'|'.join(map(re.escape, TURN_LABELS.values()))}) turn\b",
)

COLOR = {
    "success": "bold #23d18b",  # light green
    "failure": "bold bright_red",
    "damage": "bold red",
    "totalled": "bold underline red",
    "lap": "bold underline",
    "pits": "bold #29b8db",  # cyan
    "speed": "bold #f5f543",  # yellow
    "turn": "bold #d670d6",  # magenta
    "prefix": "grey50",
    "winner": "bold #ffaf00",  # orange
}


class ContextAdapter(logging.LoggerAdapter):
    """Inject per-engine runtime context into every log record.

    All engines share one logger; each wraps it in its own adapter.
    """

    def __init__(self, logger: logging.Logger, engine: RaceEngine) -> None:
        super().__init__(logger)
        self.engine: RaceEngine = engine

    @override
    def process(
        self,
        msg: Any,
        kwargs: MutableMapping[str, Any],
    ) -> tuple[Any, MutableMapping[str, Any]]:
        logctx = self.engine.log_context
        kwargs["extra"] = {
            **kwargs.get("extra", {}),
            "tick": logctx.tick,
            "tick_log_count": logctx.tick_log_count,
            "racer_repr": logctx.current_racer_repr,
        }
        logctx.inc_log_count()
        return msg, kwargs


class RichMarkupFormatter(logging.Formatter):
    @override
    def format(self, record: logging.LogRecord) -> str:
        tick = getattr(record, "tick", 0)
        tick_log_count = getattr(record, "tick_log_count", 0)
        racer_repr = getattr(record, "racer_repr", "_")

        prefix = f"{tick}.{racer_repr}.{tick_log_count}"
        message = record.getMessage()

        return f"[{COLOR['prefix']}]{prefix:<16}[/{COLOR['prefix']}]  {message}"


class RaceLogHighlighter(Highlighter):
    """Colours racer events; the events themselves are plain text."""

    @override
    def highlight(self, text: Text) -> None:
        text.highlight_regex(r"\bmakes the\b", COLOR["success"])
        text.highlight_regex(r"\bfails the\b", COLOR["failure"])
        text.highlight_regex(r"\btakes \d+ points? of damage\b", COLOR["damage"])
        text.highlight_regex(r"\bis totalled!.*$", COLOR["totalled"])
        text.highlight_regex(r"\bcrosses the start/finish line\b", COLOR["lap"])
        text.highlight_regex(r"\bpulls into the pits\b", COLOR["pits"])
        text.highlight_regex(r"\bwins\b", COLOR["winner"])
        text.highlight_regex(SPEED_PATTERN, COLOR["speed"])
        text.highlight_regex(TURN_PATTERN, COLOR["turn"])


def configure_logging(level: int = logging.INFO) -> None:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    handler = RichHandler(
        markup=True,
        show_path=False,
        show_time=False,
        highlighter=RaceLogHighlighter(),
    )
    handler.setFormatter(RichMarkupFormatter())
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
